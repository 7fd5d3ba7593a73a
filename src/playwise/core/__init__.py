"""Core infrastructure layer - no business logic of its own.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging setup (Loguru)
- Console management (Rich)
"""

# Configuration
from .config import (
    CatalogConfig,
    Config,
    LoggingConfig,
    MoodConfig,
    RecommendationConfig,
    create_default_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    load_config,
)

# Console
from .console import get_console, get_error_console, print_error, safe_print

# Logging
from .logging import get_log_file_path, setup_logging, setup_logging_from_config

__all__ = [
    # Config
    "Config",
    "LoggingConfig",
    "CatalogConfig",
    "RecommendationConfig",
    "MoodConfig",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "create_default_config",
    # Console
    "get_console",
    "get_error_console",
    "print_error",
    "safe_print",
    # Logging
    "get_log_file_path",
    "setup_logging",
    "setup_logging_from_config",
]
