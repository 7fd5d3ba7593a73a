"""
Configuration management for Playwise
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from ..domain.recommend.scorer import RecommendationWeights
from ..domain.search.sorting import SORT_ORDERS

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/playwise/playwise.log)
    )
    max_file_size_mb: int = 10  # Maximum log file size before rotation
    backup_count: int = 5  # Number of rotated files to keep
    console_output: bool = False  # Also log to stderr

    def validate(self) -> None:
        """Validate logging configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: '{self.level}'. Valid levels are: {LOG_LEVELS}"
            )
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count cannot be negative")


@dataclass
class CatalogConfig:
    """Configuration for catalog listing and search."""

    snapshot_path: Optional[str] = None  # Default JSON snapshot for the CLI
    default_sort_key: str = "created_at"
    default_order: str = "desc"
    page_size: Optional[int] = None  # None = no pagination

    def validate(self) -> None:
        """Validate catalog configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.default_order not in SORT_ORDERS:
            raise ValueError(
                f"Invalid default order: '{self.default_order}'. "
                f"Valid orders are: {SORT_ORDERS}"
            )
        if self.page_size is not None and self.page_size <= 0:
            raise ValueError("page_size must be positive")


@dataclass
class RecommendationConfig:
    """Configuration for the recommendation scorer."""

    default_limit: int = 10
    play_weight: float = 0.6
    genre_weight: float = 0.4
    liked_weight: float = 0.1

    def weights(self) -> RecommendationWeights:
        return RecommendationWeights(
            play=self.play_weight, genre=self.genre_weight, liked=self.liked_weight
        )

    def validate(self) -> None:
        """Validate recommendation configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.default_limit <= 0:
            raise ValueError("default_limit must be positive")
        self.weights().validate()


@dataclass
class MoodConfig:
    """Configuration for mood-based listing."""

    filter_limit: int = 20
    auto_detect: bool = True  # Classify unlabelled tracks by genre when filtering

    def validate(self) -> None:
        """Validate mood configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.filter_limit <= 0:
            raise ValueError("filter_limit must be positive")


@dataclass
class Config:
    """Main configuration object."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    recommendations: RecommendationConfig = field(default_factory=RecommendationConfig)
    moods: MoodConfig = field(default_factory=MoodConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "playwise"
    return Path.home() / ".config" / "playwise"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "playwise"
    return Path.home() / ".local" / "share" / "playwise"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/playwise (or ~/.config/playwise)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Playwise Configuration

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/playwise/playwise.log)
# log_file = "/path/to/custom/playwise.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of rotated log files to keep
backup_count = 5

# Also output logs to stderr (useful for debugging)
console_output = false

[catalog]
# JSON catalog snapshot used when --snapshot is not given
# snapshot_path = "~/playwise/catalog.json"

# Default listing order when not searching
default_sort_key = "created_at"
default_order = "desc"

# Page size for listings (omit for no pagination)
# page_size = 20

[recommendations]
# Number of tracks to recommend
default_limit = 10

# Score = play_weight * popularity + genre_weight * genre match (+ liked_weight if liked)
play_weight = 0.6
genre_weight = 0.4
liked_weight = 0.1

[moods]
# Number of tracks returned when filtering by mood
filter_limit = 20

# Classify unlabelled tracks by genre when filtering
auto_detect = true
""".strip()


def _section(
    toml_data: dict[str, Any], name: str, cls: type, default: Any
) -> Any:
    """Build one config section, falling back to defaults on invalid values."""
    if name not in toml_data:
        return default

    data = toml_data[name]
    if not isinstance(data, dict):
        logger.warning(f"Invalid [{name}] configuration: expected a table. Using defaults.")
        return default

    known = {k: v for k, v in data.items() if k in default.__dataclass_fields__}
    unknown = sorted(set(data) - set(known))
    if unknown:
        logger.warning(f"Ignoring unknown [{name}] config keys: {', '.join(unknown)}")

    try:
        section = cls(**known)
        section.validate()
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid [{name}] configuration: {e}. Using defaults.")
        return default
    return section


def _apply_env_overrides(config: Config) -> Config:
    level = os.environ.get("PLAYWISE_LOG_LEVEL")
    if level:
        if level.upper() in LOG_LEVELS:
            config.logging.level = level.upper()
        else:
            logger.warning(f"Ignoring invalid PLAYWISE_LOG_LEVEL: {level}")

    snapshot = os.environ.get("PLAYWISE_SNAPSHOT")
    if snapshot:
        config.catalog.snapshot_path = snapshot

    return config


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from file, or defaults when there is none.

    Environment variables override TOML values:
    - PLAYWISE_LOG_LEVEL
    - PLAYWISE_SNAPSHOT

    A .env file in the config directory is loaded first if present.
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = path if path is not None else get_config_path()

    if not config_path.exists():
        logger.debug(f"No configuration at {config_path}, using defaults")
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}")
        logger.warning("Using default configuration.")
        return _apply_env_overrides(Config())

    config = Config(
        logging=_section(toml_data, "logging", LoggingConfig, LoggingConfig()),
        catalog=_section(toml_data, "catalog", CatalogConfig, CatalogConfig()),
        recommendations=_section(
            toml_data, "recommendations", RecommendationConfig, RecommendationConfig()
        ),
        moods=_section(toml_data, "moods", MoodConfig, MoodConfig()),
    )

    if config.catalog.snapshot_path:
        config.catalog.snapshot_path = str(Path(config.catalog.snapshot_path).expanduser())

    logger.debug(f"Loaded configuration from {config_path}")
    return _apply_env_overrides(config)
