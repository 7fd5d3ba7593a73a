"""
Centralized logging configuration for Playwise, using Loguru.

Library code only emits through ``from loguru import logger``; sinks are
configured once by the application entry point.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"
CONSOLE_FORMAT = "{level}: {message}"


def get_log_file_path() -> Path:
    """Get the path to the log file."""
    return get_data_dir() / "playwise.log"


def setup_logging(
    level: str = "INFO",
    log_file_path: Optional[Path] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru sinks for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file_path: Custom log file path (default: ~/.local/share/playwise/playwise.log)
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of rotated files to keep
        console_output: Whether to also output logs to stderr
    """
    log_file = log_file_path if log_file_path else get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler (and anything a previous call added)
    logger.remove()

    logger.add(
        log_file,
        rotation=max_bytes,
        retention=backup_count,
        level=level.upper(),
        format=FILE_FORMAT,
        encoding="utf-8",
        enqueue=False,
    )

    if console_output:
        logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT)

    logger.info(
        f"Logging initialized: {log_file} (level={level}, max_size={max_bytes}, backups={backup_count})"
    )


def setup_logging_from_config(config: LoggingConfig, verbose: bool = False) -> None:
    """Configure logging from the [logging] config section.

    Args:
        config: Logging configuration
        verbose: Force DEBUG output to stderr regardless of config
    """
    setup_logging(
        level="DEBUG" if verbose else config.level,
        log_file_path=Path(config.log_file).expanduser() if config.log_file else None,
        max_bytes=config.max_file_size_mb * 1024 * 1024,
        backup_count=config.backup_count,
        console_output=config.console_output or verbose,
    )
