"""
Logging setup using Loguru.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir


def get_log_file_path() -> Path:
    """Get the path to the log file."""
    return get_data_dir() / "autodj.log"


def setup_loguru(
    log_file: Optional[Path] = None,
    level: str = "INFO",
    rotation_mb: int = 10,
    retention: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru with a rotating file sink and optional console output.

    Args:
        log_file: Path to log file (default: ~/.local/share/autodj/autodj.log)
        level: Minimum level for logging (DEBUG, INFO, WARNING, ERROR)
        rotation_mb: Maximum size of log file before rotation
        retention: Number of rotated files to keep
        console_output: Whether to also log to stderr
    """
    log_file = log_file if log_file else get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_file,
        rotation=f"{rotation_mb} MB",
        retention=retention,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message} | {extra}",
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def setup_from_config(config: LoggingConfig) -> None:
    """Configure loguru from the [logging] config section."""
    setup_loguru(
        log_file=Path(config.log_file) if config.log_file else None,
        level=config.level,
        rotation_mb=config.max_file_size_mb,
        retention=config.backup_count,
        console_output=config.console_output,
    )
