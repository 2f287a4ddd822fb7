"""Logging configuration and utilities."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


# Constants
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level:<8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logger(
    log_file: Optional[str] = None, level: str = DEFAULT_LOG_LEVEL
) -> None:
    """Configure loguru with a stderr sink and an append-only file sink.

    Args:
        log_file: Path of the file sink. No file sink is added when empty.
        level: Minimum level for both sinks.
    """
    level = (level or DEFAULT_LOG_LEVEL).upper()

    # Reset and configure stderr output
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if not log_file:
        return

    # Write errors on this sink are caught by loguru and reported to stderr,
    # so a full disk never reaches the request path.
    log_path = Path(log_file)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=level,
            format=LOG_FORMAT,
            mode="a",
            colorize=False,
            catch=True,
        )
    except OSError as e:
        logger.warning("File logging disabled, cannot open {}: {}", log_path, e)
