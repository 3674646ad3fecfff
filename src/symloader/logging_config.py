"""
Logging setup for symloader.

Environment:
    SYMLOADER_LOG_LEVEL: Console level (default: INFO)
    SYMLOADER_MACHINE_MODE: Suppress console logs when truthy
    SYMLOADER_FILE_LOGGING: Also log to a rotating file when truthy
    SYMLOADER_FILE_LOG_LEVEL: File level (default: DEBUG)
    SYMLOADER_LOG_DIR: Directory for the log file (default: .symloader/logs)
"""

import sys
import os
from pathlib import Path
from typing import Optional
from loguru import logger

_logging_configured = False

DEFAULT_LOG_DIR = Path(".symloader") / "logs"
LOG_FILE_NAME = "symloader.log"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<yellow>{thread.name}</yellow> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{function}:{line} - {message}"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def _env_level(name: str, default: str) -> str:
    value = os.getenv(name, "").strip().upper()
    return value or default


def setup_logging(
    level: Optional[str] = None,
    suppress_console: Optional[bool] = None,
    enable_file_logging: Optional[bool] = None,
) -> None:
    """
    Configures the global logger once.

    Args:
        level: Console level. If None, read SYMLOADER_LOG_LEVEL.
        suppress_console: If None, check SYMLOADER_MACHINE_MODE.
        enable_file_logging: If None, check SYMLOADER_FILE_LOGGING.
    """
    global _logging_configured

    if _logging_configured:
        return
    _logging_configured = True

    logger.remove()

    if level is None:
        level = _env_level("SYMLOADER_LOG_LEVEL", "INFO")
    if suppress_console is None:
        suppress_console = _env_flag("SYMLOADER_MACHINE_MODE")
    if enable_file_logging is None:
        enable_file_logging = _env_flag("SYMLOADER_FILE_LOGGING")

    if not suppress_console:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if enable_file_logging:
        log_dir = Path(os.getenv("SYMLOADER_LOG_DIR", str(DEFAULT_LOG_DIR)))
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / LOG_FILE_NAME,
            level=_env_level("SYMLOADER_FILE_LOG_LEVEL", "DEBUG"),
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="1 day",
            compression="gz",
            catch=True,
        )


def reset_logging() -> None:
    """Allow setup_logging() to run again (used by tests and the CLI)."""
    global _logging_configured
    _logging_configured = False


setup_logging()
