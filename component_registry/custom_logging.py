"""
Logging configuration for the component registry.

Every module obtains its logger through get_logger() so that handlers and
format are consistent across the registry, the lifecycle engine and
components. A manager applies its configured level and log file to the
loggers it owns through setup_logging().
"""

import logging
import os
import sys
from pathlib import Path
from typing import Iterable, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LEVEL_ENV_VAR = "COMPONENT_REGISTRY_LOG_LEVEL"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _resolve_level(level: Optional[str]) -> int:
    if level is None:
        env_level = os.getenv(LEVEL_ENV_VAR, "INFO")
        if str(env_level).upper() not in VALID_LEVELS:
            logging.getLogger(__name__).warning(
                f"Ignoring invalid {LEVEL_ENV_VAR}={env_level!r}, using INFO"
            )
            return logging.INFO
        level = env_level

    if str(level).upper() not in VALID_LEVELS:
        raise ValueError(f"Invalid log level: {level!r} (expected one of {', '.join(VALID_LEVELS)})")
    return getattr(logging, str(level).upper())


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (usually the owning class or component)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL); defaults to
            COMPONENT_REGISTRY_LOG_LEVEL or INFO

    Returns:
        Configured logger instance

    Raises:
        ValueError: If level is not a known level name
    """
    logger = logging.getLogger(name)

    # Don't add handlers if already configured
    if logger.handlers:
        if level is not None:
            logger.setLevel(_resolve_level(level))
        return logger

    logger.setLevel(_resolve_level(level))

    # Handlers pass everything; the logger's own level does the gating
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    return logger


def setup_logging(loggers: Iterable[logging.Logger],
                  log_level: str = "INFO",
                  log_file: Optional[str] = None):
    """
    Apply a level, and optionally a log file, to a set of loggers.

    A file is attached at most once per logger, so repeated calls with the
    same path do not duplicate records.

    Args:
        loggers: Loggers to configure
        log_level: Log level name
        log_file: Optional log file path
    """
    numeric_level = _resolve_level(log_level)

    file_path = None
    if log_file:
        file_path = Path(log_file).resolve()
        file_path.parent.mkdir(parents=True, exist_ok=True)

    for logger in loggers:
        logger.setLevel(numeric_level)
        if file_path is None:
            continue

        attached = any(
            isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == file_path
            for handler in logger.handlers
        )
        if not attached:
            file_handler = logging.FileHandler(file_path)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            logger.addHandler(file_handler)
