"""
Helper utilities for WeightGraph.

This module provides foundational functions for directory management, logging setup,
and value formatting used across the application.
"""

import os
import sys
import logging
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from weightgraph import constants
from weightgraph.core.units import WeightUnit

# Thread lock for logging setup
_logging_lock: threading.Lock = threading.Lock()


def get_app_data_path() -> Path:
    """
    Retrieve (and create) the application data directory.

    Uses %APPDATA% where it is set, otherwise the home directory.
    """
    logger: logging.Logger = logging.getLogger(__name__)
    appdata: Optional[str] = os.getenv("APPDATA")
    if not appdata:
        appdata = os.path.expanduser("~")
    path: Path = Path(appdata) / constants.app.APP_NAME
    try:
        path.mkdir(parents=True, exist_ok=True)
        return path
    except PermissionError as e:
        logger.error("Permission denied creating app data directory %s: %s", path, e)
        raise PermissionError(f"Cannot access app data directory: {path}. Please check permissions.") from e
    except OSError as e:
        logger.error("Failed to create app data directory %s: %s", path, e)
        raise OSError(f"Error with app data directory: {path}. Check disk space or path validity.") from e


def setup_logging(log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure logging with both a rotating file handler and a console handler in a thread-safe manner.

    Args:
        log_dir: Directory for the log file; defaults to the application data directory.

    Returns:
        logging.Logger: The configured application logger.
    """
    logger: logging.Logger = logging.getLogger(constants.app.APP_NAME)
    with _logging_lock:
        if logger.handlers:
            return logger

        is_production = os.environ.get(constants.app.ENV_VAR_PROD_MODE, "").lower() == "true"
        logger.setLevel(constants.logs.PRODUCTION_LOG_LEVEL if is_production else logging.DEBUG)

        log_formatter = logging.Formatter(fmt=constants.logs.LOG_FORMAT, datefmt=constants.logs.LOG_DATE_FORMAT)

        file_log_level = constants.logs.PRODUCTION_LOG_LEVEL if is_production else constants.logs.FILE_LOG_LEVEL
        log_file_path: Optional[Path] = None
        try:
            log_file_path = (log_dir or get_app_data_path()) / constants.logs.LOG_FILENAME
            file_handler = RotatingFileHandler(
                log_file_path,
                maxBytes=constants.logs.MAX_LOG_SIZE,
                backupCount=constants.logs.LOG_BACKUP_COUNT,
                encoding='utf-8',
                delay=True  # Delays opening the file until the first log message
            )
            file_handler.setFormatter(log_formatter)
            file_handler.setLevel(file_log_level)
            logger.addHandler(file_handler)
        except (PermissionError, OSError) as e:
            print(f"CRITICAL: Failed to set up file logging at {log_file_path}: {e}. File logging will be disabled.",
                  file=sys.stderr)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(log_formatter)
        console_handler.setLevel(constants.logs.PRODUCTION_LOG_LEVEL if is_production else constants.logs.CONSOLE_LOG_LEVEL)
        logger.addHandler(console_handler)

        if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
            logger.info("File logging target: %s, Level: %s", log_file_path, logging.getLevelName(file_log_level))
        else:
            logger.warning("File logging is disabled; logging to console only.")
    return logger


def format_weight(value: float, unit: WeightUnit, decimals: int = 1) -> str:
    """
    Format a weight that is already expressed in `unit`.

    Examples:
        >>> format_weight(70.0, WeightUnit.KILOGRAM)
        '70.0 kg'
        >>> format_weight(154.3234, WeightUnit.POUND)
        '154.3 lb'
    """
    return f"{value:.{decimals}f} {unit.symbol}"
