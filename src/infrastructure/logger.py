"""
Logger Module

Every component logs under one "attendance_sheet" logger tree. Handlers live
on the tree's root only, so reconfiguring (another log file, verbose console)
applies to all components at once, including loggers created at import time.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "attendance_sheet"

# Application log file path (relative to project root)
_LOG_FILE_NAME = "attendance_sheet.log"

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


def configure_logging(
    log_file: Optional[Union[str, Path]] = None,
    verbose: bool = False
) -> logging.Logger:
    """
    (Re)build the console and file handlers of the application logger.

    Args:
        log_file: Log file path. If None, uses attendance_sheet.log in the
            project root
        verbose: Show DEBUG messages (skipped codes, per-row detail) on the
            console as well

    Returns:
        The application root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.setLevel(logging.DEBUG)
    root.propagate = False
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    log_path = Path(log_file) if log_file else _get_project_root() / _LOG_FILE_NAME
    try:
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    except OSError as e:
        # Console logging still works without the file
        root.warning(f"Could not open log file {log_path}: {e}")

    return root


def get_logger(name: str) -> logging.Logger:
    """
    Get the logger of one component (e.g. "ExcelParser").

    The first call sets up the default handlers; messages show up as
    ``attendance_sheet.<name>``.
    """
    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        configure_logging()
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
