"""Logging for envstack: rich console output plus an optional run log file.

Every module logger is a child of the ``envstack`` package logger and
inherits its level, so one call to ``set_verbosity`` switches the whole
tool between INFO and DEBUG output.
"""
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console()

PACKAGE_LOGGER = "envstack"

LOG_DIR = Path("/var/log/envstack")
LOG_FILE = LOG_DIR / "envstack.log"
FALLBACK_LOG_FILE = Path("/tmp/envstack.log")

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_file_handler: Optional[logging.FileHandler] = None


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def set_verbosity(verbose: bool = False) -> None:
    """Switch every envstack logger (and the run log) to DEBUG or INFO."""
    level = logging.DEBUG if verbose else logging.INFO
    _package_logger().setLevel(level)
    if _file_handler is not None:
        _file_handler.setLevel(level)


def _open_log_file(target: Path) -> logging.FileHandler:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(target)
    except PermissionError:
        # /var/log is root-only on most hosts
        return logging.FileHandler(FALLBACK_LOG_FILE)


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> Path:
    """Mirror envstack log records into a file and apply the verbosity.

    The file handler is attached once per process; later calls only
    change the level.

    Returns:
        Path of the log file actually written to
    """
    global _file_handler

    if _file_handler is None:
        handler = _open_log_file(Path(log_file) if log_file else LOG_FILE)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        _package_logger().addHandler(handler)
        _file_handler = handler
        set_verbosity(verbose)
        _package_logger().info(f"envstack logging initialized: {handler.baseFilename}")
    else:
        set_verbosity(verbose)

    return Path(_file_handler.baseFilename)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``; envstack.* names print through rich."""
    _package_logger()
    return logging.getLogger(name)
