"""
patron/utils/logger.py
Rich console logging plus an optional rotating file per logger name.

Env:
  LOG_LEVEL  root level for patron loggers (default INFO)
  LOG_DIR    directory for the rotating files (default ./logs)
  LOG_FILE   set to 0 to keep output on the console only
"""
import logging
import os
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_loggers: dict[str, logging.Logger] = {}
_file_handlers: dict[str, RotatingFileHandler] = {}


def _file_handler(name: str) -> RotatingFileHandler:
    log_dir = os.getenv("LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    # One file per top-level area: "core.groups" → logs/core.log
    stem = name.split(".")[0]
    if stem in _file_handlers:
        return _file_handlers[stem]
    handler = RotatingFileHandler(
        os.path.join(log_dir, f"{stem}.log"),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    _file_handlers[stem] = handler
    return handler


def get_logger(name: str = "patron") -> logging.Logger:
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(f"patron.{name}" if name != "patron" else name)
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    logger.propagate = False

    if not logger.handlers:
        console = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
        console.setLevel(logging.DEBUG)
        logger.addHandler(console)

        if os.getenv("LOG_FILE", "1") != "0":
            logger.addHandler(_file_handler(name))

    _loggers[name] = logger
    return logger
