import logging
import os
import sys
from typing import Optional

from stockscreen.core.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _shared_file_handler() -> Optional[logging.Handler]:
    """File handler for LOG_FILE, created once and shared by every Logger."""
    if Logger._file_handler is not None or not settings.LOG_FILE:
        return Logger._file_handler

    directory = os.path.dirname(settings.LOG_FILE) or "."
    if not os.path.isdir(directory):
        return None
    try:
        handler = logging.FileHandler(settings.LOG_FILE)
    except OSError:
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    Logger._file_handler = handler
    return handler


class Logger:
    """Thin per-module wrapper: stdout always, LOG_FILE when configured."""

    _file_handler: Optional[logging.Handler] = None

    def __init__(self, name: str):
        self.logger = logging.getLogger(f"stockscreen.{name}")
        self.logger.setLevel(settings.LOG_LEVEL.upper())
        self.logger.propagate = False

        if not self.logger.handlers:
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(console)

            file_handler = _shared_file_handler()
            if file_handler:
                self.logger.addHandler(file_handler)

    def info(self, msg: str):
        self.logger.info(msg)

    def warn(self, msg: str):
        self.logger.warning(msg)

    def error(self, msg: str, exc: Exception = None):
        self.logger.error(msg, exc_info=exc)

    def debug(self, msg: str):
        self.logger.debug(msg)
