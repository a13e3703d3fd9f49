# Logging configuration - RotatingFileHandler, structured format, error alerting

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Callable, Union

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_FILE = LOG_DIR / "orderline.log"
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
LOG_BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ErrorAlertHandler(logging.Handler):
    """Handler that passes ERROR and CRITICAL records to callback(message, level)."""

    def __init__(self, callback: Optional[Callable[[str, str], None]] = None):
        super().__init__(level=logging.ERROR)
        self.callback = callback

    def emit(self, record: logging.LogRecord):
        if record.levelno >= logging.ERROR and self.callback:
            try:
                msg = self.format(record)
                self.callback(msg, record.levelname)
            except Exception:
                self.handleError(record)


def parse_level(level: Union[int, str]) -> int:
    """Accept 10 or "DEBUG"; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    log_path: Optional[Union[str, Path]] = None,
    max_bytes: int = LOG_MAX_BYTES,
    backup_count: int = LOG_BACKUP_COUNT,
    console: bool = True,
    level: Union[int, str] = logging.INFO,
    error_callback: Optional[Callable[[str, str], None]] = None,
) -> ErrorAlertHandler:
    """
    Configure structured logging with file rotation and optional console.
    Returns the alert handler so callers can swap its callback later.
    """
    log_path = Path(log_path or LOG_FILE)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    root.setLevel(parse_level(level))
    # Avoid duplicate handlers when called multiple times
    for h in list(root.handlers):
        root.removeHandler(h)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    alert_handler = ErrorAlertHandler(error_callback)
    alert_handler.setFormatter(formatter)
    root.addHandler(alert_handler)
    return alert_handler
