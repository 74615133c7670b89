"""
Structured Logging Configuration

All modules log under the ``dental_ai`` package logger. Console lines are
colored per level and tagged with the pipeline stage when the record comes
from a timed stage thread; the optional file handler uses a plain
pipe-separated format.
"""
import logging
import sys
from typing import Optional
from datetime import datetime, timezone

PACKAGE_LOGGER = "dental_ai"

# Timed pipeline stages run on threads named "dental-<stage>"
STAGE_THREAD_PREFIX = "dental-"

LEVEL_COLORS = {
    'DEBUG': '\033[36m',     # Cyan
    'INFO': '\033[32m',      # Green
    'WARNING': '\033[33m',   # Yellow
    'ERROR': '\033[31m',     # Red
    'CRITICAL': '\033[35m',  # Magenta
}
RESET = '\033[0m'

FILE_FORMAT = '%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s'


def _short_name(name: str) -> str:
    prefix = PACKAGE_LOGGER + "."
    return name[len(prefix):] if name.startswith(prefix) else name


def _stage_of(record: logging.LogRecord) -> Optional[str]:
    thread_name = record.threadName or ""
    if thread_name.startswith(STAGE_THREAD_PREFIX):
        return thread_name[len(STAGE_THREAD_PREFIX):]
    return None


class StructuredFormatter(logging.Formatter):
    """One line per record: UTC timestamp, level, module, optional stage, message."""

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        record.timestamp = datetime.now(timezone.utc).isoformat()
        color = LEVEL_COLORS.get(record.levelname, RESET) if self.use_color else ""
        reset = RESET if self.use_color else ""

        stage = _stage_of(record)
        stage_tag = f"<{stage}> " if stage else ""

        line = (
            f"{color}[{record.timestamp}] {record.levelname:8} "
            f"[{_short_name(record.name)}] {stage_tag}{record.getMessage()}{reset}"
        )
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``dental_ai`` package logger; the root logger is left alone.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional file path for log output

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter(use_color=sys.stdout.isatty()))
    package_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        package_logger.addHandler(file_handler)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass ``__name__``); inherits the package configuration."""
    return logging.getLogger(name)
