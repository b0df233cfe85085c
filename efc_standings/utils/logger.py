"""
Logging for the standings engine.

Every ingestion pass, CLI command and API request logs through loguru. The
retrying sheet session logs through the stdlib ``logging`` module
(``urllib3.connectionpool`` retry warnings), so those records are forwarded
into the same sinks.
"""
import logging
import sys
from pathlib import Path

from loguru import logger as _logger

LOG_FILE_PREFIX = "efc_standings"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# stdlib loggers whose records are forwarded into loguru
FORWARDED_LOGGERS = ("urllib3", "requests", "uvicorn")


class _ForwardHandler(logging.Handler):
    """Re-emit stdlib log records through loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def _forward_stdlib(level: str) -> None:
    handler = _ForwardHandler()
    for name in FORWARDED_LOGGERS:
        std = logging.getLogger(name)
        std.handlers = [handler]
        std.setLevel(level)
        std.propagate = False


def log_file_pattern(log_dir: Path, prefix: str = LOG_FILE_PREFIX) -> Path:
    """Daily log file path template understood by loguru."""
    return Path(log_dir) / f"{prefix}_{{time:YYYY-MM-DD}}.log"


def setup_logger(
    log_dir: Path | None = None,
    level: str = "INFO",
    retention: str = "7 days",
    prefix: str = LOG_FILE_PREFIX,
) -> None:
    """
    (Re)configure the shared logger. Calling it again replaces all sinks.

    Args:
        log_dir: Directory for daily rotated, gzipped log files. None skips the file sink.
        level: Minimum level for every sink and for forwarded stdlib loggers.
        retention: How long rotated files are kept.
        prefix: File name prefix inside ``log_dir``.
    """
    _logger.remove()
    _logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_dir is not None:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        _logger.add(
            log_file_pattern(log_dir, prefix),
            level=level,
            format=FILE_FORMAT,
            rotation="1 day",
            retention=retention,
            compression="gz",
        )

    _forward_stdlib(level)


logger = _logger
