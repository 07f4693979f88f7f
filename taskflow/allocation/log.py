"""loguru setup for the quota service and the CLI.

Records emitted through stdlib ``logging`` (uvicorn, SQLAlchemy, Alembic) are
forwarded to loguru so that one sink and one format cover the process.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Per-request access lines and SQL echo; allocation events matter more.
_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "sqlalchemy.pool")


class _StdlibToLoguru(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so the record points at the caller.
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO") -> None:
    """Route all process logging through loguru at *level*.

    Safe to call more than once; each call replaces the previous sinks.
    """
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    logging.basicConfig(handlers=[_StdlibToLoguru()], level=0, force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug("loguru sink installed at {}", level)
