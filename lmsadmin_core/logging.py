"""
Loguru setup for the admin console.

Standard library records (uvicorn, fastapi, httpx) are forwarded into
loguru, and every message is scrubbed of backend credentials before it
reaches a sink: tenant keys are JWTs and must never land in logs.
"""

import logging
import re
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# Library loggers taken over from their own handlers, with the floor they log at.
# httpx reports every request at INFO, which drowns a recursive listing.
FORWARDED_LOGGERS = {
    "uvicorn": logging.NOTSET,
    "uvicorn.access": logging.NOTSET,
    "uvicorn.error": logging.NOTSET,
    "fastapi": logging.NOTSET,
    "httpx": logging.WARNING,
}

_JWT = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]+")
_BEARER = re.compile(r"(?i)(bearer\s+)\S+")


def redact_credentials(message: str) -> str:
    """Mask JWT-shaped tokens and bearer values in ``message``."""
    return _BEARER.sub(r"\1***", _JWT.sub("***", message))


def _scrub(record):
    record["message"] = redact_credentials(record["message"])


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, keeping the caller's location."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO"):
    """
    Make loguru the only sink, at ``level``.

    Args:
        level: Minimum level written to stdout (LOG_LEVEL setting).
    """
    logger.remove()
    logger.configure(patcher=_scrub)
    logger.add(sys.stdout, format=LOG_FORMAT, level=level.upper(), colorize=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name, floor in FORWARDED_LOGGERS.items():
        forwarded = logging.getLogger(name)
        forwarded.handlers = [InterceptHandler()]
        forwarded.propagate = False
        forwarded.setLevel(floor)

    logger.info(f"Logging ready (level={level.upper()})")
