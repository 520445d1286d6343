# app/logging_config.py
# Role: Process-wide logging setup plus the request-logging middleware.

import logging

from fastapi import Request

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def setup_logging(level: str = "info") -> None:
    """
    Configure the root logger once. Unknown level names fall back to info.
    """
    logging.basicConfig(
        level=_LEVELS.get((level or "").lower(), logging.INFO),
        format=LOG_FORMAT,
    )


request_logger = logging.getLogger("portfolio.requests")


async def log_requests(request: Request, call_next):
    """HTTP middleware: one line per incoming request."""
    request_logger.info("Incoming request: %s %s", request.method, request.url.path)
    return await call_next(request)
