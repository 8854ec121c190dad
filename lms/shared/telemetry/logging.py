"""Process-wide logging setup (stdout, one format for app and libraries)."""

import logging
import sys

from lms.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Chatty at INFO; their warnings and errors still come through.
QUIET_LOGGERS = ("aiosmtplib", "botocore", "boto3", "httpx", "s3transfer")


def setup_logging() -> None:
    """Log to stdout at DEBUG when settings.debug is set, INFO otherwise.

    Cache hits and misses are logged at DEBUG by the cache policy, so debug
    mode is also the way to see read-through behaviour.
    """
    level = logging.DEBUG if get_settings().debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger; call with __name__."""
    return logging.getLogger(name)
