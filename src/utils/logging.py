"""Logging configuration for the message board."""

import logging
import os
import sys
from collections.abc import Iterable

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Libraries that log every request or form part at DEBUG
_CHATTY_LOGGERS = ("urllib3", "multipart", "python_multipart")


def _parse_level(level: str) -> int:
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric_level


def _set_logger_levels(names: Iterable[str], level: int) -> None:
    for name in names:
        logging.getLogger(name).setLevel(level)


def configure_logging(level: str | None = None, *, access_log: bool = False) -> None:
    """Send all message board and server logs to a single stdout handler.

    Safe to call more than once. Later calls replace the earlier handler.

    :param level: Level name such as ``"DEBUG"``. Defaults to the ``LOG_LEVEL``
        env var, or INFO when unset.
    :param access_log: Keep uvicorn's per-request access lines. When False
        they are raised to WARNING.
    :raises ValueError: If the level name is unknown.
    """
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric_level = _parse_level(level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)

    # Server loggers propagate to root instead of keeping their own handlers
    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True

    logging.getLogger("uvicorn.access").setLevel(
        logging.NOTSET if access_log else logging.WARNING
    )

    _set_logger_levels(_CHATTY_LOGGERS, level=max(numeric_level, logging.INFO))

    logging.getLogger(__name__).info(
        f"Logging configured: level={level_name}, access_log={access_log}"
    )
