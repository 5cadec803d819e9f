from __future__ import annotations

import logging
import os

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_NAME = "netflix_client"


def configure_logging(level: str | int | None = None) -> None:
    if level is None:
        level = os.getenv("NETFLIX_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.strip().upper() or "INFO"

    logger = logging.getLogger("netflix_client")
    logger.setLevel(level)

    if any(handler.get_name() == _HANDLER_NAME for handler in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
