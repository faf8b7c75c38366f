from __future__ import annotations

import logging
from typing import Callable

DEBUG_LOGGER_NAME = "prestashop_client_sdk.debug"

DebugSink = Callable[[str, str], None]


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def log_sink(title: str, content: str) -> None:
    get_logger(DEBUG_LOGGER_NAME).info("==== %s ====\n%s", title, content)


class DebugDump:
    """Human-readable request/response dump, active only when enabled."""

    def __init__(self, enabled: bool, sink: DebugSink | None = None) -> None:
        self.enabled = enabled
        self.sink = sink or log_sink

    def emit(self, title: str, content: str) -> None:
        if self.enabled:
            self.sink(title, content)
