"""
JobLog — job-scoped log lines for the host.

The host shows these lines next to the job, so every component writes
through a JobLog instead of printing. Without a host callback the lines
go to the ``reelnotify.job`` logger at their own level; with one, they
are mirrored there at DEBUG.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

LogSink = Callable[[str], None]

logger = logging.getLogger("reelnotify.job")


class JobLog:
    """Forwards messages to an optional host callback and to logging."""

    def __init__(self, sink: Optional[LogSink] = None) -> None:
        self.sink = sink

    def __call__(self, message: str, level: int = logging.INFO) -> None:
        if self.sink is None:
            logger.log(level, message)
            return
        logger.debug(message)
        try:
            self.sink(message)
        except Exception:
            logger.exception("Job log sink failed")

    def info(self, message: str) -> None:
        self(message, logging.INFO)

    def warning(self, message: str) -> None:
        self(message, logging.WARNING)

    def error(self, message: str) -> None:
        self(message, logging.ERROR)
