"""
Buffered Log

Logging collaborator for the startup path. Messages are issued before the
application logger is configured (settings discovery, package scanning,
module loading), so they are kept in order and replayed once a logger is
attached.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple


@dataclass(frozen=True)
class LogRecordEntry:
    """One buffered message: severity, %-style template and its arguments."""
    level: int
    template: str
    args: Tuple[Any, ...] = ()


class BufferedLog:
    """
    Accepts ``(severity, template, *args)`` like ``logging.Logger.log``.

    Until :meth:`attach` is called every message is appended to an ordered
    buffer. ``attach`` flushes the buffer into the logger, in order, and from
    then on messages are forwarded directly.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._buffer: List[LogRecordEntry] = []
        self._logger: Optional[logging.Logger] = None
        if logger is not None:
            self.attach(logger)

    @property
    def attached(self) -> bool:
        return self._logger is not None

    @property
    def pending(self) -> List[LogRecordEntry]:
        """Messages still waiting for a logger (copy)."""
        return list(self._buffer)

    def log(self, level: int, template: str, *args: Any) -> None:
        if self._logger is None:
            self._buffer.append(LogRecordEntry(level, template, args))
        else:
            self._logger.log(level, template, *args)

    def debug(self, template: str, *args: Any) -> None:
        self.log(logging.DEBUG, template, *args)

    def info(self, template: str, *args: Any) -> None:
        self.log(logging.INFO, template, *args)

    def warning(self, template: str, *args: Any) -> None:
        self.log(logging.WARNING, template, *args)

    def error(self, template: str, *args: Any) -> None:
        self.log(logging.ERROR, template, *args)

    def attach(self, logger: logging.Logger) -> None:
        """Attach the real logger and replay buffered messages in order."""
        self._logger = logger
        pending, self._buffer = self._buffer, []
        for entry in pending:
            logger.log(entry.level, entry.template, *entry.args)
