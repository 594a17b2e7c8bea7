"""Contextual logger that tags every line with a correlation id and call-site.

Usage::

    debug_logger = ContextualLogger(LoggerOptions())
    debug_logger.set_correlation_id("3f1c...").info({"order": 42})
    # INFO   Mar-05-2024 15:30:00    views.py:17     3f1c...     {"order":42}

The correlation id lives in a :class:`~contextvars.ContextVar`, so each
asyncio task (and therefore each ASGI request) sees only the id set in its
own context. Within one context the slot is last-writer-wins.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Callable, List, Optional, Union

from .config import LoggerOptions
from .formatting import ColorLineFormatter, Level, LineFormatter, RecordEnricher, serialize_message
from .timefmt import load_zone, utc_now


def _level_number(level: Union[int, str]) -> int:
    if not isinstance(level, str):
        return int(level)
    name = level.upper()
    if name in Level.__members__:
        return Level[name]
    number = logging.getLevelName(name)
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return number


class ContextualLogger:
    """Leveled logger bound to one set of :class:`LoggerOptions`."""

    def __init__(
        self,
        options: Optional[LoggerOptions] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.options = options or LoggerOptions()
        self._correlation_id: ContextVar[Optional[str]] = ContextVar(
            f"{self.options.name}.correlation_id", default=None
        )

        self._console = logging.StreamHandler(sys.stdout)
        self._console.setLevel(logging.DEBUG)
        self._console.setFormatter(
            ColorLineFormatter(stream=self._console.stream, colorize=self.options.colorize)
        )
        self.handlers: List[logging.Handler] = [self._console, *self.options.transports]
        for handler in self.handlers:
            if handler.formatter is None:
                handler.setFormatter(LineFormatter())

        # Unregistered, so each instance owns its handlers and filters.
        self._logger = logging.Logger(self.options.name, logging.DEBUG)
        self._logger.propagate = False
        self._logger.addFilter(
            RecordEnricher(
                pattern=self.options.timestamp,
                zone=load_zone(self.options.timezone),
                correlation_id=self.get_correlation_id,
                clock=clock or utc_now,
            )
        )
        for handler in self.handlers:
            self._logger.addHandler(handler)

    def set_correlation_id(self, correlation_id: str) -> "ContextualLogger":
        self._correlation_id.set(correlation_id)
        return self

    def get_correlation_id(self) -> Optional[str]:
        return self._correlation_id.get()

    def log(self, level: Union[int, str], message: Any, *, stacklevel: int = 1) -> None:
        """Emit *message* at *level*, attributed to the caller.

        *level* is a number or a level name such as ``"info"``, ``"warn"`` or
        ``"fatal"``; an unknown name raises ``ValueError``.

        ``stacklevel`` counts frames above the caller, so a helper that wraps
        this logger passes ``stacklevel=2`` to report its own caller instead.
        """

        self._emit(_level_number(level), message, stacklevel + 1)

    def fatal(self, message: Any, *, stacklevel: int = 1) -> None:
        self._emit(Level.FATAL, message, stacklevel + 1)

    def error(self, message: Any, *, stacklevel: int = 1) -> None:
        self._emit(Level.ERROR, message, stacklevel + 1)

    def warn(self, message: Any, *, stacklevel: int = 1) -> None:
        self._emit(Level.WARN, message, stacklevel + 1)

    def info(self, message: Any, *, stacklevel: int = 1) -> None:
        self._emit(Level.INFO, message, stacklevel + 1)

    def debug(self, message: Any, *, stacklevel: int = 1) -> None:
        self._emit(Level.DEBUG, message, stacklevel + 1)

    def _emit(self, level: int, message: Any, stacklevel: int) -> None:
        # +1 skips this frame; logging already skips its own module.
        self._logger.log(int(level), serialize_message(message), stacklevel=stacklevel + 1)

    def close(self) -> None:
        """Detach and close every sink, including supplied transports."""

        for handler in self.handlers:
            self._logger.removeHandler(handler)
            handler.close()


__all__ = ["ContextualLogger"]
