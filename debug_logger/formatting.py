"""Record enrichment and line rendering for the debug logger."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from enum import IntEnum
from typing import Any, Callable, Optional, TextIO
from zoneinfo import ZoneInfo

import colorlog

from .timefmt import render_timestamp

UNKNOWN = "unknown"

LINE_FORMAT = (
    "%(level_text)s   %(timestamp_text)s    %(call_file)s:%(call_line)s     %(reqid)s     %(message)s"
)

LEVEL_COLORS = {
    "DEBUG": "blue",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


class Level(IntEnum):
    FATAL = logging.CRITICAL
    ERROR = logging.ERROR
    WARN = logging.WARNING
    INFO = logging.INFO
    DEBUG = logging.DEBUG


def level_text(levelno: int, fallback: str = "") -> str:
    try:
        return Level(levelno).name
    except ValueError:
        return (fallback or logging.getLevelName(levelno)).upper()


def _fallback_serializer(value: Any) -> str:
    return repr(value)


def serialize_message(message: Any) -> str:
    """Return *message* as text; never raises for odd values."""

    if isinstance(message, str):
        return message
    try:
        return json.dumps(
            message,
            default=_fallback_serializer,
            ensure_ascii=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError, RecursionError):
        return str(message)


class RecordEnricher(logging.Filter):
    """Stamps level, timestamp, call-site and correlation id on each record."""

    def __init__(
        self,
        *,
        pattern: str,
        zone: ZoneInfo,
        correlation_id: Callable[[], Optional[str]],
        clock: Callable[[], datetime],
    ) -> None:
        super().__init__()
        self.pattern = pattern
        self.zone = zone
        self._correlation_id = correlation_id
        self._clock = clock

    def filter(self, record: logging.LogRecord) -> bool:
        record.level_text = level_text(record.levelno, record.levelname)
        record.timestamp_text = render_timestamp(self.pattern, self._clock(), self.zone)

        # logging reports "(unknown file)" / line 0 when it cannot walk the stack.
        known = bool(record.lineno) and record.pathname != "(unknown file)"
        record.call_file = os.path.basename(record.pathname) if known else UNKNOWN
        record.call_line = str(record.lineno) if known else UNKNOWN

        correlation_id = self._correlation_id()
        record.correlation_id = correlation_id
        record.reqid = correlation_id or ""
        return True


class LineFormatter(logging.Formatter):
    """Plain single-line rendering used by file and network sinks."""

    def __init__(self) -> None:
        super().__init__(LINE_FORMAT)


class ColorLineFormatter(colorlog.ColoredFormatter):
    """Console rendering; only the level text carries colour."""

    def __init__(self, stream: Optional[TextIO] = None, colorize: Optional[bool] = None) -> None:
        super().__init__(
            LINE_FORMAT.replace("%(level_text)s", "%(log_color)s%(level_text)s%(reset)s", 1),
            log_colors=LEVEL_COLORS,
            reset=False,
            stream=stream,
            no_color=colorize is False,
            force_color=colorize is True,
        )


class JsonLineFormatter(logging.Formatter):
    """One compact JSON object per record, for machine-read sinks."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": getattr(record, "level_text", level_text(record.levelno, record.levelname)),
            "timestamp": getattr(record, "timestamp_text", self.formatTime(record)),
            "file": getattr(record, "call_file", UNKNOWN),
            "line": getattr(record, "call_line", UNKNOWN),
            "correlation_id": getattr(record, "correlation_id", None),
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


__all__ = [
    "LINE_FORMAT",
    "ColorLineFormatter",
    "JsonLineFormatter",
    "Level",
    "LineFormatter",
    "RecordEnricher",
    "level_text",
    "serialize_message",
]
