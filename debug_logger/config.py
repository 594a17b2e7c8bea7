"""Option resolution for the debug logger."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from pydantic_settings import BaseSettings, SettingsConfigDict

from .timefmt import load_zone

logger = logging.getLogger(__name__)

DEFAULT_TIMESTAMP = "MMM-DD-YYYY HH:mm:ss"
DEFAULT_TIMEZONE = "Asia/Kolkata"
DEFAULT_LOGGER_NAME = "debug_logger.requests"


class DebugLoggerSettings(BaseSettings):
    """Environment overrides, e.g. ``DEBUG_LOGGER_TIMEZONE=UTC``."""

    model_config = SettingsConfigDict(
        env_prefix="DEBUG_LOGGER_",
        env_file=".env",
        extra="ignore",
    )

    timestamp: Optional[str] = None
    timezone: Optional[str] = None
    colorize: Optional[bool] = None


def get_settings() -> DebugLoggerSettings:
    settings = DebugLoggerSettings()
    logger.debug("Debug logger settings loaded: %s", settings.model_dump())
    return settings


@dataclass(slots=True)
class LoggerOptions:
    """Formatting configuration owned by one :class:`ContextualLogger`.

    ``transports`` are extra ``logging.Handler`` sinks appended after the
    default console sink. ``colorize=None`` colours the console only when it
    is attached to a terminal.
    """

    timestamp: str = DEFAULT_TIMESTAMP
    timezone: str = DEFAULT_TIMEZONE
    transports: List[logging.Handler] = field(default_factory=list)
    colorize: Optional[bool] = None
    name: str = DEFAULT_LOGGER_NAME

    def __post_init__(self) -> None:
        # Fail at construction rather than on the first log call.
        load_zone(self.timezone)

    @classmethod
    def resolve(
        cls,
        *,
        timestamp: Optional[str] = None,
        timezone: Optional[str] = None,
        transports: Optional[Sequence[logging.Handler]] = None,
        colorize: Optional[bool] = None,
        name: Optional[str] = None,
        settings: Optional[DebugLoggerSettings] = None,
    ) -> "LoggerOptions":
        """Merge explicit arguments over environment settings over defaults.

        Each option falls back on its own, so overriding one never resets
        another. Empty strings count as unset.
        """

        settings = settings or get_settings()
        if colorize is None:
            colorize = settings.colorize
        return cls(
            timestamp=timestamp or settings.timestamp or DEFAULT_TIMESTAMP,
            timezone=timezone or settings.timezone or DEFAULT_TIMEZONE,
            transports=list(transports or []),
            colorize=colorize,
            name=name or DEFAULT_LOGGER_NAME,
        )


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "DEFAULT_TIMESTAMP",
    "DEFAULT_TIMEZONE",
    "DebugLoggerSettings",
    "LoggerOptions",
    "get_settings",
]
