"""Request-scoped debug logging for FastAPI and Starlette applications."""

from __future__ import annotations

from .config import DEFAULT_TIMESTAMP, DEFAULT_TIMEZONE, DebugLoggerSettings, LoggerOptions
from .formatting import JsonLineFormatter, Level, LineFormatter
from .logger import ContextualLogger
from .middleware import (
    DebugLoggerMiddleware,
    RequestLifecycleAdapter,
    get_debug_logger,
    install_debug_logger,
)

__all__ = [
    "DEFAULT_TIMESTAMP",
    "DEFAULT_TIMEZONE",
    "ContextualLogger",
    "DebugLoggerMiddleware",
    "DebugLoggerSettings",
    "JsonLineFormatter",
    "Level",
    "LineFormatter",
    "LoggerOptions",
    "RequestLifecycleAdapter",
    "get_debug_logger",
    "install_debug_logger",
]
