from __future__ import annotations

import pytest

from debug_logger.config import LoggerOptions
from debug_logger.logger import ContextualLogger

from .support import FIXED_NOW, RecordingHandler


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DEBUG_LOGGER_TIMESTAMP", "DEBUG_LOGGER_TIMEZONE", "DEBUG_LOGGER_COLORIZE"):
        monkeypatch.delenv(name, raising=False)


# Force anyio to use ONLY asyncio, so it doesn't try to pull in trio
@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def sink() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def debug_logger(sink: RecordingHandler):
    instance = ContextualLogger(
        LoggerOptions(transports=[sink], colorize=False),
        clock=lambda: FIXED_NOW,
    )
    yield instance
    instance.close()
