from __future__ import annotations

import json
import logging

import pytest

from debug_logger.formatting import (
    ColorLineFormatter,
    JsonLineFormatter,
    LineFormatter,
    RecordEnricher,
    level_text,
    serialize_message,
)
from debug_logger.timefmt import load_zone

from .support import FIXED_NOW, FIXED_STAMP


def _enriched(
    *,
    level: int = logging.INFO,
    pathname: str = "/srv/app/views.py",
    lineno: int = 17,
    msg: str = "hello",
    correlation_id: str | None = "req-1",
) -> logging.LogRecord:
    record = logging.LogRecord("test", level, pathname, lineno, msg, None, None)
    enricher = RecordEnricher(
        pattern="MMM-DD-YYYY HH:mm:ss",
        zone=load_zone("Asia/Kolkata"),
        correlation_id=lambda: correlation_id,
        clock=lambda: FIXED_NOW,
    )
    assert enricher.filter(record) is True
    return record


@pytest.mark.parametrize(
    "value,expected",
    [
        ("already text", "already text"),
        ({"a": 1}, '{"a":1}'),
        ([1, "two"], '[1,"two"]'),
        (None, "null"),
        (42, "42"),
        ({"city": "Zürich"}, '{"city":"Zürich"}'),
    ],
)
def test_serialize_message(value: object, expected: str) -> None:
    assert serialize_message(value) == expected


@pytest.mark.parametrize(
    "levelno,expected",
    [
        (logging.CRITICAL, "FATAL"),
        (logging.WARNING, "WARN"),
        (logging.DEBUG, "DEBUG"),
        (25, "LEVEL 25"),
    ],
)
def test_level_text(levelno: int, expected: str) -> None:
    assert level_text(levelno) == expected


def test_enricher_strips_path_to_basename() -> None:
    record = _enriched()

    assert record.call_file == "views.py"
    assert record.call_line == "17"
    assert record.timestamp_text == FIXED_STAMP
    assert record.reqid == "req-1"


def test_enricher_falls_back_to_unknown_call_site() -> None:
    record = _enriched(pathname="(unknown file)", lineno=0, correlation_id=None)

    assert record.call_file == "unknown"
    assert record.call_line == "unknown"
    assert record.correlation_id is None
    assert record.reqid == ""


def test_plain_line_layout() -> None:
    line = LineFormatter().format(_enriched(level=logging.ERROR))

    assert line == f"ERROR   {FIXED_STAMP}    views.py:17     req-1     hello"


def test_forced_colour_wraps_only_the_level() -> None:
    plain = LineFormatter().format(_enriched())
    coloured = ColorLineFormatter(colorize=True).format(_enriched())

    assert coloured.startswith("\x1b[")
    assert "INFO\x1b[0m" in coloured
    assert coloured.endswith(plain[len("INFO"):])


def test_colour_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FORCE_COLOR", raising=False)

    line = ColorLineFormatter(colorize=False).format(_enriched())

    assert "\x1b[" not in line
    assert line == LineFormatter().format(_enriched())


def test_json_line_formatter() -> None:
    payload = json.loads(JsonLineFormatter().format(_enriched(level=logging.CRITICAL)))

    assert payload == {
        "level": "FATAL",
        "timestamp": FIXED_STAMP,
        "file": "views.py",
        "line": "17",
        "correlation_id": "req-1",
        "message": "hello",
    }
