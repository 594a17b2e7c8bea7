from __future__ import annotations

import logging
from datetime import datetime, timezone

# 15:30 in Asia/Kolkata
FIXED_NOW = datetime(2024, 3, 5, 10, 0, 0, tzinfo=timezone.utc)
FIXED_STAMP = "Mar-05-2024 15:30:00"


class RecordingHandler(logging.Handler):
    """Sink that keeps every record and its formatted line in memory."""

    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []
        self.lines: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)
        self.lines.append(self.format(record))

    def messages(self) -> list[str]:
        return [record.getMessage() for record in self.records]
