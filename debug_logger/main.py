"""Entry point for running the example service, e.g. ``uvicorn debug_logger.main:app``."""

from __future__ import annotations

from .app import create_app

app = create_app()


__all__ = ["app", "create_app"]
