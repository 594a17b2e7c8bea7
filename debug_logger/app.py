"""Application factory for a minimal service wired with the debug logger."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Sequence

from fastapi import Body, Depends, FastAPI
from fastapi.responses import PlainTextResponse

from .logger import ContextualLogger
from .middleware import get_debug_logger, install_debug_logger


def create_app(
    *,
    timestamp: Optional[str] = None,
    timezone: Optional[str] = None,
    transports: Optional[Sequence[logging.Handler]] = None,
    colorize: Optional[bool] = None,
    id_factory: Optional[Callable[[], str]] = None,
) -> FastAPI:
    """Instantiate the FastAPI application with the debug logger installed."""

    app = FastAPI(title="Debug Logger")
    install_debug_logger(
        app,
        timestamp=timestamp,
        timezone=timezone,
        transports=transports,
        colorize=colorize,
        id_factory=id_factory,
    )

    @app.get("/health", response_class=PlainTextResponse)
    async def health() -> str:
        return "OK"

    @app.post("/echo")
    async def echo(
        payload: Dict[str, Any] = Body(default_factory=dict),
        debug_logger: ContextualLogger = Depends(get_debug_logger),
    ) -> Dict[str, Any]:
        debug_logger.debug({"echo": payload})
        return {"correlation_id": debug_logger.get_correlation_id(), "payload": payload}

    return app


__all__ = ["create_app"]
