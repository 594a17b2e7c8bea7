"""Starlette integration: one correlation id and a standard set of lines per request."""

from __future__ import annotations

import json
import logging
import uuid
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)
from urllib.parse import parse_qsl

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .config import LoggerOptions
from .logger import ContextualLogger

logger = logging.getLogger(__name__)

Payload = Union[str, bytes, bytearray, memoryview]


def new_correlation_id() -> str:
    return str(uuid.uuid4())


def _serialize(value: Any) -> str:
    # No fallback: failures here belong to the host's error handling.
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    try:
        return len(value) == 0
    except TypeError:
        return False


def _multi_dict(items: Iterable[Tuple[str, str]]) -> Dict[str, Union[str, List[str]]]:
    """Collapse repeated keys into lists, the way query parsers usually do."""

    result: Dict[str, Union[str, List[str]]] = {}
    for key, value in items:
        if key not in result:
            result[key] = value
            continue
        existing = result[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            result[key] = [existing, value]
    return result


def _request_target(request: Request) -> str:
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    return target


def _request_headers(request: Request) -> Dict[str, str]:
    return {key: ", ".join(request.headers.getlist(key)) for key in request.headers.keys()}


def _parse_body(request: Request, raw: bytes) -> Any:
    if not raw:
        return None
    content_type = request.headers.get("content-type", "").lower()
    if "json" in content_type:
        try:
            return json.loads(raw)
        except ValueError:
            pass
    elif content_type.startswith("application/x-www-form-urlencoded"):
        return _multi_dict(parse_qsl(raw.decode("utf-8", errors="replace"), keep_blank_values=True))
    return raw.decode("utf-8", errors="replace")


def _payload_text(payload: Payload) -> str:
    if isinstance(payload, str):
        return payload
    return bytes(payload).decode("utf-8", errors="replace")


class RequestLifecycleAdapter:
    """Request-received and response-about-to-be-sent hooks for one logger."""

    def __init__(
        self,
        debug_logger: ContextualLogger,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.debug_logger = debug_logger
        self.id_factory = id_factory or new_correlation_id

    async def on_request(self, request: Request) -> None:
        debug_logger = self.debug_logger
        debug_logger.set_correlation_id(self.id_factory())
        debug_logger.info(f"Request received {request.method} - {_request_target(request)}")
        debug_logger.info(f"Request headers - {_serialize(_request_headers(request))}")

        body = _parse_body(request, await request.body())
        if not _is_empty(body):
            debug_logger.info(f"Request body - {_serialize(body)}")

        query = _multi_dict(request.query_params.multi_items())
        if not _is_empty(query):
            debug_logger.info(f"Request query - {_serialize(query)}")

    def on_send(self, request: Request, payload: Payload) -> None:
        self.debug_logger.info(f"Response Payload - {_payload_text(payload)}")


async def _passthrough(
    chunks: AsyncIterator[Union[str, bytes]],
    on_complete: Callable[[bytes], None],
) -> AsyncIterator[Union[str, bytes]]:
    """Yield *chunks* unchanged and hand the collected body over once exhausted.

    Nothing is reported for a stream that never finishes or is abandoned.
    """

    collected = bytearray()
    async for chunk in chunks:
        collected.extend(chunk if isinstance(chunk, bytes) else chunk.encode("utf-8"))
        yield chunk
    on_complete(bytes(collected))


class DebugLoggerMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, adapter: RequestLifecycleAdapter) -> None:
        super().__init__(app)
        self.adapter = adapter

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        await self.adapter.on_request(request)
        response = await call_next(request)

        if hasattr(response, "body_iterator"):
            response.body_iterator = _passthrough(
                response.body_iterator,
                lambda body: self.adapter.on_send(request, body),
            )
        else:
            self.adapter.on_send(request, response.body)
        return response


def install_debug_logger(
    app: FastAPI,
    *,
    timestamp: Optional[str] = None,
    timezone: Optional[str] = None,
    transports: Optional[Sequence[logging.Handler]] = None,
    colorize: Optional[bool] = None,
    id_factory: Optional[Callable[[], str]] = None,
) -> ContextualLogger:
    """Attach a :class:`ContextualLogger` to *app* as ``app.state.debug_logger``.

    Must be called before the application starts serving, since Starlette
    refuses new middleware afterwards.
    """

    options = LoggerOptions.resolve(
        timestamp=timestamp,
        timezone=timezone,
        transports=transports,
        colorize=colorize,
    )
    debug_logger = ContextualLogger(options)
    app.state.debug_logger = debug_logger
    app.add_middleware(
        DebugLoggerMiddleware,
        adapter=RequestLifecycleAdapter(debug_logger, id_factory=id_factory),
    )
    logger.debug(
        "Debug logger installed timezone=%s timestamp=%s sinks=%d",
        options.timezone,
        options.timestamp,
        len(debug_logger.handlers),
    )
    return debug_logger


def get_debug_logger(request: Request) -> ContextualLogger:
    """FastAPI dependency returning the logger installed on the app."""

    return request.app.state.debug_logger


__all__ = [
    "DebugLoggerMiddleware",
    "RequestLifecycleAdapter",
    "get_debug_logger",
    "install_debug_logger",
    "new_correlation_id",
]
