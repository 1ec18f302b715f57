"""App factory for the greeting service.

- Stores the resolved :class:`ServerConfig` once on ``app.state``
- Registers ``GET /`` (configured message) and ``GET /health`` (liveness)
- Adds request tracing: one trace id per request, echoed in ``X-Trace-Id``
- Disables the OpenAPI and docs routes so only the two endpoints exist
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable, Final

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse

from .domain.config import ServerConfig
from .observability import TRACE_ID, log_debug, make_event, new_trace_id

TRACE_HEADER: Final[str] = "X-Trace-Id"
HEALTH_BODY: Final[str] = "OK"


def create_app(config: ServerConfig) -> FastAPI:
    """Build the ASGI application serving *config*.

    Why
    ----
    The bootstrap and the tests need the same routes and tracing around one
    resolved configuration, without a module-level app bound at import time.

    What
    ----
    * ``GET /`` returns ``config.message`` as ``text/plain``, unmodified.
    * ``GET /health`` returns ``OK`` and never reads the configuration.
    * Every response carries the request's trace id in ``X-Trace-Id``.

    Parameters
    ----------
    config:
        Resolved configuration; stored once on ``app.state.config``.

    Examples
    --------
    >>> from fastapi.testclient import TestClient
    >>> client = TestClient(create_app(ServerConfig(message="hello", port=8080)))
    >>> client.get("/").text
    'hello'
    >>> client.get("/health").text
    'OK'
    """

    app = FastAPI(
        title="config-server",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config

    @app.middleware("http")
    async def trace_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        trace_id = new_trace_id()
        token = TRACE_ID.set(trace_id)
        started = time.perf_counter()
        try:
            log_debug("request_started", **make_event("http", request.url.path, {"method": request.method}))
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
            log_debug(
                "request_finished",
                **make_event(
                    "http",
                    request.url.path,
                    {"method": request.method, "status": response.status_code, "elapsed_ms": elapsed_ms},
                ),
            )
            response.headers[TRACE_HEADER] = trace_id
            return response
        finally:
            TRACE_ID.reset(token)

    @app.get("/", response_class=PlainTextResponse)
    async def home(request: Request) -> PlainTextResponse:
        """Return the configured message verbatim."""
        return PlainTextResponse(request.app.state.config.message)

    @app.get("/health", response_class=PlainTextResponse)
    async def health() -> PlainTextResponse:
        """Liveness probe; independent of the configuration."""
        return PlainTextResponse(HEALTH_BODY)

    return app
