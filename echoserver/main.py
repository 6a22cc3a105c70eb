"""FastAPI app factory: request logging middleware + the canned-response router."""
from __future__ import annotations

import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, Response

from .api import build_router
from .logging_conf import get_logger, setup_logging
from .service.dispatcher import Dispatcher
from .settings import get_settings

# Configure logging before anything else.
setup_logging()
logger = get_logger("app")


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("startup", extra={"event": "startup"})
    yield
    logger.info("app.shutdown", extra={"event": "app_shutdown"})


def create_app(dispatcher: Dispatcher | None = None) -> FastAPI:
    """Build a fresh app around its own Dispatcher; nothing is registered globally."""
    app = FastAPI(
        title="Echo test server",
        version=get_settings().app_version,
        lifespan=_lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """Log a start and end event per request with a correlation id.

        - Reuses an incoming X-Request-ID or mints one
        - Attaches X-Request-ID to the response
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "path": request.url.path,
                    "method": request.method,
                    "request_id": request_id,
                },
            )
            raise
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    app.include_router(build_router(dispatcher or Dispatcher()))

    return app
