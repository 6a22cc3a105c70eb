from __future__ import annotations

from fastapi import APIRouter, Request, Response
from starlette.requests import ClientDisconnect

from ..domain.canned import INTERNAL_ERROR_BODY, Reply
from ..domain.request import RequestView
from ..logging_conf import get_logger
from ..service.dispatcher import Dispatcher

__all__ = ["build_router", "to_view", "to_response"]

logger = get_logger("api")


async def to_view(request: Request) -> RequestView:
    """Snapshot the request (including its body) into a RequestView."""
    body = await request.body()
    return RequestView(
        method=request.method,
        url=str(request.url),
        path=request.url.path,
        proto=f"HTTP/{request.scope.get('http_version', '1.1')}",
        query=tuple(request.query_params.multi_items()),
        headers=tuple(request.headers.items()),
        body=body,
    )


def to_response(reply: Reply) -> Response:
    """Convert a Reply into a Starlette response; repeated headers are kept."""
    response = Response(
        content=reply.body,
        status_code=reply.status,
        media_type=reply.content_type,
    )
    for name, value in reply.headers:
        response.headers.append(name, value)
    return response


def build_router(dispatcher: Dispatcher) -> APIRouter:
    """Return a router sending every path and method through `dispatcher`."""
    router = APIRouter()

    async def dispatch(request: Request) -> Response:
        try:
            view = await to_view(request)
        except ClientDisconnect:
            logger.warning(
                "request.body_error",
                extra={"event": "request_body_error", "path": request.url.path},
            )
            return Response(INTERNAL_ERROR_BODY, status_code=500, media_type="text/plain")

        # Full dump before dispatch.
        logger.info(
            "request.dump",
            extra={
                "event": "request_dump",
                "method": view.method,
                "url": view.url,
                "proto": view.proto,
                "headers": view.header_map(),
                "body": view.body.decode("utf-8", errors="replace"),
            },
        )
        return to_response(dispatcher.dispatch(view))

    # A plain route with no method list: TRACE, PROPFIND and friends reach the dispatcher too.
    router.add_route("/{full_path:path}", dispatch, include_in_schema=False)
    return router
