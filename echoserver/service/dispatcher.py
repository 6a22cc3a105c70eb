from __future__ import annotations

import posixpath
from collections.abc import Callable, Mapping

from ..domain.canned import (
    DIGEST_CHALLENGE,
    INTERNAL_ERROR_BODY,
    REDIRECT_LOCATION,
    REDIRECT_STATUSES,
    SECRET_BODY,
    VISIT_COOKIE,
    WELCOME_BACK_BODY,
    WELCOME_FIRST_BODY,
    Reply,
)
from ..domain.pages import INDEX_PAGE, REDIRECT_FORM_PAGE, PageRenderer
from ..domain.request import RequestView
from ..errors import PageRenderError
from ..logging_conf import get_logger

__all__ = [
    "Handler",
    "route_key",
    "Dispatcher",
]

Handler = Callable[[RequestView], Reply]

logger = get_logger("service.dispatcher")


def route_key(path: str) -> str:
    """Return the final path segment used for routing.

    Trailing slashes are ignored: "/a/b/welcome/" -> "welcome", "/a/" -> "a".
    "/" -> "" (the default route).
    """
    return posixpath.basename(path.rstrip("/"))


# ------------------------
# Handlers
# ------------------------

def not_found(_: RequestView) -> Reply:
    return Reply(status=404, final=True, content_type=None)


def welcome(req: RequestView) -> Reply:
    """Set the visit cookie; greet returning clients differently."""
    body = WELCOME_BACK_BODY if req.has_header("Cookie") else WELCOME_FIRST_BODY
    return Reply(headers=(("Set-Cookie", VISIT_COOKIE),), body=body)


def digest(req: RequestView) -> Reply:
    """Challenge with a fixed Digest header until any Authorization is sent.

    The Authorization value itself is never verified.
    """
    logger.info(
        "digest.request",
        extra={
            "event": "digest_request",
            "url": req.url,
            "query": req.query_map(),
            "proto": req.proto,
            "method": req.method,
            "headers": req.header_map(),
            "body": req.body.decode("utf-8", errors="replace"),
        },
    )
    if not req.has_header("Authorization"):
        return Reply(
            status=401,
            headers=(("WWW-Authenticate", DIGEST_CHALLENGE),),
            final=True,
        )
    return Reply(body=SECRET_BODY)


def redirect(status: int) -> Handler:
    def _redirect(_: RequestView) -> Reply:
        return Reply(status=status, headers=(("Location", REDIRECT_LOCATION),))

    return _redirect


# ------------------------
# Dispatcher
# ------------------------

class Dispatcher:
    """Map route keys to handlers; unknown keys get the default reply."""

    def __init__(
        self,
        renderer: PageRenderer | None = None,
        extra_routes: Mapping[str, Handler] | None = None,
    ) -> None:
        self._renderer = renderer or PageRenderer()
        self._routes: dict[str, Handler] = {
            "favicon.ico": not_found,
            "index.html": self._page(INDEX_PAGE),
            "redirect-form": self._page(REDIRECT_FORM_PAGE),
            "welcome": welcome,
            "digest": digest,
        }
        for key, status in REDIRECT_STATUSES.items():
            self._routes[key] = redirect(status)
        if extra_routes:
            self._routes.update(extra_routes)

    @property
    def routes(self) -> Mapping[str, Handler]:
        return dict(self._routes)

    def _page(self, name: str) -> Handler:
        def _render(_: RequestView) -> Reply:
            try:
                body = self._renderer.render(name)
            except PageRenderError as e:
                logger.exception(
                    "page.render_error",
                    extra={"event": "page_render_error", "page": name, "error_code": e.code},
                )
                return Reply(
                    status=500,
                    body=INTERNAL_ERROR_BODY,
                    final=True,
                    content_type="text/plain; charset=utf-8",
                )
            return Reply(body=body, final=True)

        return _render

    def dispatch(self, req: RequestView) -> Reply:
        """Produce the single final reply for this request."""
        handler = self._routes.get(route_key(req.path))
        if handler is None:
            return Reply().with_default_body()
        return handler(req).with_default_body()
