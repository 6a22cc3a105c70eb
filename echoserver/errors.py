from __future__ import annotations

__all__ = [
    "EchoServerError",
    "PageRenderError",
    "ListenerError",
    "FatalShutdownError",
]


class EchoServerError(RuntimeError):
    """Base class for echo server errors.

    The `code` attribute gives log lines a stable machine-readable tag.
    """

    code: str = "echo_server_error"


class PageRenderError(EchoServerError):
    """Raised when one of the static form pages fails to render."""

    code = "page_render_error"


class ListenerError(EchoServerError):
    """Raised by a listener whose stop call failed for a reason other than being closed."""

    code = "listener_error"


class FatalShutdownError(EchoServerError):
    """The listener went away in a way the process cannot recover from.

    `call` names the failing operation ("serve" or "stop").
    """

    code = "fatal_shutdown"

    def __init__(self, call: str, message: str) -> None:
        super().__init__(f"{call}: {message}")
        self.call = call
