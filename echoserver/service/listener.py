from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Iterator
from typing import Any, Protocol

import uvicorn

from ..errors import ListenerError
from ..logging_conf import get_logger
from ..settings import HOST, PORT

__all__ = [
    "Listener",
    "ListenerClosed",
    "UvicornListener",
]

logger = get_logger("service.listener")


class ListenerClosed(ListenerError):
    """The listener has already been stopped; not a failure."""

    code = "listener_closed"


class Listener(Protocol):
    """What the shutdown coordinator needs from a network listener.

    `serve()` returns once a requested stop has drained, or raises
    ListenerClosed if the listener was already stopped. `stop()` stops
    accepting, lets in-flight connections finish, and returns after that.
    """

    async def serve(self) -> None: ...

    async def stop(self) -> None: ...


class _CoordinatedServer(uvicorn.Server):
    """uvicorn Server that leaves signal handling to the shutdown coordinator."""

    def install_signal_handlers(self) -> None:  # uvicorn < 0.29
        return None

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:  # uvicorn >= 0.29
        yield


class UvicornListener:
    """Run an ASGI app on uvicorn with an explicit, awaitable stop."""

    def __init__(
        self,
        app: Any,
        *,
        host: str = HOST,
        port: int = PORT,
        grace_s: float | None = None,
    ) -> None:
        config = uvicorn.Config(
            app,
            host=host,
            port=port,
            log_config=None,  # records flow to our JSON root handler
            timeout_graceful_shutdown=grace_s,
        )
        self._server = _CoordinatedServer(config)
        self._done = asyncio.Event()
        self._serving = False
        self._closed = False

    @property
    def started(self) -> bool:
        return bool(self._server.started)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def bound_port(self) -> int | None:
        """Actual TCP port once started; useful when configured with port 0."""
        for srv in getattr(self._server, "servers", None) or []:
            for sock in srv.sockets:
                return int(sock.getsockname()[1])
        return None

    async def serve(self) -> None:
        if self._closed or self._serving:
            raise ListenerClosed("listener already stopped or serving")
        self._serving = True
        cfg = self._server.config
        logger.info(
            "listener.start",
            extra={"event": "listener_start", "host": cfg.host, "port": cfg.port},
        )
        try:
            await self._server.serve()
        except SystemExit as e:
            # uvicorn exits the process when it cannot bind; keep that our decision.
            raise ListenerError(f"listener failed to start (exit code {e.code})") from None
        finally:
            self._closed = True
            self._done.set()

    async def stop(self) -> None:
        if self._closed:
            raise ListenerClosed("listener already stopped")
        self._server.should_exit = True
        await self._done.wait()
