"""Signal-driven graceful shutdown of the network listener.

Lifecycle:
  running        listener serves; the coordinator waits on the interrupt token
  shutting_down  an interrupt arrived; the listener is asked to stop and drain
  stopped        serve() has returned; the process may exit

`ShutdownCoordinator.run()` only returns once both the serve call and the
waiter task have finished, so shutdown is awaited rather than fire-and-forget.
"""
from __future__ import annotations

import asyncio
import contextlib
import signal
from collections.abc import Iterable
from enum import Enum

from ..errors import FatalShutdownError, ListenerError
from ..logging_conf import get_logger
from .listener import Listener, ListenerClosed

__all__ = [
    "Phase",
    "InterruptToken",
    "ShutdownCoordinator",
]

logger = get_logger("service.lifecycle")


class Phase(str, Enum):
    running = "running"
    shutting_down = "shutting_down"
    stopped = "stopped"


class InterruptToken:
    """One-shot interrupt notification with a single waiter.

    `trigger()` fires it at most once; `close()` wakes the waiter without
    firing. Both are idempotent and may be called in any order.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._fired = False
        self._closed = False

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def closed(self) -> bool:
        return self._closed

    def trigger(self) -> bool:
        """Fire the token. Returns False if it already fired or was closed."""
        if self._fired or self._closed:
            return False
        self._fired = True
        self._event.set()
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._event.set()

    async def wait(self) -> bool:
        """Suspend until fired or closed; True only if an interrupt was received."""
        await self._event.wait()
        return self._fired


class ShutdownCoordinator:
    """Stop `listener` on the first interrupt and wait for it to drain."""

    def __init__(
        self,
        listener: Listener,
        *,
        token: InterruptToken | None = None,
        signals: Iterable[signal.Signals] = (signal.SIGINT,),
    ) -> None:
        self._listener = listener
        self._token = token or InterruptToken()
        self._signals = tuple(signals)
        self._phase = Phase.running

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def token(self) -> InterruptToken:
        return self._token

    def _on_signal(self, sig: signal.Signals) -> None:
        if self._token.trigger():
            logger.info("signal.received", extra={"event": "signal_received", "signal": sig.name})
        else:
            logger.info("signal.ignored", extra={"event": "signal_ignored", "signal": sig.name})

    async def _await_interrupt(self) -> None:
        if not await self._token.wait():
            return
        self._phase = Phase.shutting_down
        logger.info("shutdown.start", extra={"event": "shutdown_start"})
        try:
            await self._listener.stop()
        except ListenerClosed:
            pass
        except ListenerError as e:
            logger.critical(
                "shutdown error",
                extra={"event": "shutdown_error", "error": str(e), "error_code": e.code},
            )
            raise FatalShutdownError("stop", str(e)) from e
        self._phase = Phase.stopped
        logger.info("shutdown", extra={"event": "shutdown"})

    async def _serve(self) -> None:
        try:
            await self._listener.serve()
        except ListenerClosed:
            logger.info("listener.closed", extra={"event": "listener_closed"})
            return
        except Exception as e:
            logger.critical(
                "unexpected shutdown",
                extra={"event": "unexpected_shutdown", "error": repr(e)},
            )
            raise FatalShutdownError("serve", repr(e)) from e
        if self._phase is Phase.running:
            logger.critical(
                "unexpected shutdown",
                extra={"event": "unexpected_shutdown", "error": "serve returned without a stop request"},
            )
            raise FatalShutdownError("serve", "listener stopped without a shutdown request")

    async def run(self) -> None:
        """Serve until interrupted and drained.

        Raises:
            FatalShutdownError: if serve fails or ends on its own, or stop fails.
        """
        loop = asyncio.get_running_loop()
        for sig in self._signals:
            loop.add_signal_handler(sig, self._on_signal, sig)
        try:
            waiter = asyncio.create_task(self._await_interrupt(), name="shutdown-coordinator")
            serving = asyncio.create_task(self._serve(), name="listener-serve")
            await asyncio.wait({waiter, serving}, return_when=asyncio.FIRST_EXCEPTION)

            if waiter.done() and waiter.exception() is not None:
                serving.cancel()
                with contextlib.suppress(asyncio.CancelledError, FatalShutdownError):
                    await serving
                raise waiter.exception()  # type: ignore[misc]

            # Serve is over either way; release a waiter that never saw a signal.
            self._token.close()
            await waiter
            await serving
        finally:
            for sig in self._signals:
                loop.remove_signal_handler(sig)
        self._phase = Phase.stopped
        logger.info("exiting", extra={"event": "exiting"})
