"""Shared pytest fixtures for echo server tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from echoserver.domain.request import RequestView
from echoserver.main import create_app


@pytest.fixture
def make_view() -> Any:
    """Factory for RequestView objects."""

    def _make(
        path: str = "/",
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        query: list[tuple[str, str]] | None = None,
    ) -> RequestView:
        return RequestView(
            method=method,
            url=f"http://test{path}",
            path=path,
            headers=tuple((headers or {}).items()),
            query=tuple(query or ()),
            body=body,
        )

    return _make


@pytest.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client talking to a fresh app in-process."""
    transport = httpx.ASGITransport(app=create_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class FakeListener:
    """In-memory listener: serve() blocks until stop() is called."""

    def __init__(
        self,
        *,
        serve_error: Exception | None = None,
        stop_error: Exception | None = None,
        return_early: bool = False,
    ) -> None:
        self.serve_error = serve_error
        self.stop_error = stop_error
        self.return_early = return_early
        self.serving = asyncio.Event()
        self.stop_calls = 0
        self.drained = False
        self._stop = asyncio.Event()
        self._done = asyncio.Event()

    async def serve(self) -> None:
        self.serving.set()
        try:
            if self.serve_error is not None:
                raise self.serve_error
            if self.return_early:
                return
            await self._stop.wait()
            await asyncio.sleep(0.01)
            self.drained = True
        finally:
            self._done.set()

    async def stop(self) -> None:
        self.stop_calls += 1
        if self.stop_error is not None:
            raise self.stop_error
        self._stop.set()
        await self._done.wait()


@pytest.fixture
def fake_listener_cls() -> type[FakeListener]:
    return FakeListener
