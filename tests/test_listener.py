"""End-to-end: real uvicorn listener driven by the shutdown coordinator."""

from __future__ import annotations

import asyncio
import socket

import httpx
import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from echoserver.errors import FatalShutdownError
from echoserver.main import create_app
from echoserver.service.lifecycle import Phase, ShutdownCoordinator
from echoserver.service.listener import ListenerClosed, UvicornListener


async def _start(listener: UvicornListener, coord: ShutdownCoordinator) -> asyncio.Task:
    task = asyncio.create_task(coord.run())
    for _ in range(200):
        if listener.started:
            return task
        if task.done():
            task.result()
        await asyncio.sleep(0.025)
    pytest.fail("listener did not start")


async def test_serves_the_app_and_stops_on_interrupt() -> None:
    listener = UvicornListener(create_app(), port=0)
    coord = ShutdownCoordinator(listener, signals=())
    task = await _start(listener, coord)

    base = f"http://127.0.0.1:{listener.bound_port}"
    async with httpx.AsyncClient(base_url=base) as client:
        r = await client.get("/redirect-301")
    assert r.status_code == 301
    assert r.headers["location"] == "/redirected-location"

    coord.token.trigger()
    await asyncio.wait_for(task, 5)
    assert coord.phase is Phase.stopped
    assert listener.closed


async def test_inflight_request_completes_before_exit() -> None:
    entered = asyncio.Event()
    app = FastAPI()

    @app.get("/slow")
    async def slow() -> PlainTextResponse:
        entered.set()
        await asyncio.sleep(0.3)
        return PlainTextResponse("done")

    listener = UvicornListener(app, port=0)
    coord = ShutdownCoordinator(listener, signals=())
    task = await _start(listener, coord)

    async with httpx.AsyncClient(base_url=f"http://127.0.0.1:{listener.bound_port}") as client:
        pending = asyncio.create_task(client.get("/slow"))
        await asyncio.wait_for(entered.wait(), 5)
        coord.token.trigger()
        r = await asyncio.wait_for(pending, 5)

    assert r.status_code == 200
    assert r.text == "done"
    await asyncio.wait_for(task, 5)
    assert coord.phase is Phase.stopped


async def test_bind_failure_is_fatal() -> None:
    with socket.socket() as taken:
        taken.bind(("127.0.0.1", 0))
        taken.listen()
        port = taken.getsockname()[1]

        listener = UvicornListener(create_app(), port=port)
        coord = ShutdownCoordinator(listener, signals=())
        with pytest.raises(FatalShutdownError) as exc:
            await asyncio.wait_for(coord.run(), 5)
    assert exc.value.call == "serve"


async def test_stop_after_close_reports_closed_sentinel() -> None:
    listener = UvicornListener(create_app(), port=0)
    coord = ShutdownCoordinator(listener, signals=())
    task = await _start(listener, coord)
    coord.token.trigger()
    await asyncio.wait_for(task, 5)

    with pytest.raises(ListenerClosed):
        await listener.stop()
    with pytest.raises(ListenerClosed):
        await listener.serve()
