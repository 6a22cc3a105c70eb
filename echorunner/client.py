from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

import httpx

from echorunner.checks import evaluate
from echorunner.logging_conf import get_logger
from echorunner.types import Check, CheckResult, ContractError, SmokeError

logger = get_logger("runner.client")


async def wait_for_server(base_url: str, timeout_s: float = 20.0) -> None:
    """Request the default route until it answers 200 or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/")
                if r.status_code == 200:
                    logger.info("server.ok", extra={"event": "server_ok"})
                    return
            except httpx.TransportError:
                pass
            await asyncio.sleep(0.25)
    raise SmokeError("Server did not answer within timeout")


async def run_check(
    base_url: str,
    check: Check,
    *,
    retries: int = 2,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CheckResult:
    """Issue the check's request and evaluate the response, with retry.

    Each check gets its own client so cookies set by one never leak into another.
    Only transport failures are retried; a wrong answer is a result, not an error.
    """
    last_err: Exception | None = None
    for attempt in range(retries):
        try:
            async with httpx.AsyncClient(
                base_url=base_url, timeout=10.0, follow_redirects=False, transport=transport
            ) as client:
                r = await client.request(check.method, check.path, headers=check.headers)
        except httpx.TransportError as e:  # pragma: no cover - network flakiness
            last_err = e
            logger.warning(
                "check.retry",
                extra={
                    "event": "check_retry",
                    "check": check.name,
                    "attempt": attempt + 1,
                    "error": str(e),
                },
            )
            continue
        result = evaluate(check, r)
        logger.info(
            "check.done",
            extra={"event": "check_done", "check": check.name, "ok": result.ok, "status": result.status},
        )
        return result
    raise ContractError(f"{check.name}: request failed: {last_err}")


async def run_all(
    base_url: str, checks: Iterable[Check], *, transport: httpx.AsyncBaseTransport | None = None
) -> list[CheckResult]:
    """Run checks concurrently; a check whose request fails counts as failed."""
    checks = list(checks)
    outcomes = await asyncio.gather(
        *(run_check(base_url, c, transport=transport) for c in checks), return_exceptions=True
    )
    results: list[CheckResult] = []
    for check, out in zip(checks, outcomes):
        if isinstance(out, Exception):
            results.append(CheckResult(name=check.name, ok=False, problems=[str(out)]))
        else:
            results.append(out)
    return results
