#!/usr/bin/env python3
"""High-level smoke runner checking a live echo server's wire contract.

Steps:
- wait for the server to answer
- run every route check concurrently (tolerates per-check failures)
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys

from echorunner.checks import default_checks, summarize
from echorunner.cli import parse_args
from echorunner.client import run_all, wait_for_server
from echorunner.logging_conf import get_logger, setup_logging
from echorunner.types import SmokeError

setup_logging()
logger = get_logger("runner")


async def run_smoke(*, base_url: str, timeout_s: float = 20.0, only: list[str] | None = None) -> int:
    await wait_for_server(base_url, timeout_s=timeout_s)
    checks = default_checks()
    if only:
        unknown = set(only) - {c.name for c in checks}
        if unknown:
            raise SmokeError(f"unknown checks: {sorted(unknown)}")
        checks = [c for c in checks if c.name in only]
    results = await run_all(base_url, checks)
    summary, exit_code = summarize(results)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        code = asyncio.run(run_smoke(base_url=args.base_url, timeout_s=args.timeout, only=args.only))
    except SmokeError as e:
        logger.error("runner.error", extra={"event": "runner_error", "error": str(e)})
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
