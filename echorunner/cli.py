from __future__ import annotations

import argparse
import os

from echoserver.settings import HOST, PORT


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="Echo server contract smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", f"http://{HOST}:{PORT}"))
    parser.add_argument("--timeout", type=float, default=20.0, help="seconds to wait for the server")
    parser.add_argument("--only", action="append", default=[], metavar="NAME", help="run only this check (repeatable)")
    return parser.parse_args(argv)
