from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Check:
    """One expectation about a route of the echo server."""

    name: str
    path: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    status: int = 200
    # header name -> substring the response value must contain
    expect_headers: dict[str, str] = field(default_factory=dict)
    body_contains: str | None = None
    empty_body: bool = False


@dataclass
class CheckResult:
    """Outcome of running a single Check against a live server."""

    name: str
    ok: bool
    status: int | None = None
    problems: list[str] = field(default_factory=list)


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., server never answers)."""


class ContractError(SmokeError):
    """Raised when a route could not be requested after retries."""
