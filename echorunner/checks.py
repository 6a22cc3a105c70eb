from __future__ import annotations

import httpx

from echoserver.domain.canned import REDIRECT_LOCATION, REDIRECT_STATUSES
from echorunner.types import Check, CheckResult


def default_checks() -> list[Check]:
    """The wire contract of the echo server, one Check per observable behavior."""
    checks = [
        Check(name="favicon", path="/favicon.ico", status=404, empty_body=True),
        Check(name="index_form", path="/index.html", body_contains='action="/index.html"'),
        Check(name="redirect_form", path="/redirect-form", body_contains='action="redirected-location"'),
        Check(
            name="welcome_first",
            path="/welcome",
            expect_headers={"set-cookie": "VISIT=TRUE"},
            body_contains="first visit",
        ),
        Check(
            name="welcome_back",
            path="/welcome",
            headers={"Cookie": "VISIT=TRUE"},
            expect_headers={"set-cookie": "VISIT=TRUE"},
            body_contains="comeback",
        ),
        Check(
            name="digest_challenge",
            path="/digest",
            status=401,
            expect_headers={"www-authenticate": 'Digest realm="Secret Zone"'},
        ),
        Check(
            name="digest_secret",
            path="/digest",
            headers={"Authorization": "Digest anything"},
            body_contains="secret page",
        ),
        Check(name="default", path="/unknown", body_contains="Hello, World!"),
    ]
    for key, status in REDIRECT_STATUSES.items():
        checks.append(
            Check(
                name=key.replace("-", "_"),
                path=f"/{key}",
                status=status,
                expect_headers={"location": REDIRECT_LOCATION},
            )
        )
    return checks


def evaluate(check: Check, response: httpx.Response) -> CheckResult:
    """Compare a response with what the check expects."""
    problems: list[str] = []
    if response.status_code != check.status:
        problems.append(f"status {response.status_code} != {check.status}")
    for name, wanted in check.expect_headers.items():
        values = response.headers.get_list(name)
        if not any(wanted in v for v in values):
            problems.append(f"header {name!r} missing {wanted!r} (got {values})")
    if check.empty_body and response.content:
        problems.append(f"expected empty body, got {len(response.content)} bytes")
    if check.body_contains is not None and check.body_contains not in response.text:
        problems.append(f"body missing {check.body_contains!r}")
    return CheckResult(
        name=check.name,
        ok=not problems,
        status=response.status_code,
        problems=problems,
    )


def summarize(results: list[CheckResult]) -> tuple[dict, int]:
    """Compute summary dict and an exit code from check results."""
    failed = [r for r in results if not r.ok]
    summary = {
        "component": "runner",
        "event": "summary",
        "checks": len(results),
        "passed": len(results) - len(failed),
        "failed": len(failed),
        "failures": [
            {"name": r.name, "status": r.status, "problems": r.problems} for r in failed
        ],
    }
    exit_code = 0 if (results and not failed) else 1
    return summary, exit_code
