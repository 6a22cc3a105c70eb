from __future__ import annotations

import httpx
import pytest

from echorunner.checks import default_checks, evaluate, summarize
from echorunner.cli import parse_args
from echorunner.client import run_all
from echorunner.types import Check, CheckResult
from echoserver.domain.canned import Reply
from echoserver.main import create_app
from echoserver.service.dispatcher import Dispatcher


async def test_all_checks_pass_against_the_app() -> None:
    transport = httpx.ASGITransport(app=create_app())
    results = await run_all("http://test", default_checks(), transport=transport)
    failed = [r for r in results if not r.ok]
    assert failed == []
    summary, code = summarize(results)
    assert code == 0
    assert summary["passed"] == len(default_checks())


async def test_broken_route_is_reported() -> None:
    # A dispatcher that forgets the favicon 404.
    app = create_app(Dispatcher(extra_routes={"favicon.ico": lambda _: Reply()}))
    transport = httpx.ASGITransport(app=app)
    results = await run_all("http://test", default_checks(), transport=transport)
    bad = {r.name: r for r in results if not r.ok}
    assert set(bad) == {"favicon"}
    assert any("status 200 != 404" in p for p in bad["favicon"].problems)
    _, code = summarize(results)
    assert code == 1


def test_check_names_are_unique() -> None:
    names = [c.name for c in default_checks()]
    assert len(names) == len(set(names))


class TestEvaluate:
    def test_header_substring(self) -> None:
        check = Check(name="c", path="/x", status=302, expect_headers={"location": "/here"})
        ok = evaluate(check, httpx.Response(302, headers={"Location": "/here"}))
        bad = evaluate(check, httpx.Response(302))
        assert ok.ok
        assert not bad.ok
        assert "location" in bad.problems[0]

    def test_empty_body(self) -> None:
        check = Check(name="c", path="/x", status=404, empty_body=True)
        assert evaluate(check, httpx.Response(404, content=b"")).ok
        assert not evaluate(check, httpx.Response(404, content=b"nope")).ok

    def test_body_contains(self) -> None:
        check = Check(name="c", path="/x", body_contains="secret")
        assert evaluate(check, httpx.Response(200, text="a secret page")).ok
        assert not evaluate(check, httpx.Response(200, text="public")).ok


def test_summarize_without_results_fails() -> None:
    _, code = summarize([])
    assert code == 1


def test_summarize_lists_failures() -> None:
    summary, code = summarize(
        [CheckResult(name="a", ok=True, status=200), CheckResult(name="b", ok=False, problems=["x"])]
    )
    assert code == 1
    assert summary["failures"] == [{"name": "b", "status": None, "problems": ["x"]}]


@pytest.mark.parametrize(
    ("argv", "expected"),
    [([], "http://127.0.0.1:18888"), (["--base-url", "http://h:1"], "http://h:1")],
)
def test_cli_base_url(monkeypatch, argv: list[str], expected: str) -> None:
    monkeypatch.delenv("BASE_URL", raising=False)
    assert parse_args(argv).base_url == expected
