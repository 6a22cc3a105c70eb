from __future__ import annotations

import json
import logging

from echoserver.logging_conf import JsonFormatter


def _record(msg, **extra) -> logging.LogRecord:
    rec = logging.LogRecord("app", logging.INFO, __file__, 1, msg, None, None)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


def test_one_json_object_with_extras() -> None:
    out = json.loads(JsonFormatter().format(_record("shutdown", event="shutdown")))
    assert out["message"] == "shutdown"
    assert out["event"] == "shutdown"
    assert out["level"] == "INFO"
    assert out["logger"] == "app"
    assert "ts" in out


def test_extras_do_not_overwrite_core_keys() -> None:
    out = json.loads(JsonFormatter().format(_record("m", level="bogus")))
    assert out["level"] == "INFO"


def test_dict_message_is_merged() -> None:
    out = json.loads(JsonFormatter().format(_record({"event": "summary", "passed": 3})))
    assert out["passed"] == 3
    assert "message" not in out


def test_unserializable_values_are_stringified() -> None:
    out = json.loads(JsonFormatter().format(_record("dump", body=b"\x00raw")))
    assert "raw" in out["body"]
