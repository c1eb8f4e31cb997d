from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from focus_mcp.utils.hashing import sha256_text
from focus_mcp.utils.jsonschema import format_errors, validate_payload
from focus_mcp.utils.masking import redact_sensitive_fields, sanitize_log_value
from focus_mcp.utils.serialization import json_default
from focus_mcp.utils.time import day_bounds, normalize_timestamp, parse_day, parse_iso


def test_validate_payload():
    schema = {"type": "object", "properties": {"a": {"type": "integer"}}, "required": ["a"]}

    assert validate_payload(schema, {"a": 1}) == []

    errors = validate_payload(schema, {"a": "bad"})
    assert errors[0].kind == "invalid_type"
    assert errors[0].path == "a"


def test_format_errors_groups_by_kind():
    schema = {
        "type": "object",
        "properties": {
            "a": {"type": "integer"},
            "b": {"enum": ["x", "y"]},
            "c": {"type": "string", "minLength": 5},
        },
        "required": ["a"],
    }

    result = format_errors(validate_payload(schema, {"b": "z", "c": "abc"}))

    assert result["missing"] == ["a"]
    assert {item["type"] for item in result["invalid"]} == {
        "enum_violation",
        "min_length_violation",
    }
    assert result["allowedValues"] == {"b": ["x", "y"]}
    assert "Add the required field 'a'." in result["hint"]


def test_format_errors_empty():
    assert format_errors([]) == {
        "missing": None,
        "invalid": None,
        "allowedValues": None,
        "hint": None,
    }


def test_redact_sensitive_fields():
    redacted = redact_sensitive_fields(
        {
            "Authorization": "Bearer abc",
            "nested": {"apiToken": "t", "ok": "v"},
            "list": [{"password": "x"}, "plain"],
        }
    )

    assert redacted["Authorization"] == "***"
    assert redacted["nested"] == {"apiToken": "***", "ok": "v"}
    assert redacted["list"] == [{"password": "***"}, "plain"]


def test_sanitize_log_value():
    assert sanitize_log_value("a\nb\tc") == "a_b\tc"


def test_json_default():
    @dataclass
    class Point:
        x: int

    class Entity:
        def to_dict(self):
            return {"id": "e1"}

    assert json_default(datetime(2026, 1, 1, tzinfo=timezone.utc)) == "2026-01-01T00:00:00+00:00"
    assert json_default(Decimal("2")) == 2
    assert json_default(Decimal("2.5")) == 2.5
    assert json_default({1}) == [1]
    assert json_default(Point(1)) == {"x": 1}
    assert json_default(Entity()) == {"id": "e1"}
    assert json_default(object()).startswith("<object")


def test_sha256_text():
    assert sha256_text("focus") == sha256_text("focus")
    assert len(sha256_text("focus")) == 64


def test_time_helpers():
    assert parse_iso("2026-01-01T00:00:00Z").tzinfo is not None
    assert parse_iso("2026-01-01T00:00:00").tzinfo == timezone.utc
    assert normalize_timestamp(None) is None
    assert normalize_timestamp("2026-01-01T02:00:00.500+02:00") == "2026-01-01T00:00:00+00:00"

    start, end = day_bounds(parse_day("2026-03-15"))
    assert start == "2026-03-15T00:00:00+00:00"
    assert end == "2026-03-15T23:59:59.999999+00:00"

    with pytest.raises(ValueError):
        parse_day("15/03/2026")
