from __future__ import annotations

from singlewave._redact import redact_for_log, redact_token


def test_redact_for_log_shortens_tokens_and_data() -> None:
    params = {
        "language": "en",
        "hash": "PROJ",
        "token": "0123456789abcdef0123456789abcdef",
        "data": '{"email":"someone@example.com"}',
    }

    redacted = redact_for_log(params)
    assert redacted["language"] == "en"
    assert redacted["hash"] == "PROJ"
    assert redacted["token"].startswith("012345")
    assert "abcdef0123" not in redacted["token"]
    assert "someone" not in redacted["data"]


def test_redact_for_log_descends_into_nested_payloads() -> None:
    payload = {"data": {"notificationHash": "n", "openHash": "o"}, "aps": {"badge": 3}}
    assert redact_for_log(payload) == payload


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_token_handles_empty_and_short() -> None:
    assert redact_token("") == "<empty>"
    assert redact_token("abc") == "<redacted>"
