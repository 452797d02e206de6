from __future__ import annotations

from rxstores._redact import redact_field, redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "email": "alice@example.com",
        "password": "pw",
        "confirmPassword": "pw",
        "nested": {"token": "abc", "page": 2},
    }

    redacted = redact_for_log(payload)
    assert redacted["email"] == "alice@example.com"
    assert redacted["password"] == "<redacted>"
    assert redacted["confirmPassword"] == "<redacted>"
    assert redacted["nested"] == {"token": "<redacted>", "page": 2}


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_field_hides_password_fields_only() -> None:
    assert redact_field("confirm_password", "secret") == "<redacted>"
    assert redact_field("email", "bob@example.com") == "bob@example.com"
