from __future__ import annotations

import pytest

from rxstores import validation


@pytest.mark.parametrize("value", ["a@b", "alice@example.com", "first.last+tag@sub.example.org"])
def test_email_accepts_well_formed_addresses(value: str) -> None:
    assert validation.email(value) is None


@pytest.mark.parametrize("value", ["alice", "alice@", "@example.com", "a b@example.com", "alice@-example.com"])
def test_email_rejects_malformed_addresses(value: str) -> None:
    assert validation.email(value) == {"email": True}


def test_only_required_reports_empty_values() -> None:
    assert validation.required("") == {"required": True}
    assert validation.required("x") is None
    assert validation.email("") is None
    assert validation.min_length(6)("") is None


def test_min_length_reports_required_and_actual_length() -> None:
    rule = validation.min_length(6)

    assert rule("abc") == {"minlength": {"required_length": 6, "actual_length": 3}}
    assert rule("abcdef") is None


def test_min_length_rejects_non_positive_length() -> None:
    with pytest.raises(ValueError):
        validation.min_length(0)


def test_matches_reads_other_value_lazily() -> None:
    password = {"value": "secret1"}
    rule = validation.matches(lambda: password["value"])

    assert rule("secret1") is None
    password["value"] = "changed"
    assert rule("secret1") == {"password_mismatch": True}


def test_validate_merges_errors_in_order() -> None:
    errors = validation.validate("ab", [validation.required, validation.email, validation.min_length(6)])

    assert errors == {"email": True, "minlength": {"required_length": 6, "actual_length": 2}}
    assert validation.validate("alice@example.com", [validation.required, validation.email]) is None
