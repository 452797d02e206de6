"""Synchronous field validators.

Each validator takes a field value and returns ``None`` when the value is
acceptable, or an error dict keyed by the failed rule, e.g.
``{"required": True}`` or
``{"minlength": {"required_length": 6, "actual_length": 3}}``.
Validators other than :func:`required` accept empty values so that an empty
field reports only the ``required`` error.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Any

ValidationErrors = dict[str, Any]
Validator = Callable[[str], ValidationErrors | None]

# Same shape as the HTML5 email rule: local part, '@', dotted
# hostname labels of at most 63 characters.
EMAIL_PATTERN = re.compile(
    r"^(?=.{1,254}$)(?=.{1,64}@)"
    r"[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


def required(value: str) -> ValidationErrors | None:
    if not value:
        return {"required": True}
    return None


def email(value: str) -> ValidationErrors | None:
    if not value:
        return None
    if EMAIL_PATTERN.match(value) is None:
        return {"email": True}
    return None


def min_length(length: int) -> Validator:
    """Validator rejecting non-empty values shorter than *length*."""
    if length < 1:
        raise ValueError(f"length must be >= 1, got {length}")

    def _min_length(value: str) -> ValidationErrors | None:
        if not value or len(value) >= length:
            return None
        return {"minlength": {"required_length": length, "actual_length": len(value)}}

    return _min_length


def matches(other: Callable[[], str]) -> Validator:
    """Validator rejecting non-empty values that differ from ``other()``."""

    def _matches(value: str) -> ValidationErrors | None:
        if not value or value == other():
            return None
        return {"password_mismatch": True}

    return _matches


def validate(value: str, validators: Sequence[Validator]) -> ValidationErrors | None:
    """Run *validators* in order and merge their errors."""
    errors: ValidationErrors = {}
    for validator in validators:
        result = validator(value)
        if result:
            errors.update(result)
    return errors or None
