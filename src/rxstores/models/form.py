"""Form models for the cross-field validator."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from rxstores.models._base import StoreModel


class FieldName(StrEnum):
    EMAIL = "email"
    PASSWORD = "password"
    CONFIRM_PASSWORD = "confirm_password"


class FieldError(StoreModel):
    """Displayable validation outcome of one field.

    ``message is None`` means the field is valid, or not yet eligible for
    display because it was never touched.
    """

    field: FieldName
    message: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.message is None


class FormFieldState(StoreModel):
    """Value and touched flag of one field, owned by the validator."""

    value: str = ""
    touched: bool = False


class FormSubmission(StoreModel):
    """Values accepted by a successful submit."""

    email: str
    password: str = Field(repr=False)
