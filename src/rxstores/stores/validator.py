"""Cross-field form validator store.

Each error view is produced by its own debounced pipeline:

- ``email_error`` debounces the email field;
- ``password_error`` debounces the password field;
- ``confirm_password_error`` joins the latest password and confirm values
  first and debounces the joined pair, so editing either field
  re-validates the confirmation.

A field only reports errors once it has been touched.  Touching a field
re-submits its current value to the pipeline, so the error of a freshly
blurred field appears after the debounce window.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from rxstores import validation
from rxstores._constants import (
    CONFIRM_REQUIRED_MESSAGE,
    EMAIL_INVALID_MESSAGE,
    EMAIL_REQUIRED_MESSAGE,
    PASSWORD_MISMATCH_MESSAGE,
    PASSWORD_REQUIRED_MESSAGE,
    password_too_short_message,
)
from rxstores._redact import redact_field
from rxstores.clock import Clock, SystemClock
from rxstores.config import StoresConfig
from rxstores.models.form import FieldError, FieldName, FormFieldState, FormSubmission
from rxstores.reactive.observable import Derived, Observable, State, join_latest
from rxstores.reactive.scheduling import DelayCoalesce
from rxstores.stores._base import StoreBase

_logger = logging.getLogger(__name__)

FieldPair = tuple[FormFieldState, FormFieldState]


def _parse_field(field: FieldName | str) -> FieldName | None:
    try:
        return FieldName(field)
    except ValueError:
        return None


class FormValidator(StoreBase):
    """Email / password / confirm-password form.

    Parameters
    ----------
    config : StoresConfig, optional
        Debounce window and minimum password length.
    clock : Clock, optional
        Time source for the debounce windows.
    """

    def __init__(self, *, config: StoresConfig | None = None, clock: Clock | None = None) -> None:
        super().__init__("FormValidator")
        self._config = config or StoresConfig()
        self._clock: Clock = clock or SystemClock()
        window = self._config.debounce_window

        self._fields: dict[FieldName, State[FormFieldState]] = {
            name: State(FormFieldState(), name=f"form.{name.value}") for name in FieldName
        }
        self._confirm_pair: Derived[FieldPair] = join_latest(
            self._fields[FieldName.PASSWORD],
            self._fields[FieldName.CONFIRM_PASSWORD],
            name="form.confirm_pair",
        )

        self._email_message: State[str | None] = State(None, name="form.email_message")
        self._password_message: State[str | None] = State(None, name="form.password_message")
        self._confirm_message: State[str | None] = State(None, name="form.confirm_message")

        self._email_debounce: DelayCoalesce[FormFieldState] = DelayCoalesce(
            window,
            lambda field: self._email_message.set(self._email_message_for(field)),
            clock=self._clock,
            name="form.email_debounce",
        )
        self._password_debounce: DelayCoalesce[FormFieldState] = DelayCoalesce(
            window,
            lambda field: self._password_message.set(self._password_message_for(field)),
            clock=self._clock,
            name="form.password_debounce",
        )
        self._confirm_debounce: DelayCoalesce[FieldPair] = DelayCoalesce(
            window,
            lambda pair: self._confirm_message.set(self._confirm_message_for(*pair)),
            clock=self._clock,
            name="form.confirm_debounce",
        )

        self.email_error: Derived[str | None] = self._email_message.map(lambda m: m, name="form.email_error")
        self.password_error: Derived[str | None] = self._password_message.map(
            lambda m: m, name="form.password_error"
        )
        self.confirm_password_error: Derived[str | None] = self._confirm_message.map(
            lambda m: m, name="form.confirm_password_error"
        )
        self.is_form_valid: Derived[bool] = join_latest(
            self.email_error,
            self.password_error,
            self.confirm_password_error,
            project=lambda *messages: all(message is None for message in messages),
            name="form.is_form_valid",
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def field(self, name: FieldName | str) -> Observable[FormFieldState]:
        return self._fields[FieldName(name)]

    def errors(self) -> list[FieldError]:
        """Current displayable error of every field, in form order."""
        return [
            FieldError(field=FieldName.EMAIL, message=self.email_error.value),
            FieldError(field=FieldName.PASSWORD, message=self.password_error.value),
            FieldError(field=FieldName.CONFIRM_PASSWORD, message=self.confirm_password_error.value),
        ]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_value(self, field: FieldName | str, value: str) -> None:
        self._require_active()
        name = _parse_field(field)
        if name is None:
            _logger.debug("Ignoring value for unknown field %r", field)
            return
        state = self._fields[name]
        state.set(state.value.model_copy(update={"value": value}))
        _logger.debug("Field %s set to %r", name.value, redact_field(name.value, value))
        self._revalidate(name)

    def set_email(self, value: str) -> None:
        self.set_value(FieldName.EMAIL, value)

    def set_password(self, value: str) -> None:
        self.set_value(FieldName.PASSWORD, value)

    def set_confirm_password(self, value: str) -> None:
        self.set_value(FieldName.CONFIRM_PASSWORD, value)

    def touch(self, field: FieldName | str) -> None:
        """Mark *field* as touched (blurred) and re-validate it."""
        self._require_active()
        name = _parse_field(field)
        if name is None:
            _logger.debug("Ignoring touch of unknown field %r", field)
            return
        state = self._fields[name]
        if not state.value.touched:
            state.set(state.value.model_copy(update={"touched": True}))
        self._revalidate(name)

    def submit(self) -> FormSubmission | None:
        """Touch every field and, if the form is valid, accept and reset it.

        Returns
        -------
        FormSubmission or None
            The accepted values, or ``None`` when any rule fails.  Failing
            fields reveal their errors after the debounce window.
        """
        self._require_active()
        for name in FieldName:
            self.touch(name)
        email = self._fields[FieldName.EMAIL].value.value
        password = self._fields[FieldName.PASSWORD].value.value
        confirm = self._fields[FieldName.CONFIRM_PASSWORD].value.value

        checks = (
            validation.validate(email, [validation.required, validation.email]),
            validation.validate(
                password,
                [validation.required, validation.min_length(self._config.password_min_length)],
            ),
            validation.validate(confirm, [validation.required, validation.matches(lambda: password)]),
        )
        failed = [errors for errors in checks if errors]
        if failed:
            _logger.debug("Submit rejected: %d invalid field(s)", len(failed))
            return None
        submission = FormSubmission(email=email, password=password)
        _logger.debug("Submit accepted for %r", email)
        self.reset()
        return submission

    def reset(self) -> None:
        """Clear values, touched flags and displayed errors."""
        self._require_active()
        for debounce in (self._email_debounce, self._password_debounce, self._confirm_debounce):
            debounce.cancel()
        for state in self._fields.values():
            if state.value != FormFieldState():
                state.set(FormFieldState())
        for message in (self._email_message, self._password_message, self._confirm_message):
            if message.value is not None:
                message.set(None)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _revalidate(self, name: FieldName) -> None:
        if name is FieldName.EMAIL:
            self._email_debounce.push(self._fields[FieldName.EMAIL].value)
            return
        if name is FieldName.PASSWORD:
            self._password_debounce.push(self._fields[FieldName.PASSWORD].value)
        self._confirm_debounce.push(self._confirm_pair.value)

    def _email_message_for(self, field: FormFieldState) -> str | None:
        if not field.touched:
            return None
        errors = validation.validate(field.value, [validation.required, validation.email]) or {}
        if "required" in errors:
            return EMAIL_REQUIRED_MESSAGE
        if "email" in errors:
            return EMAIL_INVALID_MESSAGE
        return None

    def _password_message_for(self, field: FormFieldState) -> str | None:
        if not field.touched:
            return None
        minimum = self._config.password_min_length
        errors = validation.validate(field.value, [validation.required, validation.min_length(minimum)]) or {}
        if "required" in errors:
            return PASSWORD_REQUIRED_MESSAGE
        if "minlength" in errors:
            return password_too_short_message(minimum)
        return None

    def _confirm_message_for(self, password: FormFieldState, confirm: FormFieldState) -> str | None:
        if not confirm.touched:
            return None
        errors = validation.validate(confirm.value, [validation.required, validation.matches(lambda: password.value)])
        if not errors:
            return None
        if "required" in errors:
            return CONFIRM_REQUIRED_MESSAGE
        return PASSWORD_MISMATCH_MESSAGE

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _owned_tasks(self) -> list[asyncio.Task[Any] | None]:
        return [self._email_debounce.task, self._password_debounce.task, self._confirm_debounce.task]

    def _on_dispose(self) -> None:
        for debounce in (self._email_debounce, self._password_debounce, self._confirm_debounce):
            debounce.cancel()
        self.is_form_valid.complete()
        for view in (self.email_error, self.password_error, self.confirm_password_error, self._confirm_pair):
            view.complete()
        for state in (*self._fields.values(), self._email_message, self._password_message, self._confirm_message):
            state.complete()
