"""Add/edit form for a single user.

A form is a working copy of the four text fields. It is opened over nothing
(add) or over an existing user (edit), changed one field at a time, and
either submitted or cancelled. After that it is closed for good; open a new
one for the next edit.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from userdesk.models import FORM_FIELDS, User


class FormError(Exception):
    """Base class for form misuse."""


class FormClosedError(FormError):
    """The form was already submitted or cancelled."""


class IncompleteFormError(FormError):
    """Submit was attempted with one or more empty fields."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"required fields are empty: {', '.join(missing)}")


class FormState(str, Enum):
    EDITING = "editing"
    CLOSED = "closed"


class UserForm:
    """Collects name, username, email and department for one user."""

    def __init__(self, user: Optional[User] = None):
        self.user = user
        self.state = FormState.EDITING
        self._data = {f: "" for f in FORM_FIELDS}
        if user is not None:
            source = user.to_dict()
            for f in FORM_FIELDS:
                self._data[f] = source.get(f) or ""

    @classmethod
    def open(cls, user: Optional[User] = None) -> UserForm:
        return cls(user)

    @property
    def title(self) -> str:
        return "Edit User" if self.user is not None else "Add User"

    @property
    def data(self) -> dict[str, str]:
        """A copy of the current field values."""
        return dict(self._data)

    def _check_open(self) -> None:
        if self.state is FormState.CLOSED:
            raise FormClosedError("form is closed")

    def change(self, name: str, value: str) -> None:
        """Set one field, leaving the others alone."""
        self._check_open()
        if name not in self._data:
            raise FormError(f"unknown field: {name}")
        self._data[name] = value

    def missing_fields(self) -> list[str]:
        return [f for f in FORM_FIELDS if not (isinstance(self._data[f], str) and self._data[f])]

    def submit(self) -> dict[str, str]:
        """Return the completed fields and close the form.

        Raises IncompleteFormError, leaving the form open, if any field is
        empty.
        """
        self._check_open()
        missing = self.missing_fields()
        if missing:
            raise IncompleteFormError(missing)
        self.state = FormState.CLOSED
        return dict(self._data)

    def cancel(self) -> None:
        self._check_open()
        self.state = FormState.CLOSED
        self._data = {f: "" for f in FORM_FIELDS}
