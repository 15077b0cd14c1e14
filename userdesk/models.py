"""Data models for userdesk.

User record, the form field names, the display marker for missing
departments, and the notices shown after each store operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

# Shown in place of an absent or empty department.
NOT_AVAILABLE = "Not Available"

# The four text fields a form collects, in display order.
FORM_FIELDS = ("name", "username", "email", "department")

FIELD_LABELS = {
    "name": "First Name",
    "username": "Last Name",
    "email": "Email",
    "department": "Department",
}

_KNOWN_KEYS = ("id",) + FORM_FIELDS


def _text(d: dict, key: str) -> str:
    """A text field, with missing or null read as empty."""
    value = d.get(key)
    return "" if value is None else value


class Notice(str, Enum):
    """User-visible acknowledgements."""

    ADDED = "User added successfully"
    UPDATED = "User updated successfully"
    DELETED = "User deleted successfully"
    FETCH_ERROR = "Error fetching users"


@dataclass
class User:
    """A single user record.

    ``name`` is the first name and ``username`` the last name; the field
    names follow the records served by the demo API. Keys outside the known
    set are carried in ``extra`` so they survive a save/load cycle.
    """

    id: int
    name: str = ""
    username: str = ""
    email: str = ""
    department: Optional[str] = None
    extra: dict = field(default_factory=dict)

    @property
    def department_label(self) -> str:
        return self.department or NOT_AVAILABLE

    def merged(self, fields: dict) -> User:
        """Return a copy with ``fields`` laid over this record.

        The identifier is never taken from ``fields``.
        """
        d = self.to_dict()
        d.update({k: v for k, v in fields.items() if k != "id"})
        return User.from_dict(d)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict.

        A missing department is omitted rather than written as null.
        """
        d = {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
        }
        if self.department is not None:
            d["department"] = self.department
        d.update(self.extra)
        return d

    @classmethod
    def from_dict(cls, d: dict) -> User:
        """Deserialize from a JSON dict.

        Raises ValueError if ``d`` is not an object with an integer id.
        """
        if not isinstance(d, dict):
            raise ValueError(f"user record must be an object, got {type(d).__name__}")
        user_id = d.get("id")
        # bool is an int subclass
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise ValueError(f"user record has no integer id: {user_id!r}")
        return cls(
            id=user_id,
            name=_text(d, "name"),
            username=_text(d, "username"),
            email=_text(d, "email"),
            department=d.get("department"),
            extra={k: v for k, v in d.items() if k not in _KNOWN_KEYS},
        )
