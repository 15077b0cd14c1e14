"""Persistence for the user collection.

``LocalStorage`` is a flat key-value file: one JSON object mapping string
keys to string values, rewritten whole on every change. ``UserSnapshot``
stores the entire user collection as one JSON-encoded blob under a fixed key.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from userdesk.models import User

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "users"


class SnapshotError(Exception):
    """The persisted snapshot is unreadable or could not be written."""


class LocalStorage:
    """String key-value store backed by a single JSON file."""

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise SnapshotError(f"{self.path} is not valid UTF-8: {e}") from e
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"{self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SnapshotError(f"{self.path} does not hold a key-value object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key not in data:
            return
        del data[key]
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


class UserSnapshot:
    """The user collection persisted as one blob in a ``LocalStorage``."""

    def __init__(self, storage: LocalStorage, key: str = SNAPSHOT_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> Optional[list[User]]:
        """Read the snapshot.

        Returns None when there is no snapshot: the key is missing, empty,
        or holds JSON null. Raises SnapshotError for anything else that is
        not an array of user objects.
        """
        blob = self.storage.get_item(self.key)
        if blob is None or blob == "":
            logger.debug("No snapshot under %r", self.key)
            return None
        if not isinstance(blob, str):
            raise SnapshotError(f"snapshot {self.key!r} is not a string blob")
        try:
            data = json.loads(blob)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"snapshot {self.key!r} is not valid JSON: {e}") from e
        if data is None:
            return None
        if not isinstance(data, list):
            raise SnapshotError(f"snapshot {self.key!r} is not an array")
        try:
            users = [User.from_dict(d) for d in data]
        except ValueError as e:
            raise SnapshotError(f"snapshot {self.key!r}: {e}") from e
        logger.debug("Loaded %d users from snapshot", len(users))
        return users

    def save(self, users: list[User]) -> bool:
        """Rewrite the snapshot with the whole collection.

        Returns False if the write failed.
        """
        blob = json.dumps([u.to_dict() for u in users])
        try:
            self.storage.set_item(self.key, blob)
        except (OSError, SnapshotError) as e:
            logger.warning("Could not write snapshot %r: %s", self.key, e)
            return False
        logger.debug("Saved %d users to snapshot", len(users))
        return True

    def clear(self) -> None:
        self.storage.remove_item(self.key)
