"""The user store: the authoritative collection and its snapshot.

Data flow:
1. ``load()`` adopts the persisted snapshot, or fetches the remote list once
   when there is none (the fetched list is not written back)
2. ``create``/``update``/``delete`` build the next collection
3. The whole next collection is saved, then adopted in memory

Identifiers are the last record's id plus one, so deleting the last record
and creating another reuses its id. Not safe as a general unique-id scheme.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from userdesk.models import User
from userdesk.remote import RemoteFetchError
from userdesk.storage import SnapshotError, UserSnapshot

logger = logging.getLogger(__name__)


class LoadSource(str, Enum):
    """Where ``UserStore.load`` got its collection from."""

    SNAPSHOT = "snapshot"
    REMOTE = "remote"
    FAILED = "failed"


class UserStore:
    """Owns the user collection and is the only writer of its snapshot.

    Args:
        snapshot: Persistence with ``load() -> list[User] | None`` and
            ``save(list[User]) -> bool``.
        fetch: Returns the remote user list as dicts; may raise
            RemoteFetchError.
    """

    def __init__(self, snapshot: UserSnapshot, fetch: Callable[[], list[dict]]):
        self.snapshot = snapshot
        self.fetch = fetch
        self._users: list[User] = []
        self.load_error: Optional[str] = None

    @property
    def users(self) -> list[User]:
        return list(self._users)

    def load(self) -> LoadSource:
        """Adopt the snapshot, falling back to a single remote fetch.

        SnapshotError from a malformed snapshot propagates. A failed fetch
        leaves the collection empty and returns LoadSource.FAILED.
        """
        saved = self.snapshot.load()
        if saved is not None:
            self._users = saved
            return LoadSource.SNAPSHOT

        try:
            fetched = [User.from_dict(d) for d in self.fetch()]
        except (RemoteFetchError, ValueError) as e:
            logger.warning("Remote fetch failed: %s", e)
            self._users = []
            self.load_error = str(e)
            return LoadSource.FAILED

        self._users = fetched
        return LoadSource.REMOTE

    def get(self, user_id: int) -> Optional[User]:
        for u in self._users:
            if u.id == user_id:
                return u
        return None

    def next_id(self) -> int:
        last_id = self._users[-1].id if self._users else 0
        return last_id + 1

    def _commit(self, users: list[User]) -> None:
        if not self.snapshot.save(users):
            raise SnapshotError("could not persist user snapshot")
        self._users = users

    def create(self, fields: dict) -> User:
        """Append a new user built from the form fields and persist."""
        user = User.from_dict({**fields, "id": self.next_id()})
        self._commit(self._users + [user])
        logger.info("Created user %d", user.id)
        return user

    def update(self, user_id: int, fields: dict) -> Optional[User]:
        """Merge ``fields`` over the matching user and persist.

        With no matching id the collection is saved unchanged and None is
        returned.
        """
        updated = None
        users = []
        for u in self._users:
            if u.id == user_id:
                u = u.merged(fields)
                updated = u
            users.append(u)
        self._commit(users)
        if updated is None:
            logger.info("Update of unknown user %d left collection unchanged", user_id)
        return updated

    def delete(self, user_id: int) -> bool:
        """Remove the matching user and persist. Returns whether one was removed."""
        users = [u for u in self._users if u.id != user_id]
        removed = len(users) != len(self._users)
        self._commit(users)
        if not removed:
            logger.info("Delete of unknown user %d left collection unchanged", user_id)
        return removed

    def reset(self) -> None:
        """Forget the collection and clear the snapshot."""
        self.snapshot.clear()
        self._users = []
        self.load_error = None
