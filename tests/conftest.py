import pytest

from userdesk.remote import RemoteFetchError
from userdesk.storage import LocalStorage, UserSnapshot
from userdesk.store import UserStore


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "storage.json"


@pytest.fixture
def snapshot(storage_path):
    return UserSnapshot(LocalStorage(storage_path))


@pytest.fixture
def ada():
    """One record as the demo API serves it."""
    return {"id": 1, "name": "Ada", "username": "Lovelace", "email": "ada@x.com"}


@pytest.fixture
def grace_fields():
    """A completed form."""
    return {"name": "Grace", "username": "Hopper", "email": "grace@x.com", "department": "Navy"}


@pytest.fixture
def make_store(snapshot):
    """Build a store whose remote source returns ``remote`` (or fails)."""

    def _make(remote=None, fail=False):
        calls = []

        def fetch():
            calls.append(1)
            if fail:
                raise RemoteFetchError("connection refused")
            return list(remote or [])

        store = UserStore(snapshot, fetch=fetch)
        store.fetch_calls = calls
        return store

    return _make
