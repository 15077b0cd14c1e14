"""Tests for the user store: load-or-fetch, id assignment, mutations, persistence."""

import json

import pytest

from userdesk.models import NOT_AVAILABLE, User
from userdesk.storage import SnapshotError, UserSnapshot
from userdesk.store import LoadSource, UserStore


def _fields(n):
    return {"name": f"First{n}", "username": f"Last{n}", "email": f"u{n}@x.com", "department": "Ops"}


def _stored(storage_path):
    """The persisted collection as raw dicts."""
    data = json.loads(storage_path.read_text(encoding="utf-8"))
    return json.loads(data["users"])


# --- load ---

def test_load_fetches_remote_when_no_snapshot(make_store, ada, storage_path):
    store = make_store(remote=[ada])
    assert store.load() is LoadSource.REMOTE
    assert store.fetch_calls == [1]
    [user] = store.users
    assert user.id == 1
    assert user.name == "Ada"
    assert user.username == "Lovelace"
    assert user.email == "ada@x.com"
    assert user.department is None
    assert user.department_label == NOT_AVAILABLE
    # Fetched data is not written back until something changes
    assert not storage_path.exists()


def test_load_prefers_snapshot(make_store, snapshot, ada):
    snapshot.save([User(id=7, name="Saved", username="One", email="s@x.com", department="HR")])
    store = make_store(remote=[ada])
    assert store.load() is LoadSource.SNAPSHOT
    assert store.fetch_calls == []
    assert [u.id for u in store.users] == [7]


def test_load_empty_snapshot_array_is_not_absent(make_store, snapshot, ada):
    snapshot.save([])
    store = make_store(remote=[ada])
    assert store.load() is LoadSource.SNAPSHOT
    assert store.users == []
    assert store.fetch_calls == []


def test_load_fetch_failure_leaves_empty_collection(make_store):
    store = make_store(fail=True)
    assert store.load() is LoadSource.FAILED
    assert store.users == []
    assert "connection refused" in store.load_error
    assert store.fetch_calls == [1]


def test_load_remote_record_without_id_is_a_fetch_failure(make_store):
    store = make_store(remote=[{"name": "Nobody"}])
    assert store.load() is LoadSource.FAILED
    assert store.users == []


def test_load_malformed_snapshot_raises(make_store, storage_path, ada):
    storage_path.write_text(json.dumps({"users": "{not json"}), encoding="utf-8")
    store = make_store(remote=[ada])
    with pytest.raises(SnapshotError):
        store.load()
    assert store.fetch_calls == []


# --- create ---

def test_create_assigns_sequential_ids_from_empty(make_store):
    store = make_store()
    store.load()
    ids = [store.create(_fields(n)).id for n in range(1, 6)]
    assert ids == [1, 2, 3, 4, 5]


def test_create_after_deleting_last_reuses_id(make_store):
    store = make_store()
    store.load()
    store.create(_fields(1))
    created = store.create(_fields(2))
    store.delete(created.id)
    again = store.create(_fields(3))
    assert again.id == created.id == 2


def test_create_uses_last_id_not_lowest_gap(make_store, snapshot):
    snapshot.save([User(id=1, name="A"), User(id=3, name="C")])
    store = make_store()
    store.load()
    assert store.create(_fields(9)).id == 4


def test_create_follows_last_element_not_max(make_store, snapshot):
    snapshot.save([User(id=10, name="A"), User(id=2, name="B")])
    store = make_store()
    store.load()
    assert store.next_id() == 3


def test_create_persists_full_collection(make_store, ada, storage_path, grace_fields):
    store = make_store(remote=[ada])
    store.load()
    user = store.create(grace_fields)
    assert user.id == 2
    assert user.department == "Navy"
    assert _stored(storage_path) == [
        {"id": 1, "name": "Ada", "username": "Lovelace", "email": "ada@x.com"},
        {"id": 2, "name": "Grace", "username": "Hopper", "email": "grace@x.com", "department": "Navy"},
    ]


def test_create_ignores_id_in_fields(make_store, grace_fields):
    store = make_store()
    store.load()
    user = store.create({**grace_fields, "id": 42})
    assert user.id == 1


# --- update ---

def test_update_merges_and_keeps_id(make_store, ada):
    store = make_store(remote=[{**ada, "phone": "555-0100"}])
    store.load()
    updated = store.update(1, {"email": "ada@new.com", "department": "Math"})
    assert updated.id == 1
    assert updated.name == "Ada"
    assert updated.username == "Lovelace"
    assert updated.email == "ada@new.com"
    assert updated.department == "Math"
    assert updated.extra == {"phone": "555-0100"}
    assert store.get(1) == updated


def test_update_cannot_change_id(make_store, ada):
    store = make_store(remote=[ada])
    store.load()
    store.update(1, {"id": 99, "name": "Augusta"})
    assert [u.id for u in store.users] == [1]
    assert store.get(1).name == "Augusta"


def test_update_unknown_id_is_noop_but_persists(make_store, ada, storage_path):
    store = make_store(remote=[ada])
    store.load()
    before = store.users
    assert store.update(99, {"name": "Ghost"}) is None
    assert store.users == before
    assert _stored(storage_path) == [ada]


# --- delete ---

def test_delete_removes_record(make_store, ada, storage_path):
    store = make_store(remote=[ada, {**ada, "id": 2, "name": "Bea"}])
    store.load()
    assert store.delete(1) is True
    assert [u.id for u in store.users] == [2]
    assert [d["id"] for d in _stored(storage_path)] == [2]


def test_delete_unknown_id_rewrites_identical_snapshot(make_store, snapshot, storage_path):
    snapshot.save([User(id=1, name="A", username="B", email="a@b.c", department="X")])
    before = _stored(storage_path)
    store = make_store()
    store.load()
    assert store.delete(99) is False
    assert [u.id for u in store.users] == [1]
    assert _stored(storage_path) == before


# --- persistence round-trip ---

def test_snapshot_matches_memory_after_each_mutation(make_store, snapshot, ada):
    store = make_store(remote=[{**ada, "address": {"city": "London"}}])
    store.load()

    store.create(_fields(2))
    assert snapshot.load() == store.users
    store.update(1, {"department": "Engines"})
    assert snapshot.load() == store.users
    store.delete(2)
    assert snapshot.load() == store.users

    reloaded = UserStore(snapshot, fetch=lambda: pytest.fail("should not fetch"))
    assert reloaded.load() is LoadSource.SNAPSHOT
    assert reloaded.users == store.users
    assert reloaded.users[0].extra == {"address": {"city": "London"}}


class _ReadOnlySnapshot:
    def __init__(self, users):
        self.users = users

    def load(self):
        return list(self.users)

    def save(self, users):
        return False

    def clear(self):
        pass


def test_failed_save_keeps_previous_collection():
    store = UserStore(_ReadOnlySnapshot([User(id=1, name="A")]), fetch=list)
    store.load()
    with pytest.raises(SnapshotError):
        store.create(_fields(2))
    with pytest.raises(SnapshotError):
        store.delete(1)
    assert [u.id for u in store.users] == [1]


# --- reset ---

def test_reset_clears_snapshot_and_next_load_fetches(make_store, ada, grace_fields):
    store = make_store(remote=[ada])
    store.load()
    store.create(grace_fields)
    store.reset()
    assert store.users == []

    assert store.load() is LoadSource.REMOTE
    assert [u.id for u in store.users] == [1]
    assert store.fetch_calls == [1, 1]


def test_users_is_a_copy(make_store, ada):
    store = make_store(remote=[ada])
    store.load()
    store.users.clear()
    assert len(store.users) == 1
