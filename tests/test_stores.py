# tests/test_stores.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskledger.auth.mock_verifier import MockAuthVerifier
from taskledger.core.clock import FixedClock
from taskledger.storage.keys import NEXT_ID_KEY, NonceKey, OwnerKey, encode_key
from taskledger.storage.memory_store import InMemoryRecordStore
from taskledger.storage.sqlite_store import SqliteRecordStore
from taskledger.tasks.registry import TaskRegistry
from taskledger.tasks.task_models import TaskStatus

from .conftest import LEDGER_TS, OWNER_A, OWNER_B


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path: Path):
    if request.param == "memory":
        return InMemoryRecordStore()
    return SqliteRecordStore(tmp_path / "records.sqlite3")


def test_encode_key_namespaces() -> None:
    assert encode_key(7) == "task:7"
    assert encode_key(OwnerKey("abc")) == "owner:abc"
    assert encode_key(NEXT_ID_KEY) == "counter:next_id"
    assert encode_key(NonceKey("abc", 5)) == "nonce:abc:5"
    with pytest.raises(TypeError):
        encode_key(True)
    with pytest.raises(TypeError):
        encode_key("7")  # type: ignore[arg-type]


def test_get_set_has(any_store) -> None:
    assert any_store.get(1) is None
    assert not any_store.has(1)

    any_store.set(1, {"id": 1, "description": "x"})
    any_store.set(OwnerKey(OWNER_A), [1])
    any_store.set(NEXT_ID_KEY, 2)

    assert any_store.has(1)
    assert any_store.get(1) == {"id": 1, "description": "x"}
    assert any_store.get(OwnerKey(OWNER_A)) == [1]
    assert any_store.get(OwnerKey(OWNER_B)) is None
    assert any_store.get(NEXT_ID_KEY) == 2

    any_store.set(NEXT_ID_KEY, 3)
    assert any_store.get(NEXT_ID_KEY) == 3


def test_returned_values_are_copies(any_store) -> None:
    any_store.set(OwnerKey(OWNER_A), [1])
    got = any_store.get(OwnerKey(OWNER_A))
    got.append(2)
    assert any_store.get(OwnerKey(OWNER_A)) == [1]


def test_transaction_commits(any_store) -> None:
    with any_store.transaction():
        any_store.set(1, {"a": 1})
        any_store.set(NEXT_ID_KEY, 2)
        assert any_store.get(1) == {"a": 1}
    assert any_store.get(1) == {"a": 1}
    assert any_store.get(NEXT_ID_KEY) == 2


def test_transaction_rolls_back_on_error(any_store) -> None:
    any_store.set(NEXT_ID_KEY, 5)
    with pytest.raises(RuntimeError):
        with any_store.transaction():
            any_store.set(1, {"a": 1})
            any_store.set(NEXT_ID_KEY, 6)
            raise RuntimeError("boom")
    assert any_store.get(1) is None
    assert any_store.get(NEXT_ID_KEY) == 5


def test_nested_transaction_joins_outer(any_store) -> None:
    with pytest.raises(RuntimeError):
        with any_store.transaction():
            with any_store.transaction():
                any_store.set(1, {"a": 1})
            raise RuntimeError("outer fails")
    assert any_store.get(1) is None


def test_sqlite_registry_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    clock = FixedClock(LEDGER_TS)

    reg = TaskRegistry(SqliteRecordStore(db), MockAuthVerifier(), clock)
    t1 = reg.add_task("persist me", OWNER_A)
    t2 = reg.add_task("and me", OWNER_A)
    reg.complete_task(t2, OWNER_A)

    reopened = TaskRegistry(SqliteRecordStore(db), MockAuthVerifier(), clock)
    assert reopened.get_task(t1).description == "persist me"
    assert reopened.get_task(t2).status == TaskStatus.COMPLETED
    assert [t.id for t in reopened.get_tasks_by_owner(OWNER_A)] == [t1, t2]
    assert reopened.add_task("third", OWNER_B) == 3
