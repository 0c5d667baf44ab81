# src/taskledger/tasks/id_allocator.py

from __future__ import annotations

from ..core.ports import RecordStore
from ..errors import IdSpaceExhausted
from ..storage.keys import NEXT_ID_KEY

FIRST_TASK_ID = 1
TASK_ID_MAX = 2**32 - 1


def peek_next_id(store: RecordStore) -> int:
    """Next id to hand out (1 on a fresh store). Does not reserve it."""
    raw = store.get(NEXT_ID_KEY)
    return FIRST_TASK_ID if raw is None else int(raw)


def allocate_id(store: RecordStore) -> int:
    task_id = peek_next_id(store)
    if task_id > TASK_ID_MAX:
        raise IdSpaceExhausted(f"task id space exhausted (next={task_id})")
    return task_id


def advance(store: RecordStore, used_id: int) -> None:
    """
    Persist `used_id + 1` as the next id.

    Call inside the same transaction as the record write, after it: a failed
    write then rolls the counter back with it.
    """
    store.set(NEXT_ID_KEY, int(used_id) + 1)
