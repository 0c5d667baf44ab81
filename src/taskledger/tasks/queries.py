# src/taskledger/tasks/queries.py

"""
Read-only projections over the record store.

None of these require authentication. `get_task` returns the raw record;
the list queries hide soft-deleted tasks.
"""

from __future__ import annotations

from ..core.ports import RecordStore
from ..storage.keys import OwnerKey
from .id_allocator import FIRST_TASK_ID, peek_next_id
from .task_models import Task, TaskStatus


def get_task(store: RecordStore, task_id: int) -> Task | None:
    raw = store.get(int(task_id))
    return Task.from_record(raw) if raw is not None else None


def get_owner_index(store: RecordStore, owner: str) -> list[int]:
    raw = store.get(OwnerKey(owner))
    return [int(x) for x in raw] if raw else []


def get_tasks_by_owner(store: RecordStore, owner: str) -> list[Task]:
    """
    Tasks listed in `owner`'s index, in creation order, minus deleted ones.

    The index records who *created* a task. Ownership transfers do not
    rewrite it, so a transferred task still shows up here for its creator
    and not for the new owner.
    """
    out: list[Task] = []
    for task_id in get_owner_index(store, owner):
        task = get_task(store, task_id)
        if task is not None and task.status != TaskStatus.DELETED:
            out.append(task)
    return out


def get_all(store: RecordStore) -> list[Task]:
    """
    Every non-deleted task, ascending by id.

    Walks the whole id range 1..next_id-1, deleted tasks included, so the
    cost grows with every task ever created. Fine for small registries.
    """
    out: list[Task] = []
    for task_id in range(FIRST_TASK_ID, peek_next_id(store)):
        task = get_task(store, task_id)
        if task is not None and task.status != TaskStatus.DELETED:
            out.append(task)
    return out
