# src/taskledger/tasks/registry.py

from __future__ import annotations

import logging

from ..auth.invocation import Invocation
from ..core.ports import Clock, IdentityVerifier, RecordStore
from ..errors import InvalidTaskData, TaskAlreadyCompleted, TaskNotFound, Unauthorized
from ..storage.keys import OwnerKey
from . import queries
from .id_allocator import advance, allocate_id
from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskRegistry:
    """
    Task lifecycle engine.

    Every mutating call goes through the same steps:
    1. the identity verifier must attest the caller (raises AuthenticationError)
    2. inside one store transaction: load, validate, write

    Validation order is fixed: existence, then ownership, then data/status.
    The first failing check is raised as a TaskError and nothing is written.
    """

    def __init__(self, store: RecordStore, verifier: IdentityVerifier, clock: Clock) -> None:
        self.store = store
        self.verifier = verifier
        self.clock = clock

    # ---- helpers ----

    def _auth(self, identity: str, function: str, *args: object) -> None:
        self.verifier.require_auth(identity, Invocation(function=function, args=args))

    def _load_owned(self, task_id: int, caller: str) -> Task:
        task = queries.get_task(self.store, task_id)
        if task is None:
            logger.debug("Task %s not found (caller=%s)", task_id, caller)
            raise TaskNotFound(f"task {task_id} not found", task_id=task_id)
        if task.owner != caller:
            logger.debug("Task %s: caller is not the owner", task_id)
            raise Unauthorized(f"caller does not own task {task_id}", task_id=task_id)
        return task

    def _save(self, task: Task) -> None:
        self.store.set(task.id, task.to_record())

    # ---- mutations ----

    def add_task(self, description: str, owner: str) -> int:
        self._auth(owner, "add_task", description, owner)

        if not description:
            raise InvalidTaskData("description must not be empty")

        with self.store.transaction():
            task_id = allocate_id(self.store)
            task = Task(
                id=task_id,
                description=description,
                owner=owner,
                status=TaskStatus.PENDING,
                timestamp=self.clock.now(),
            )
            self._save(task)

            index_key = OwnerKey(owner)
            owner_tasks = self.store.get(index_key) or []
            owner_tasks.append(task_id)
            self.store.set(index_key, owner_tasks)

            advance(self.store, task_id)

        logger.info("Task added id=%s owner=%s", task_id, owner[:16])
        return task_id

    def complete_task(self, task_id: int, caller: str) -> None:
        self._auth(caller, "complete_task", task_id, caller)

        with self.store.transaction():
            task = self._load_owned(task_id, caller)
            # Deleted is terminal; it shares the "cannot change status" signal.
            if task.status != TaskStatus.PENDING:
                raise TaskAlreadyCompleted(f"task {task_id} is {task.status}", task_id=task_id)
            self._save(task.with_status(TaskStatus.COMPLETED))

        logger.info("Task completed id=%s", task_id)

    def update_description(self, task_id: int, caller: str, new_description: str) -> None:
        self._auth(caller, "update_description", task_id, caller, new_description)

        with self.store.transaction():
            task = self._load_owned(task_id, caller)
            if not new_description:
                raise InvalidTaskData("description must not be empty", task_id=task_id)
            if task.status != TaskStatus.PENDING:
                raise TaskAlreadyCompleted(
                    f"task {task_id} is {task.status}; only pending tasks can be edited",
                    task_id=task_id,
                )
            self._save(task.with_description(new_description))

        logger.info("Task description updated id=%s", task_id)

    def delete_task(self, task_id: int, caller: str) -> None:
        """Soft delete: the record stays, flagged as deleted. There is no undelete."""
        self._auth(caller, "delete_task", task_id, caller)

        with self.store.transaction():
            task = self._load_owned(task_id, caller)
            self._save(task.with_status(TaskStatus.DELETED))

        logger.info("Task deleted id=%s", task_id)

    def transfer_ownership(self, task_id: int, caller: str, new_owner: str) -> None:
        """
        Hand the task to `new_owner`.

        Only the record changes. Owner indexes are left as they are, so
        get_tasks_by_owner keeps listing the task under its creator.
        """
        self._auth(caller, "transfer_ownership", task_id, caller, new_owner)

        with self.store.transaction():
            task = self._load_owned(task_id, caller)
            if not self.verifier.validate_identity(new_owner):
                raise InvalidTaskData(f"{new_owner!r} is not a valid identity", task_id=task_id)
            self._save(task.with_owner(new_owner))

        logger.info("Task ownership transferred id=%s to=%s", task_id, new_owner[:16])

    # ---- queries ----

    def get_task(self, task_id: int) -> Task | None:
        return queries.get_task(self.store, task_id)

    def get_tasks_by_owner(self, owner: str) -> list[Task]:
        return queries.get_tasks_by_owner(self.store, owner)

    def get_all(self) -> list[Task]:
        return queries.get_all(self.store)
