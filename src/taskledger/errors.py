# src/taskledger/errors.py

"""
Error taxonomy.

TaskError subclasses form the closed set of outcomes an operation can be
rejected with. Each carries the stable integer code used by the ledger
contract, so callers can map them back to wire-level results.

AuthenticationError and IdSpaceExhausted are not TaskErrors:
the first comes from the identity layer and aborts before any validation,
the second means the store can no longer accept new tasks at all.
"""

from __future__ import annotations

from enum import IntEnum


class TaskErrorCode(IntEnum):
    TASK_NOT_FOUND = 1
    INVALID_TASK_DATA = 2
    UNAUTHORIZED = 3
    TASK_ALREADY_COMPLETED = 4


class TaskError(Exception):
    code: TaskErrorCode

    def __init__(self, message: str = "", *, task_id: int | None = None) -> None:
        super().__init__(message or self.__class__.__name__)
        self.task_id = task_id


class TaskNotFound(TaskError):
    code = TaskErrorCode.TASK_NOT_FOUND


class InvalidTaskData(TaskError):
    code = TaskErrorCode.INVALID_TASK_DATA


class Unauthorized(TaskError):
    code = TaskErrorCode.UNAUTHORIZED


class TaskAlreadyCompleted(TaskError):
    """Task is already Completed, or is no longer Pending for an edit."""

    code = TaskErrorCode.TASK_ALREADY_COMPLETED


class AuthenticationError(Exception):
    """The current invocation was not authorized by the claimed identity."""

    def __init__(self, identity: str, reason: str) -> None:
        super().__init__(f"authentication failed for {identity[:16]}: {reason}")
        self.identity = identity
        self.reason = reason


class IdSpaceExhausted(Exception):
    """No task ids left in the unsigned 32-bit range."""
