"""Ledger-style task registry with Ed25519-attested ownership."""

from .errors import (
    AuthenticationError,
    IdSpaceExhausted,
    InvalidTaskData,
    TaskAlreadyCompleted,
    TaskError,
    TaskErrorCode,
    TaskNotFound,
    Unauthorized,
)
from .tasks.registry import TaskRegistry
from .tasks.task_models import Task, TaskStatus

__all__ = [
    "AuthenticationError",
    "IdSpaceExhausted",
    "InvalidTaskData",
    "Task",
    "TaskAlreadyCompleted",
    "TaskError",
    "TaskErrorCode",
    "TaskNotFound",
    "TaskRegistry",
    "TaskStatus",
    "Unauthorized",
]
