# src/taskledger/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Transitions only move forward:
      pending -> completed
      pending -> deleted
      completed -> deleted
    Deleted is terminal.
    """

    PENDING = "pending"
    COMPLETED = "completed"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    description: str
    owner: str
    status: TaskStatus
    timestamp: int

    def with_status(self, status: TaskStatus) -> Task:
        return replace(self, status=status)

    def with_description(self, description: str) -> Task:
        return replace(self, description=description)

    def with_owner(self, owner: str) -> Task:
        return replace(self, owner=owner)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "owner": self.owner,
            "status": self.status.value,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_record(cls, raw: dict[str, Any]) -> Task:
        return cls(
            id=int(raw["id"]),
            description=str(raw["description"]),
            owner=str(raw["owner"]),
            status=TaskStatus(raw["status"]),
            timestamp=int(raw["timestamp"]),
        )
