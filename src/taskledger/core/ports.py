# src/taskledger/core/ports.py

"""
Ports (interfaces) used by the core.

The registry depends on Protocols instead of concrete implementations.
This keeps storage and identity providers swappable and makes testing easier.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Protocol

from ..auth.invocation import Invocation
from ..storage.keys import StoreKey


class RecordStore(Protocol):
    """
    Key-value persistence surface.

    Values are JSON-compatible (dicts, lists, ints, strings).
    `transaction()` groups reads and writes into one unit: all writes made
    inside it become visible together, or none do if the block raises.
    """

    def get(self, key: StoreKey) -> Any | None: ...
    def set(self, key: StoreKey, value: Any) -> None: ...
    def has(self, key: StoreKey) -> bool: ...
    def transaction(self) -> AbstractContextManager[None]: ...


class IdentityVerifier(Protocol):
    """
    require_auth: fails the current operation unless `identity` authorized `invocation`.
    validate_identity: whether `identity` is something that could ever authenticate.
    """

    def require_auth(self, identity: str, invocation: Invocation) -> None: ...
    def validate_identity(self, identity: str) -> bool: ...


class Clock(Protocol):
    """Host clock; unix seconds."""

    def now(self) -> int: ...
