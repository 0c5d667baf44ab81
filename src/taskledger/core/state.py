# src/taskledger/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from ..auth.keys import identity_of
from ..config import Settings
from ..tasks.registry import TaskRegistry


@dataclass
class AppState:
    settings: Settings
    registry: TaskRegistry
    key: Ed25519PrivateKey

    @property
    def identity(self) -> str:
        return identity_of(self.key)
