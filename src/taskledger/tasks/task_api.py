# src/taskledger/tasks/task_api.py

"""
Convenience helpers for a local signer.

Each helper builds the exact Invocation the registry is going to demand,
signs it with the local key, queues the Authorization on the verifier and
then makes the call. With a MockAuthVerifier the signing step is skipped.
"""

from __future__ import annotations

import logging

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from ..auth.ed25519_verifier import Ed25519Verifier
from ..auth.invocation import Invocation
from ..auth.keys import identity_of, sign_invocation
from .registry import TaskRegistry

logger = logging.getLogger(__name__)


def _presign(registry: TaskRegistry, key: Ed25519PrivateKey, function: str, *args: object) -> None:
    verifier = registry.verifier
    if not isinstance(verifier, Ed25519Verifier):
        return
    verifier.authorize(sign_invocation(key, Invocation(function=function, args=args)))


def add_task(registry: TaskRegistry, key: Ed25519PrivateKey, description: str) -> int:
    owner = identity_of(key)
    _presign(registry, key, "add_task", description, owner)
    return registry.add_task(description, owner)


def complete_task(registry: TaskRegistry, key: Ed25519PrivateKey, task_id: int) -> None:
    caller = identity_of(key)
    _presign(registry, key, "complete_task", task_id, caller)
    registry.complete_task(task_id, caller)


def update_description(
    registry: TaskRegistry, key: Ed25519PrivateKey, task_id: int, new_description: str
) -> None:
    caller = identity_of(key)
    _presign(registry, key, "update_description", task_id, caller, new_description)
    registry.update_description(task_id, caller, new_description)


def delete_task(registry: TaskRegistry, key: Ed25519PrivateKey, task_id: int) -> None:
    caller = identity_of(key)
    _presign(registry, key, "delete_task", task_id, caller)
    registry.delete_task(task_id, caller)


def transfer_ownership(
    registry: TaskRegistry, key: Ed25519PrivateKey, task_id: int, new_owner: str
) -> None:
    caller = identity_of(key)
    _presign(registry, key, "transfer_ownership", task_id, caller, new_owner)
    registry.transfer_ownership(task_id, caller, new_owner)
