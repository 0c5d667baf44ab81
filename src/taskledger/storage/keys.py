# src/taskledger/storage/keys.py

"""
Key space of the record store.

Four kinds of keys share one store:
- int           -> a task record
- OwnerKey(id)  -> list of task ids created by that identity (owner index)
- NEXT_ID_KEY   -> the next-id counter
- NonceKey      -> a burned authorization nonce
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class OwnerKey:
    identity: str


@dataclass(frozen=True, slots=True)
class CounterKey:
    name: str


@dataclass(frozen=True, slots=True)
class NonceKey:
    identity: str
    nonce: int


NEXT_ID_KEY = CounterKey("next_id")

StoreKey = int | OwnerKey | CounterKey | NonceKey


def encode_key(key: StoreKey) -> str:
    """Flatten a key to the string form used as the SQLite primary key."""
    # bool is an int subclass; never a valid task id.
    if isinstance(key, bool):
        raise TypeError("bool is not a valid store key")
    if isinstance(key, int):
        return f"task:{key}"
    if isinstance(key, OwnerKey):
        return f"owner:{key.identity}"
    if isinstance(key, CounterKey):
        return f"counter:{key.name}"
    if isinstance(key, NonceKey):
        return f"nonce:{key.identity}:{key.nonce}"
    raise TypeError(f"unsupported store key: {key!r}")
