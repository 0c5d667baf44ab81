# src/taskledger/auth/invocation.py

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Invocation:
    """
    A single call into the registry, as seen by the identity layer.

    `args` holds the call arguments in positional order. What gets signed is
    `canonical_bytes()`: compact JSON with sorted keys, so signer and
    verifier always agree on the exact byte string.
    """

    function: str
    args: tuple[Any, ...]

    def canonical_bytes(self) -> bytes:
        payload = {"function": self.function, "args": list(self.args)}
        return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode(
            "utf-8"
        )


@dataclass(frozen=True, slots=True)
class Authorization:
    """Signed statement: `identity` authorizes `invocation` once (bound to `nonce`)."""

    identity: str
    invocation: Invocation
    nonce: int
    signature: str  # hex


def signable_bytes(invocation: Invocation, nonce: int) -> bytes:
    return invocation.canonical_bytes() + b"|" + str(int(nonce)).encode("ascii")
