# src/taskledger/auth/ed25519_verifier.py

from __future__ import annotations

import logging
import threading

from cryptography.exceptions import InvalidSignature

from ..core.ports import RecordStore
from ..errors import AuthenticationError
from ..storage.keys import NonceKey
from .invocation import Authorization, Invocation, signable_bytes
from .keys import public_key_from_identity

logger = logging.getLogger(__name__)


class Ed25519Verifier:
    """
    IdentityVerifier backed by Ed25519 signatures.

    Flow for one call:
    1. the client signs the exact Invocation it is about to make
       (keys.sign_invocation) and hands the Authorization to `authorize`
    2. the registry calls `require_auth(identity, invocation)`
    3. a pending Authorization for that identity and invocation is consumed;
       its signature is checked and its nonce is burned

    Each Authorization is good for exactly one call. Reusing a nonce for the
    same identity is rejected even with a valid signature.

    Burned nonces live in `nonce_store` when one is given (use the task
    store, so replay protection survives restarts). Without it they are
    kept in memory for the lifetime of this verifier only.
    """

    def __init__(self, nonce_store: RecordStore | None = None) -> None:
        self._pending: list[Authorization] = []
        self._nonce_store = nonce_store
        self._used_nonces: set[tuple[str, int]] = set()
        self._lock = threading.Lock()

    def authorize(self, auth: Authorization) -> None:
        with self._lock:
            self._pending.append(auth)

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def clear(self) -> None:
        with self._lock:
            self._pending.clear()

    def validate_identity(self, identity: str) -> bool:
        """True if `identity` is a hex-encoded 32-byte Ed25519 public key."""
        try:
            public_key_from_identity(identity)
        except (ValueError, TypeError):
            return False
        return True

    def require_auth(self, identity: str, invocation: Invocation) -> None:
        with self._lock:
            auth = self._take_matching(identity, invocation)
            if auth is None:
                raise AuthenticationError(identity, f"no authorization for {invocation.function}")

            if self._nonce_used(identity, auth.nonce):
                raise AuthenticationError(identity, "nonce already used")

            try:
                public_key = public_key_from_identity(identity)
                public_key.verify(bytes.fromhex(auth.signature), signable_bytes(invocation, auth.nonce))
            except (InvalidSignature, ValueError) as e:
                logger.debug("Signature rejected for %s: %r", identity[:16], e)
                raise AuthenticationError(identity, "invalid signature") from e

            self._burn_nonce(identity, auth.nonce)

        logger.debug("Authorized %s for %s", identity[:16], invocation.function)

    def _nonce_used(self, identity: str, nonce: int) -> bool:
        if self._nonce_store is not None:
            return self._nonce_store.has(NonceKey(identity, nonce))
        return (identity, nonce) in self._used_nonces

    def _burn_nonce(self, identity: str, nonce: int) -> None:
        if self._nonce_store is not None:
            self._nonce_store.set(NonceKey(identity, nonce), 1)
        else:
            self._used_nonces.add((identity, nonce))

    def _take_matching(self, identity: str, invocation: Invocation) -> Authorization | None:
        for i, auth in enumerate(self._pending):
            if auth.identity == identity and auth.invocation == invocation:
                return self._pending.pop(i)
        return None
