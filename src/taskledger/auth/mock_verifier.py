# src/taskledger/auth/mock_verifier.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import AuthenticationError
from .invocation import Invocation


@dataclass(slots=True)
class MockAuthVerifier:
    """
    IdentityVerifier that does no cryptography.

    - accept_all=True: every identity is attested (local demos, unit tests)
    - accept_all=False: every call fails authentication

    Every require_auth call is recorded in `auths` so tests can assert which
    identity a call demanded.
    """

    accept_all: bool = True
    auths: list[tuple[str, Invocation]] = field(default_factory=list)

    def require_auth(self, identity: str, invocation: Invocation) -> None:
        self.auths.append((identity, invocation))
        if not self.accept_all:
            raise AuthenticationError(identity, "rejected by mock verifier")

    def validate_identity(self, identity: str) -> bool:
        return isinstance(identity, str) and bool(identity)

    def set_accept_all(self, accept_all: bool) -> None:
        self.accept_all = accept_all
