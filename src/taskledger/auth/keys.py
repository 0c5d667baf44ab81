# src/taskledger/auth/keys.py

"""
Local Ed25519 key handling.

An identity is the hex-encoded raw public key (64 hex chars). Private keys
are stored as unencrypted PKCS8 PEM with 0600 permissions.
"""

from __future__ import annotations

import contextlib
import logging
import os
import secrets
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from .invocation import Authorization, Invocation, signable_bytes

logger = logging.getLogger(__name__)


def generate_private_key() -> Ed25519PrivateKey:
    return Ed25519PrivateKey.generate()


def identity_of(key: Ed25519PrivateKey | Ed25519PublicKey) -> str:
    pub = key.public_key() if isinstance(key, Ed25519PrivateKey) else key
    raw = pub.public_bytes(encoding=serialization.Encoding.Raw, format=serialization.PublicFormat.Raw)
    return raw.hex()


def public_key_from_identity(identity: str) -> Ed25519PublicKey:
    """Raises ValueError if `identity` is not a 32-byte hex public key."""
    return Ed25519PublicKey.from_public_bytes(bytes.fromhex(identity))


def save_private_key(key: Ed25519PrivateKey, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    tmp = path.with_suffix(".tmp")
    tmp.write_bytes(pem)
    os.replace(tmp, path)
    with contextlib.suppress(OSError):
        os.chmod(path, 0o600)
    logger.info("Saved private key to %s", path)


def load_private_key(path: str | Path) -> Ed25519PrivateKey:
    key = serialization.load_pem_private_key(Path(path).read_bytes(), password=None)
    if not isinstance(key, Ed25519PrivateKey):
        raise ValueError(f"{path} does not contain an Ed25519 private key")
    return key


def load_or_create_private_key(path: str | Path) -> Ed25519PrivateKey:
    path = Path(path)
    if path.exists():
        return load_private_key(path)
    key = generate_private_key()
    save_private_key(key, path)
    return key


def sign_invocation(
    key: Ed25519PrivateKey,
    invocation: Invocation,
    nonce: int | None = None,
) -> Authorization:
    """Produce an Authorization for `invocation`, signed by `key`."""
    if nonce is None:
        nonce = secrets.randbits(63)
    signature = key.sign(signable_bytes(invocation, nonce))
    return Authorization(
        identity=identity_of(key),
        invocation=invocation,
        nonce=nonce,
        signature=signature.hex(),
    )
