# tests/test_ed25519_auth.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskledger.auth.ed25519_verifier import Ed25519Verifier
from taskledger.auth.invocation import Authorization, Invocation
from taskledger.auth.keys import (
    generate_private_key,
    identity_of,
    load_or_create_private_key,
    load_private_key,
    save_private_key,
    sign_invocation,
)
from taskledger.errors import AuthenticationError, InvalidTaskData, Unauthorized
from taskledger.storage.sqlite_store import SqliteRecordStore
from taskledger.tasks import task_api
from taskledger.tasks.registry import TaskRegistry
from taskledger.tasks.task_models import TaskStatus


@pytest.fixture()
def ed_registry(store, clock) -> TaskRegistry:
    return TaskRegistry(store=store, verifier=Ed25519Verifier(), clock=clock)


def test_identity_is_hex_public_key() -> None:
    key = generate_private_key()
    ident = identity_of(key)
    assert len(ident) == 64
    assert identity_of(key.public_key()) == ident
    int(ident, 16)


def test_canonical_bytes_are_stable() -> None:
    inv = Invocation(function="add_task", args=("milk", "ab"))
    assert inv.canonical_bytes() == b'{"args":["milk","ab"],"function":"add_task"}'


def test_valid_signature_is_accepted_once() -> None:
    key = generate_private_key()
    ident = identity_of(key)
    inv = Invocation(function="complete_task", args=(1, ident))

    verifier = Ed25519Verifier()
    verifier.authorize(sign_invocation(key, inv, nonce=7))
    verifier.require_auth(ident, inv)
    assert verifier.pending_count() == 0

    # consumed: a second call needs a fresh authorization
    with pytest.raises(AuthenticationError):
        verifier.require_auth(ident, inv)


def test_replayed_nonce_is_rejected() -> None:
    key = generate_private_key()
    ident = identity_of(key)
    inv = Invocation(function="complete_task", args=(1, ident))
    auth = sign_invocation(key, inv, nonce=7)

    verifier = Ed25519Verifier()
    verifier.authorize(auth)
    verifier.require_auth(ident, inv)

    verifier.authorize(auth)
    with pytest.raises(AuthenticationError) as exc:
        verifier.require_auth(ident, inv)
    assert exc.value.reason == "nonce already used"


def test_authorization_for_other_arguments_does_not_match() -> None:
    key = generate_private_key()
    ident = identity_of(key)

    verifier = Ed25519Verifier()
    verifier.authorize(sign_invocation(key, Invocation("delete_task", (1, ident))))
    with pytest.raises(AuthenticationError):
        verifier.require_auth(ident, Invocation("delete_task", (2, ident)))


def test_signature_from_another_key_is_rejected() -> None:
    victim = identity_of(generate_private_key())
    attacker = generate_private_key()
    inv = Invocation("delete_task", (1, victim))
    forged = sign_invocation(attacker, inv)

    verifier = Ed25519Verifier()
    verifier.authorize(Authorization(identity=victim, invocation=inv, nonce=forged.nonce, signature=forged.signature))
    with pytest.raises(AuthenticationError) as exc:
        verifier.require_auth(victim, inv)
    assert exc.value.reason == "invalid signature"


def test_malformed_identity_is_rejected() -> None:
    key = generate_private_key()
    inv = Invocation("add_task", ("x", "not-a-key"))
    signed = sign_invocation(key, inv)

    verifier = Ed25519Verifier()
    verifier.authorize(Authorization("not-a-key", inv, signed.nonce, signed.signature))
    with pytest.raises(AuthenticationError):
        verifier.require_auth("not-a-key", inv)


def test_registry_rejects_unsigned_calls(ed_registry, store) -> None:
    ident = identity_of(generate_private_key())
    with pytest.raises(AuthenticationError):
        ed_registry.add_task("no signature", ident)
    assert len(store) == 0


def test_task_api_signs_each_call(ed_registry) -> None:
    alice = generate_private_key()
    bob = generate_private_key()

    task_id = task_api.add_task(ed_registry, alice, "Buy milk")
    task_api.update_description(ed_registry, alice, task_id, "Buy oat milk")
    task_api.transfer_ownership(ed_registry, alice, task_id, identity_of(bob))

    with pytest.raises(Unauthorized):
        task_api.complete_task(ed_registry, alice, task_id)

    task_api.complete_task(ed_registry, bob, task_id)
    task_api.delete_task(ed_registry, bob, task_id)

    task = ed_registry.get_task(task_id)
    assert task.description == "Buy oat milk"
    assert task.owner == identity_of(bob)
    assert task.status == TaskStatus.DELETED
    assert ed_registry.verifier.pending_count() == 0


def test_key_roundtrip_on_disk(tmp_path: Path) -> None:
    path = tmp_path / "keys" / "id.pem"
    key = generate_private_key()
    save_private_key(key, path)
    assert identity_of(load_private_key(path)) == identity_of(key)
    assert (path.stat().st_mode & 0o777) == 0o600


def test_load_or_create_is_stable(tmp_path: Path) -> None:
    path = tmp_path / "id.pem"
    first = load_or_create_private_key(path)
    second = load_or_create_private_key(path)
    assert identity_of(first) == identity_of(second)


def test_validate_identity() -> None:
    verifier = Ed25519Verifier()
    assert verifier.validate_identity(identity_of(generate_private_key()))
    assert not verifier.validate_identity("deadbeef")
    assert not verifier.validate_identity("zz" * 32)
    assert not verifier.validate_identity("")


def test_transfer_to_malformed_identity_is_rejected(ed_registry) -> None:
    alice = generate_private_key()
    task_id = task_api.add_task(ed_registry, alice, "keep me editable")

    with pytest.raises(InvalidTaskData):
        task_api.transfer_ownership(ed_registry, alice, task_id, "deadbeef")
    assert ed_registry.get_task(task_id).owner == identity_of(alice)

    # still owned by alice, so she can keep working on it
    task_api.delete_task(ed_registry, alice, task_id)


def test_burned_nonces_survive_restart(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    key = generate_private_key()
    ident = identity_of(key)
    inv = Invocation(function="complete_task", args=(1, ident))
    auth = sign_invocation(key, inv, nonce=42)

    first = Ed25519Verifier(nonce_store=SqliteRecordStore(db))
    first.authorize(auth)
    first.require_auth(ident, inv)

    restarted = Ed25519Verifier(nonce_store=SqliteRecordStore(db))
    restarted.authorize(auth)
    with pytest.raises(AuthenticationError) as exc:
        restarted.require_auth(ident, inv)
    assert exc.value.reason == "nonce already used"
