# src/taskledger/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the record store, identity verifier and clock into a TaskRegistry,
- loads (or creates) the local signing key.
"""

from __future__ import annotations

import logging

from ..auth.ed25519_verifier import Ed25519Verifier
from ..auth.keys import load_or_create_private_key
from ..auth.mock_verifier import MockAuthVerifier
from ..config import Settings, get_settings
from ..core.clock import SystemClock
from ..core.ports import IdentityVerifier, RecordStore
from ..core.state import AppState
from ..storage.sqlite_store import SqliteRecordStore
from ..tasks.registry import TaskRegistry

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.key_path.parent.mkdir(parents=True, exist_ok=True)


def build_verifier(auth_mode: str, store: RecordStore) -> IdentityVerifier:
    if auth_mode == "mock":
        logger.warning("Auth mode is 'mock': signatures are NOT checked.")
        return MockAuthVerifier(accept_all=True)
    return Ed25519Verifier(nonce_store=store)


def create_initial_state(*, settings: Settings | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = SqliteRecordStore(settings.db_path)
    registry = TaskRegistry(
        store=store,
        verifier=build_verifier(settings.auth_mode, store),
        clock=SystemClock(),
    )
    key = load_or_create_private_key(settings.key_path)

    return AppState(settings=settings, registry=registry, key=key)
