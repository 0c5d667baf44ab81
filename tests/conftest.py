# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskledger.auth.mock_verifier import MockAuthVerifier
from taskledger.config import Settings
from taskledger.core.clock import FixedClock
from taskledger.storage.memory_store import InMemoryRecordStore
from taskledger.tasks.registry import TaskRegistry

LEDGER_TS = 1678886400  # 2023-03-15 00:00:00 UTC

OWNER_A = "a" * 64
OWNER_B = "b" * 64


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(LEDGER_TS)


@pytest.fixture()
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture()
def verifier() -> MockAuthVerifier:
    return MockAuthVerifier(accept_all=True)


@pytest.fixture()
def registry(store, verifier, clock) -> TaskRegistry:
    """
    Registry wired with in-memory fakes.

    Identities are plain strings here; signature checking has its own tests.
    """
    return TaskRegistry(store=store, verifier=verifier, clock=clock)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every local path into tmp_path."""
    data_dir = tmp_path / "data"
    return Settings(
        app_name="taskledger-test",
        log_level="DEBUG",
        auth_mode="ed25519",
        console_enabled=False,
        data_dir=data_dir,
        db_path=data_dir / "tasks.sqlite3",
        key_path=data_dir / "identity.pem",
    )
