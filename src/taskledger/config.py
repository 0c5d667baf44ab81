# src/taskledger/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASKLEDGER"

AUTH_MODES = ("ed25519", "mock")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = _env(name, default).strip().lower()
    if raw not in choices:
        logger.warning("Ignoring %s=%r (expected one of %s)", name, raw, ", ".join(choices))
        return default
    return raw


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Identity ----
    auth_mode: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    key_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskledger") or "taskledger"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        auth_mode = _env_choice(_k("AUTH_MODE"), AUTH_MODES, "ed25519")
        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskledger"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "tasks.sqlite3")
        key_path = _env_path(_k("KEY_PATH"), data_dir / "identity.pem")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            auth_mode=auth_mode,
            console_enabled=console_enabled,
            data_dir=data_dir,
            db_path=db_path,
            key_path=key_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
