from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import streamlit as st

CONFIG_FILE_NAME = "settings.json"
ENV_DATA_DIR = "VET_SUPPLY_DATA_DIR"
ENV_CLIENT_TIERS = "VET_SUPPLY_CLIENT_TIERS"
ENV_MERGE_BATCHES = "VET_SUPPLY_MERGE_BATCHES"
SESSION_DATA_DIR = "vet_supply_data_dir"

# Pricing columns a signed-in client can be mapped to (email local part).
DEFAULT_CLIENT_TIERS = ("vets", "farms", "petshops")


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    currency: str = "₱"
    client_tiers: tuple[str, ...] = DEFAULT_CLIENT_TIERS
    clients_per_page: int = 10
    merge_inventory_batches: bool = False

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"


def _default_data_dir() -> Path:
    return Path.home() / ".vet_supply"


def _load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if cfg.exists():
        try:
            return json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
    return {}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def _env_tiers() -> tuple[str, ...]:
    raw = os.getenv(ENV_CLIENT_TIERS, "")
    tiers = tuple(t.strip().lower() for t in raw.split(",") if t.strip())
    return tiers or DEFAULT_CLIENT_TIERS


def persist_data_dir(data_dir_str: str) -> None:
    data_dir = Path(data_dir_str).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)

    cfg = data_dir / CONFIG_FILE_NAME
    payload = {"data_dir": str(data_dir)}
    cfg.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # Update session for immediate effect
    st.session_state[SESSION_DATA_DIR] = str(data_dir)


def load_settings(session_data_dir: Optional[str] = None) -> Settings:
    # Priority order:
    # 1) Session state (set via Data Management page)
    # 2) Environment variable
    # 3) Persisted settings in default folder
    # 4) Default folder
    if session_data_dir:
        data_dir = Path(session_data_dir).expanduser().resolve()
    elif os.getenv(ENV_DATA_DIR):
        data_dir = Path(os.getenv(ENV_DATA_DIR, "")).expanduser().resolve()
    else:
        default_dir = _default_data_dir()
        persisted = _load_persisted_settings(default_dir)
        data_dir = Path(persisted.get("data_dir", default_dir)).expanduser().resolve()

    data_dir.mkdir(parents=True, exist_ok=True)
    return Settings(
        data_dir=data_dir,
        db_path=data_dir / "app.db",
        client_tiers=_env_tiers(),
        merge_inventory_batches=_env_flag(ENV_MERGE_BATCHES),
    )


@st.cache_resource
def get_settings() -> Settings:
    return load_settings(st.session_state.get(SESSION_DATA_DIR))
