# src/procsim/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Every value has a sane default, so the simulator boots with no environment at all.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "PROCSIM"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_opt_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Machine resources ----
    total_ram: int
    total_disk: int
    total_cores: int

    # ---- Scheduling ----
    max_tasks: int
    time_quantum: int
    policy: str
    seed: int | None

    # ---- Session ----
    boot_task: str
    kernel_mode: bool

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            app_name=_env(_k("APP_NAME"), "procsim") or "procsim",
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            data_dir=_env_path(_k("DATA_DIR"), Path(".local/procsim")),
            total_ram=max(0, _env_int(_k("TOTAL_RAM"), 1024)),
            total_disk=max(0, _env_int(_k("TOTAL_DISK"), 2048)),
            total_cores=max(0, _env_int(_k("TOTAL_CORES"), 8)),
            max_tasks=max(1, _env_int(_k("MAX_TASKS"), 50)),
            time_quantum=max(1, _env_int(_k("TIME_QUANTUM"), 2)),
            policy=_env(_k("POLICY"), "fcfs"),
            seed=_env_opt_int(_k("SEED")),
            boot_task=_env(_k("BOOT_TASK"), "Calendar").strip(),
            kernel_mode=_env_bool(_k("KERNEL_MODE"), False),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
