# src/taskboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every value has a working default.
- Real environment variables always win over .env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKBOARD"

DEFAULT_API_URL = "http://localhost:3000"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


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


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


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

    # ---- Remote task service ----
    api_url: str
    connect_timeout_seconds: float
    read_timeout_seconds: float

    # ---- Offline demo service ----
    offline: bool
    offline_latency_seconds: float
    offline_failure_rate: float

    # ---- Console ----
    notice_history: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskboard").strip() or "taskboard"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskboard"))

        # NEXT_PUBLIC_API_URL is what the web frontend reads; accept it for shared .env files.
        api_url = (_first_env(_k("API_URL"), "NEXT_PUBLIC_API_URL", default=DEFAULT_API_URL) or "").strip()
        api_url = api_url.rstrip("/") or DEFAULT_API_URL

        connect_timeout = max(0.1, _env_float(_k("CONNECT_TIMEOUT_SECONDS"), 5.0))
        read_timeout = max(0.1, _env_float(_k("READ_TIMEOUT_SECONDS"), 15.0))

        offline = _env_bool(_k("OFFLINE"), False)
        offline_latency = max(0.0, _env_float(_k("OFFLINE_LATENCY_SECONDS"), 0.3))
        offline_failure_rate = min(1.0, max(0.0, _env_float(_k("OFFLINE_FAILURE_RATE"), 0.0)))

        notice_history = max(1, _env_int(_k("NOTICE_HISTORY"), 50))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            api_url=api_url,
            connect_timeout_seconds=connect_timeout,
            read_timeout_seconds=read_timeout,
            offline=offline,
            offline_latency_seconds=offline_latency,
            offline_failure_rate=offline_failure_rate,
            notice_history=notice_history,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
