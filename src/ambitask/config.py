# src/ambitask/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (server and console client share it).
- Nothing required at import time: every value has a local-dev default.
- Conventional hosting variables (PORT, DATABASE_URL) are honoured as fallbacks.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "AMBITASK"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


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


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


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

    # ---- Server ----
    store_url: str
    host: str
    port: int
    cors_origins: list[str]

    # ---- Console client ----
    api_url: str
    api_timeout_seconds: float
    watch_interval_seconds: float
    notify_display_seconds: float
    sound_enabled: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "ambitask")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/ambitask"))

        store_url = _first_env(
            _k("STORE_URL"),
            "DATABASE_URL",
            default=f"sqlite:///{data_dir / 'tasks.sqlite3'}",
        ) or ""

        host = _env(_k("HOST"), "127.0.0.1")
        # Hosting platforms usually hand out the listen port as plain PORT.
        port = _env_int(_k("PORT"), _env_int("PORT", 5000))
        cors_origins = _env_list(_k("CORS_ORIGINS"), ["*"])

        api_url = _env(_k("API_URL"), f"http://127.0.0.1:{port}").rstrip("/")
        api_timeout_seconds = _env_float(_k("API_TIMEOUT_SECONDS"), 10.0)
        watch_interval_seconds = _env_float(_k("WATCH_INTERVAL_SECONDS"), 1.0)
        notify_display_seconds = _env_float(_k("NOTIFY_DISPLAY_SECONDS"), 5.0)
        sound_enabled = _env_bool(_k("SOUND"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_url=store_url,
            host=host,
            port=port,
            cors_origins=cors_origins,
            api_url=api_url,
            api_timeout_seconds=api_timeout_seconds,
            watch_interval_seconds=watch_interval_seconds,
            notify_display_seconds=notify_display_seconds,
            sound_enabled=sound_enabled,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
