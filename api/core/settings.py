"""
Environment-sourced settings.

Every value is read at call time so tests (and a restarted worker) see the
current environment. There is no settings object to pass around.
"""

from __future__ import annotations

import os

STORE_BACKENDS = ("postgres", "memory")


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def api_key() -> str | None:
    # Unset and blank are the same thing: protected routes fail closed.
    return os.environ.get("API_KEY", "").strip() or None


def store_backend() -> str:
    backend = _env_str("STORE_BACKEND", "postgres").lower()
    if backend not in STORE_BACKENDS:
        raise RuntimeError(
            f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}, got {backend!r}."
        )
    return backend


def app_env() -> str:
    return _env_str("APP_ENV", "production").lower()


def is_development() -> bool:
    return app_env() == "development"


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def cors_allow_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def static_dir() -> str | None:
    return os.environ.get("STATIC_DIR", "").strip() or None


def db_pool_min_size() -> int:
    return max(1, _env_int("DB_POOL_MIN_SIZE", 1))


def db_pool_max_size() -> int:
    return max(db_pool_min_size(), _env_int("DB_POOL_MAX_SIZE", 5))


def db_command_timeout_s() -> int:
    return _env_int("DB_COMMAND_TIMEOUT_S", 30)


def host() -> str:
    return _env_str("HOST", "0.0.0.0")


def port() -> int:
    return _env_int("PORT", 3000)
