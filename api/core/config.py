"""
Environment-driven settings.

Values are read on every call so tests (and process managers) can change the
environment without re-importing modules.
"""

from __future__ import annotations

import os

DEFAULT_POOL_MIN_SIZE = 1
DEFAULT_POOL_MAX_SIZE = 5
DEFAULT_COMMAND_TIMEOUT = 30
DEFAULT_PORT = 80

# Any http(s) origin, matching the "http://*" / "https://*" allowlist.
DEFAULT_CORS_ORIGIN_REGEX = r"https?://.*"


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def require_env(name: str) -> str:
    value = os.environ.get(name)
    if value is None:
        raise RuntimeError(f"required {name} is not set")
    return value


def pool_min_size() -> int:
    return max(_env_int("DB_POOL_MIN_SIZE", DEFAULT_POOL_MIN_SIZE), 0)


def pool_max_size() -> int:
    return max(_env_int("DB_POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE), pool_min_size(), 1)


def command_timeout() -> int:
    return _env_int("DB_COMMAND_TIMEOUT", DEFAULT_COMMAND_TIMEOUT)


def cors_allowed_origins() -> list[str]:
    raw = _env_str("CORS_ALLOWED_ORIGINS")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def host() -> str:
    return _env_str("HOST", "0.0.0.0")


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)
