"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_MAX_RECORDS = 200


def _project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = _project_root()
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def resolve_project_path(raw_path: str) -> Path:
    """
    Resolve a relative path against the project root.
    """

    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


@dataclass(frozen=True)
class ReadinessSettings:
    """
    Runtime settings for readiness analysis.
    """

    max_records: int = DEFAULT_MAX_RECORDS
    schema_path: str | None = None


@dataclass(frozen=True)
class LoggingSettings:
    """
    Root logging settings for command-line entry points.
    """

    level: str = "INFO"


@lru_cache(maxsize=1)
def get_readiness_settings() -> ReadinessSettings:
    """
    Return cached readiness settings from environment variables.
    """

    schema_path = _get_optional_str_env("GETS_SCHEMA_PATH")
    return ReadinessSettings(
        max_records=max(1, _get_int_env("READINESS_MAX_RECORDS", DEFAULT_MAX_RECORDS)),
        schema_path=str(resolve_project_path(schema_path)) if schema_path else None,
    )


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """
    Return cached logging settings from environment variables.
    """

    return LoggingSettings(level=_get_str_env("LOG_LEVEL", "INFO").upper())
