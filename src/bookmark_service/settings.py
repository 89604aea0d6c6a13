from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import StartupError


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - DATABASE_URI: connection URI for the relational store (required)
    - DB_POOL_SIZE: number of pooled connections. Default 5
    - DB_ECHO: 'true' to log every SQL statement (default: false)
    - HOST: interface to bind. Default '0.0.0.0'
    - PORT: port to listen on. Default 8080
    - LOG_LEVEL: root log level. Default 'INFO'
    """

    database_uri: str
    db_pool_size: int = 5
    db_echo: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_positive_int(name: str, value: str) -> int:
    try:
        parsed = int(value.strip())
    except ValueError as e:
        raise StartupError(f"{name} must be an integer, got {value!r}") from e
    if parsed <= 0:
        raise StartupError(f"{name} must be positive, got {parsed}")
    return parsed


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """
    Return application settings loaded from the environment.

    A `.env` file in the working directory is loaded first if present; values
    already set in the process environment take precedence.

    Raises:
        StartupError: if DATABASE_URI is missing or a numeric setting is invalid.
    """
    load_dotenv()

    database_uri = os.getenv("DATABASE_URI", "").strip()
    if not database_uri:
        raise StartupError("DATABASE_URI environment variable is not set")

    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise StartupError(f"LOG_LEVEL is not a valid log level: {log_level!r}")

    return Settings(
        database_uri=database_uri,
        db_pool_size=_parse_positive_int("DB_POOL_SIZE", _get_env("DB_POOL_SIZE", "5")),
        db_echo=_parse_bool(_get_env("DB_ECHO", "false"), False),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_positive_int("PORT", _get_env("PORT", "8080")),
        log_level=log_level,
    )
