from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/todos.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - AUTH_MODE: 'basic' (default) to check HTTP Basic credentials against AUTH_USERS,
      or 'header' to trust an identity header set by an upstream proxy
    - AUTH_USERS: comma-separated 'username:password' pairs for basic mode
    - AUTH_HEADER: header carrying the actor id in header mode. Default 'X-Authenticated-User'
    - LOG_LEVEL: logging level name. Default 'INFO'
    """

    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    auth_mode: str
    auth_users: Dict[str, str]
    auth_header: str
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _parse_users(users_value: str) -> Dict[str, str]:
    """
    Parse 'alice:secret,bob:hunter2' into a username -> password mapping.
    Entries without a ':' or with an empty username are skipped.
    """
    users: Dict[str, str] = {}
    for entry in users_value.split(","):
        username, sep, password = entry.strip().partition(":")
        username = username.strip()
        if not sep or not username:
            continue
        users[username] = password
    return users


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    sqlite_path = _get_env("SQLITE_DB_PATH", "./data/todos.db").strip()
    origins = _parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*"))

    auth_mode = _get_env("AUTH_MODE", "basic").strip().lower()
    if auth_mode not in {"basic", "header"}:
        auth_mode = "basic"

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=sqlite_path,
        cors_allow_origins=origins,
        auth_mode=auth_mode,
        auth_users=_parse_users(_get_env("AUTH_USERS", "")),
        auth_header=_get_env("AUTH_HEADER", "X-Authenticated-User").strip(),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
