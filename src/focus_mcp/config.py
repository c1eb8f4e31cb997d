"""Configuration management for the Focus MCP server."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class StorageSettings(BaseModel):
    sqlite_path: str = Field(default="./data/focus.sqlite")
    sqlite_wal: bool = Field(default=True)


class AuthSettings(BaseModel):
    """Authentication settings.

    Human users arrive with a session cookie issued by the external session
    provider; agents arrive with a bearer API token.
    """

    session_cookie_name: str = Field(default="focus_session_token", min_length=1)
    audit_enabled: bool = Field(
        default=True,
        description="Emit REQUEST_START/REQUEST_END log lines for every request.",
    )


class LedgerSettings(BaseModel):
    queue_size: int = Field(
        default=1000,
        ge=1,
        le=100_000,
        description="Pending action-log writes held in memory before new ones are dropped.",
    )
    default_limit: int = Field(default=50, ge=1, le=100)


class SessionSettings(BaseModel):
    # Only the in-process store ships; a shared store is needed for more than one instance.
    store: Literal["memory"] = Field(default="memory")
    idle_timeout_seconds: int = Field(default=1800, ge=10, le=86_400)
    sweep_interval_seconds: int = Field(default=60, ge=1, le=3600)


class ServerSettings(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1024, le=65535)
    instructions: str = Field(
        default=(
            "Use these tools to read and change the user's tasks, projects and goals. "
            "Every change you make is recorded in the user's activity feed under your "
            "token name."
        )
    )
    http_allowed_origins: tuple[str, ...] = Field(default=())
    http_allow_missing_origin: bool = Field(default=True)
    http_enable_cors: bool = Field(default=False)
    http_trust_forwarded_headers: bool = Field(default=False)

    @field_validator("http_allowed_origins")
    @classmethod
    def _strip_trailing_slash(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(origin.rstrip("/") for origin in value)


class Settings(BaseModel):
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    sessions: SessionSettings = Field(default_factory=SessionSettings)


ENV_KEYS = {
    "host": "MCP_HOST",
    "port": "MCP_PORT",
    "instructions": "MCP_INSTRUCTIONS",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "sqlite_path": "SQLITE_PATH",
    "sqlite_wal": "SQLITE_WAL",
    "session_cookie": "AUTH_SESSION_COOKIE",
    "audit_enabled": "AUTH_AUDIT_ENABLED",
    "ledger_queue_size": "LEDGER_QUEUE_SIZE",
    "session_store": "MCP_SESSION_STORE",
    "session_idle_timeout": "MCP_SESSION_IDLE_TIMEOUT_SECONDS",
    "session_sweep_interval": "MCP_SESSION_SWEEP_INTERVAL_SECONDS",
}

_TRUE_VALUES = frozenset({"1", "true", "yes"})


def _split_csv_preserve_case(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _resolve_path(path: str) -> str:
    candidate = Path(path)
    if candidate.is_absolute():
        return str(candidate.resolve())
    return str((_project_root() / candidate).resolve())


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %d", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")
    log_file_env = os.getenv(ENV_KEYS["log_file"])

    settings_data: dict[str, object] = {
        "server": {
            "host": os.getenv(ENV_KEYS["host"], ServerSettings().host),
            "port": _env_int(ENV_KEYS["port"], ServerSettings().port),
            "instructions": os.getenv(ENV_KEYS["instructions"], ServerSettings().instructions),
            "http_allowed_origins": tuple(
                _split_csv_preserve_case(os.getenv("HTTP_ALLOWED_ORIGINS"))
            ),
            "http_allow_missing_origin": _env_bool(
                "HTTP_ALLOW_MISSING_ORIGIN",
                ServerSettings().http_allow_missing_origin,
            ),
            "http_enable_cors": _env_bool(
                "HTTP_ENABLE_CORS",
                ServerSettings().http_enable_cors,
            ),
            "http_trust_forwarded_headers": _env_bool(
                "HTTP_TRUST_FORWARDED_HEADERS",
                ServerSettings().http_trust_forwarded_headers,
            ),
        },
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _resolve_path(log_file_env) if log_file_env else None,
        },
        "storage": {
            "sqlite_path": _resolve_path(
                os.getenv(ENV_KEYS["sqlite_path"], StorageSettings().sqlite_path)
            ),
            "sqlite_wal": _env_bool(ENV_KEYS["sqlite_wal"], StorageSettings().sqlite_wal),
        },
        "auth": {
            "session_cookie_name": os.getenv(
                ENV_KEYS["session_cookie"], AuthSettings().session_cookie_name
            ),
            "audit_enabled": _env_bool(ENV_KEYS["audit_enabled"], AuthSettings().audit_enabled),
        },
        "ledger": {
            "queue_size": _env_int(ENV_KEYS["ledger_queue_size"], LedgerSettings().queue_size),
        },
        "sessions": {
            "store": os.getenv(ENV_KEYS["session_store"], SessionSettings().store),
            "idle_timeout_seconds": _env_int(
                ENV_KEYS["session_idle_timeout"],
                SessionSettings().idle_timeout_seconds,
            ),
            "sweep_interval_seconds": _env_int(
                ENV_KEYS["session_sweep_interval"],
                SessionSettings().sweep_interval_seconds,
            ),
        },
    }

    try:
        settings = Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    Path(settings.storage.sqlite_path).parent.mkdir(parents=True, exist_ok=True)

    return settings
