from __future__ import annotations

from pathlib import Path

import pytest

from focus_mcp import config


def test_split_csv_preserve_case() -> None:
    values = config._split_csv_preserve_case(" A, B ,,C ")
    assert values == ["A", "B", "C"]
    assert config._split_csv_preserve_case(None) == []


def test_resolve_path_relative_to_project_root() -> None:
    root = config._project_root().resolve()
    assert config._resolve_path("data/focus.sqlite") == str(root / "data" / "focus.sqlite")


def test_resolve_path_keeps_absolute(tmp_path: Path) -> None:
    target = tmp_path / "db.sqlite"
    assert config._resolve_path(str(target)) == str(target.resolve())


def test_env_int_uses_default_for_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_INT_VALUE", "")
    assert config._env_int("TEST_INT_VALUE", 7) == 7


def test_env_int_invalid_value_returns_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_INT_INVALID", "not_a_number")
    assert config._env_int("TEST_INT_INVALID", 42) == 42


def test_env_bool(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_BOOL", "Yes")
    assert config._env_bool("TEST_BOOL", False) is True
    monkeypatch.setenv("TEST_BOOL", "off")
    assert config._env_bool("TEST_BOOL", True) is False
    monkeypatch.delenv("TEST_BOOL")
    assert config._env_bool("TEST_BOOL", True) is True


def test_load_settings_reads_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    db_path = tmp_path / "nested" / "focus.sqlite"
    monkeypatch.setenv("MCP_PORT", "9100")
    monkeypatch.setenv("SQLITE_PATH", str(db_path))
    monkeypatch.setenv("LEDGER_QUEUE_SIZE", "25")
    monkeypatch.setenv("AUTH_SESSION_COOKIE", "sid")
    monkeypatch.setenv("HTTP_ALLOWED_ORIGINS", "https://app.example.com/, https://b.example.com")
    monkeypatch.setenv("MCP_SESSION_IDLE_TIMEOUT_SECONDS", "120")

    settings = config.load_settings()

    assert settings.server.port == 9100
    assert settings.storage.sqlite_path == str(db_path.resolve())
    assert db_path.parent.is_dir()
    assert settings.ledger.queue_size == 25
    assert settings.auth.session_cookie_name == "sid"
    assert settings.server.http_allowed_origins == (
        "https://app.example.com",
        "https://b.example.com",
    )
    assert settings.sessions.idle_timeout_seconds == 120
    assert config.load_settings() is settings


def test_load_settings_raises_runtime_error_on_validation(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "focus.sqlite"))
    monkeypatch.setenv("MCP_PORT", "80")

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        config.load_settings()


def test_unsupported_session_store_is_rejected(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "focus.sqlite"))
    monkeypatch.setenv("MCP_SESSION_STORE", "redis")

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        config.load_settings()


def test_ledger_settings_fields() -> None:
    assert set(config.LedgerSettings.model_fields) == {"queue_size", "default_limit"}
