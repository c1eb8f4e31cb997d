from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from focus_mcp import logging_utils
from focus_mcp.config import LoggingSettings


@patch("focus_mcp.logging_utils.load_settings")
@patch("focus_mcp.logging_utils.logging.basicConfig")
def test_configure_logging_stream_only(
    mock_basic_config: MagicMock,
    mock_load_settings: MagicMock,
) -> None:
    mock_load_settings.return_value = SimpleNamespace(logging=LoggingSettings(level="debug"))

    logging_utils.configure_logging()

    kwargs = mock_basic_config.call_args.kwargs
    assert kwargs["force"] is True
    assert kwargs["level"] == logging.DEBUG
    assert len(kwargs["handlers"]) == 1


@patch("focus_mcp.logging_utils.logging.basicConfig")
def test_configure_logging_with_file(mock_basic_config: MagicMock, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "focus.log"

    logging_utils.configure_logging(LoggingSettings(level="WARNING", file=str(log_file)))

    handlers = mock_basic_config.call_args.kwargs["handlers"]
    assert len(handlers) == 2
    assert isinstance(handlers[1], logging.FileHandler)
    assert log_file.parent.is_dir()
    handlers[1].close()


@patch("focus_mcp.logging_utils.logging.basicConfig")
@patch("focus_mcp.logging_utils.logging.FileHandler", side_effect=OSError("permission denied"))
@patch("focus_mcp.logging_utils._logger")
def test_configure_logging_file_handler_error(
    mock_logger: MagicMock,
    _mock_file_handler: MagicMock,
    mock_basic_config: MagicMock,
    tmp_path: Path,
) -> None:
    logging_utils.configure_logging(LoggingSettings(file=str(tmp_path / "app.log")))

    mock_logger.warning.assert_called_once()
    assert len(mock_basic_config.call_args.kwargs["handlers"]) == 1


@patch("focus_mcp.logging_utils.logging.basicConfig")
def test_unknown_level_falls_back_to_info(mock_basic_config: MagicMock) -> None:
    logging_utils.configure_logging(LoggingSettings(level="chatty"))

    assert mock_basic_config.call_args.kwargs["level"] == logging.INFO


def test_get_logger_auto_configures(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logging_utils, "_logging_configured", False)

    calls = {"count": 0}

    def fake_configure() -> None:
        calls["count"] += 1
        monkeypatch.setattr(logging_utils, "_logging_configured", True)

    monkeypatch.setattr(logging_utils, "configure_logging", fake_configure)

    logger = logging_utils.get_logger("test.logger")
    assert logger.name == "test.logger"
    logging_utils.get_logger("test.other")
    assert calls["count"] == 1
