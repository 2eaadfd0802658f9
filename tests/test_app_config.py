"""Tests for startup configuration: logging, session secret, grid limit, main()."""
import logging
from unittest.mock import patch

import pytest

from helpdesk.shared.logging_config import configure_logging
from helpdesk.web import app as app_module


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_sets_level_and_quiets_access_log(restore_root_logger):
    configure_logging(logging.DEBUG)
    assert restore_root_logger.level == logging.DEBUG
    assert logging.getLogger("uvicorn.access").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_session_secret_from_env(monkeypatch):
    monkeypatch.setenv("SESSION_SECRET", "from-env")
    assert app_module._get_session_secret() == "from-env"


def test_session_secret_persisted_in_data_root(tmp_path, monkeypatch):
    monkeypatch.delenv("SESSION_SECRET", raising=False)
    monkeypatch.setattr(app_module, "_DATA_ROOT", tmp_path)
    first = app_module._get_session_secret()
    assert (tmp_path / ".session_key").read_text().strip() == first
    assert app_module._get_session_secret() == first


def test_max_grids_from_env(monkeypatch):
    monkeypatch.setenv("HELPDESK_MAX_GRIDS", "5")
    assert app_module._max_grids() == 5


def test_max_grids_invalid_falls_back(monkeypatch):
    monkeypatch.setenv("HELPDESK_MAX_GRIDS", "lots")
    assert app_module._max_grids() == 64


def test_main_runs_uvicorn_with_env_host_and_port(monkeypatch):
    monkeypatch.setenv("HELPDESK_HOST", "0.0.0.0")
    monkeypatch.setenv("HELPDESK_PORT", "9001")
    with patch.object(app_module, "configure_logging") as mock_logging, \
            patch.object(app_module.uvicorn, "run") as mock_run:
        app_module.main()
    mock_logging.assert_called_once()
    args, kwargs = mock_run.call_args
    assert args == ("helpdesk.web.app:app",)
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 9001
