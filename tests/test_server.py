"""
Unit Tests for the Server Entry Point.

Covers debug mode detection, logging configuration and the Gunicorn
configuration module. The Gunicorn server itself is not started.
"""
import importlib.util
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from font_library import server


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_is_debug_enabled_from_argv(monkeypatch):
    monkeypatch.delenv(server.DEBUG_ENV_VAR, raising=False)

    assert server.is_debug_enabled(["--debug"]) is True
    assert server.is_debug_enabled([]) is False


@pytest.mark.parametrize("value,expected", [
    ("true", True),
    ("1", True),
    ("YES", True),
    ("false", False),
    ("", False),
])
def test_is_debug_enabled_from_env(monkeypatch, value, expected):
    monkeypatch.setenv(server.DEBUG_ENV_VAR, value)

    assert server.is_debug_enabled([]) is expected


def test_configure_logging_adds_file_and_stdout_handlers(tmp_path, restore_root_logger):
    log_file = tmp_path / "font_library.log"

    server.configure_logging(debug=False, log_file=str(log_file))

    handlers = restore_root_logger.handlers
    assert restore_root_logger.level == logging.INFO
    assert len(handlers) == 2
    file_handler = next(h for h in handlers if isinstance(h, RotatingFileHandler))
    assert file_handler.maxBytes == 10 * 1024 * 1024
    assert file_handler.backupCount == 3

    logging.getLogger("font_families.controller").info("created font family")
    file_handler.flush()
    assert " - font_families.controller - INFO - created font family" in log_file.read_text()


def test_configure_logging_debug_level(tmp_path, restore_root_logger):
    server.configure_logging(debug=True, log_file=str(tmp_path / "debug.log"))

    assert restore_root_logger.level == logging.DEBUG


def test_gunicorn_config_module():
    config_path = Path(server.__file__).parent / "gunicorn_config.py"
    spec = importlib.util.spec_from_file_location("gunicorn_config", config_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    assert module.bind == "0.0.0.0:5000"
    assert module.worker_class == "sync"
    assert module.logconfig_dict["version"] == 1
