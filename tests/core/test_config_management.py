import json
import logging

import pytest

from form_auditor.utils import config_loader
from form_auditor.utils.config_loader import get_nested_config, load_config
from form_auditor.utils.configure_logging import LogWithTqdm, configure_logger
from form_auditor.utils.path_utils import PathUtils

# A small, predictable configuration for the tests
MOCK_SETTINGS_CONTENT = {
    "logging": {
        "level": "WARNING"
    },
    "capture": {
        "frame_timeout_ms": 250,
        "ignore_children": ["script"]
    }
}


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Sets up an isolated configuration:
    - Writes a fake 'settings.json' into a temporary directory.
    - Monkeypatches PathUtils so the loader finds it.
    - Replaces the global CONFIG with the freshly loaded file.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: settings_file)

    config = load_config()
    monkeypatch.setattr(config_loader, 'CONFIG', config)
    return settings_file


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    for name in ("form_auditor.audits", "aiohttp"):
        logging.getLogger(name).setLevel(logging.NOTSET)


# --- Tests for the loader ---

def test_load_config(config_env):
    """The loader reads settings.json from the package location."""
    config = load_config()
    assert config["logging"]["level"] == "WARNING"
    assert config["capture"]["frame_timeout_ms"] == 250


def test_load_config_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: tmp_path / "missing.json")
    assert load_config() == {}


def test_load_config_invalid_json(tmp_path, monkeypatch):
    broken = tmp_path / "settings.json"
    broken.write_text("{ not json")
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: broken)
    assert load_config() == {}


def test_packaged_settings_file_exists():
    assert PathUtils.get_settings_file().name == "settings.json"
    assert PathUtils.get_settings_file().exists()


# --- Tests for nested lookups ---

def test_get_nested(config_env):
    assert get_nested_config("capture.frame_timeout_ms") == 250
    assert get_nested_config("capture.ignore_children") == ["script"]


def test_get_nested_defaults(config_env):
    assert get_nested_config("non.existent.key", "default") == "default"
    assert get_nested_config("capture.frame_timeout_ms.deeper", 1) == 1
    assert get_nested_config("capture.unknown") is None


def test_builder_reads_capture_settings(config_env):
    """The DOM builder picks its defaults up from the configuration."""
    from form_auditor.dom.builder import DOMBuilder

    builder = DOMBuilder()
    assert builder.frame_timeout == 0.25
    assert builder.ignore_children == {"script"}


# --- Tests for logging ---

def test_configure_logger_installs_tqdm_handler(restore_root_logger):
    handler = configure_logger(
        general_level="WARNING",
        module_specific_levels={"form_auditor.audits": "DEBUG"},
        silenced_loggers={"aiohttp": "ERROR"},
    )

    assert isinstance(handler, LogWithTqdm)
    assert restore_root_logger.handlers == [handler]
    assert restore_root_logger.level == logging.WARNING
    assert logging.getLogger("form_auditor.audits").level == logging.DEBUG
    assert logging.getLogger("aiohttp").level == logging.ERROR


def test_log_with_tqdm_writes_to_stderr(restore_root_logger, capsys):
    configure_logger(general_level="INFO")
    logging.getLogger("form_auditor.test").info("capture finished")

    captured = capsys.readouterr()
    assert "capture finished" in captured.err
    assert "INFO" in captured.err


def test_configure_logger_uses_configured_level(config_env, restore_root_logger):
    configure_logger()
    assert restore_root_logger.level == logging.WARNING
