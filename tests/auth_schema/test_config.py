import importlib
import logging
from datetime import timedelta

import pytest

from src import settings
from src.auth_schema.config import BootstrapConfig, load_bootstrap_config, read_node_config
from src.auth_schema.exceptions import ConfigurationDefaultError
from src.auth_schema.keyspace import assemble

DEFAULT_DELAY = timedelta(milliseconds=settings.SUPERUSER_SETUP_DELAY_MS)


@pytest.fixture
def reload_settings(monkeypatch):
    """Reload src.settings after setting env vars; restores the module afterwards."""

    def _reload(**env: str) -> None:
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        importlib.reload(settings)

    yield _reload
    monkeypatch.undo()
    importlib.reload(settings)


def test_defaults_come_from_settings():
    config = BootstrapConfig()
    assert config.default_keyspace_rf is None
    assert config.replication_floor == settings.SYSTEM_AUTH_DEFAULT_RF
    assert config.superuser_setup_delay == DEFAULT_DELAY


def test_load_reads_yaml_values(write_config):
    path = write_config("default_keyspace_rf: 3\nsuperuser_setup_delay_ms: 500\n")
    config = load_bootstrap_config(path)
    assert config.default_keyspace_rf == 3
    assert config.superuser_setup_delay == timedelta(milliseconds=500)


def test_load_accepts_string_path(write_config):
    path = write_config("default_keyspace_rf: 2\n")
    assert load_bootstrap_config(str(path)).default_keyspace_rf == 2


def test_load_without_any_path_uses_defaults(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_SCHEMA_CONFIG_PATH", None)
    assert load_bootstrap_config() == BootstrapConfig()


def test_load_uses_path_from_settings(monkeypatch, write_config):
    path = write_config("default_keyspace_rf: 4\n")
    monkeypatch.setattr(settings, "AUTH_SCHEMA_CONFIG_PATH", str(path))
    assert load_bootstrap_config().default_keyspace_rf == 4


@pytest.mark.parametrize(
    "body",
    [
        "superuser_setup_delay_ms: 10\n",
        "default_keyspace_rf: three\n",
        "default_keyspace_rf: -2\n",
        "default_keyspace_rf: true\n",
        "default_keyspace_rf:\n",
    ],
)
def test_unusable_replication_factor_falls_back(write_config, caplog, body):
    with caplog.at_level(logging.WARNING):
        config = load_bootstrap_config(write_config(body))
    assert config.default_keyspace_rf is None
    assert "Falling back to the replication floor" in caplog.text


def test_invalid_delay_falls_back_to_default(write_config, caplog):
    with caplog.at_level(logging.WARNING):
        config = load_bootstrap_config(write_config("superuser_setup_delay_ms: soon\n"))
    assert config.superuser_setup_delay == DEFAULT_DELAY
    assert "superuser_setup_delay_ms must be an integer" in caplog.text


def test_missing_file_falls_back_to_defaults(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        config = load_bootstrap_config(tmp_path / "absent.yaml")
    assert config == BootstrapConfig()
    assert "Cannot read node config" in caplog.text


def test_read_node_config_empty_document(write_config):
    assert read_node_config(write_config("")) == {}


def test_read_node_config_rejects_non_mapping(write_config):
    with pytest.raises(ConfigurationDefaultError):
        read_node_config(write_config("- a\n- b\n"))


def test_read_node_config_rejects_invalid_yaml(write_config):
    with pytest.raises(ConfigurationDefaultError):
        read_node_config(write_config("default_keyspace_rf: [1, 2\n"))


def test_non_mapping_document_is_tolerated_by_loader(write_config):
    assert load_bootstrap_config(write_config("- 3\n")) == BootstrapConfig()


def test_replication_floor_and_delay_follow_environment(reload_settings):
    reload_settings(SYSTEM_AUTH_DEFAULT_RF="3", SUPERUSER_SETUP_DELAY_MS="2500")
    assert settings.SYSTEM_AUTH_DEFAULT_RF == 3
    assert settings.SUPERUSER_SETUP_DELAY_MS == 2500

    config = BootstrapConfig()
    assert config.replication_floor == 3
    assert config.superuser_setup_delay == timedelta(milliseconds=2500)


def test_raised_floor_from_environment_wins_over_configured_rf(reload_settings, write_config):
    reload_settings(SYSTEM_AUTH_DEFAULT_RF="5")
    config = load_bootstrap_config(write_config("default_keyspace_rf: 2\n"))
    assert config.replication_floor == 5
    keyspace = assemble(config.replication_floor, config.default_keyspace_rf)
    assert keyspace.replication_factor == 5


def test_delay_from_environment_is_the_fallback_for_bad_yaml(reload_settings, write_config):
    reload_settings(SUPERUSER_SETUP_DELAY_MS="750")
    config = load_bootstrap_config(write_config("superuser_setup_delay_ms: soon\n"))
    assert config.superuser_setup_delay == timedelta(milliseconds=750)
