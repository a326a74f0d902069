"""
Bootstrap configuration for the auth keyspace.

Two inputs feed schema assembly and the startup sequencer:
- the node's default keyspace replication factor (YAML node config), and
- the superuser setup delay: how long startup waits before creating default
  superuser grants, so the auth tables are readable cluster-wide first.

The replication floor and the delay default come from `src.settings`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml

from src import settings
from src.auth_schema.exceptions import ConfigurationDefaultError
from src.logger import LOGGER

DEFAULT_KEYSPACE_RF_KEY = "default_keyspace_rf"
SUPERUSER_SETUP_DELAY_KEY = "superuser_setup_delay_ms"


@dataclass(frozen=True)
class BootstrapConfig:
    """
    Values read once at startup.

    default_keyspace_rf:
        Configured default replication factor, or None when unavailable.
    replication_floor:
        Hard minimum replication factor for the auth keyspace.
    superuser_setup_delay:
        Delay before default superuser privileges are granted.
    """

    default_keyspace_rf: int | None = None
    replication_floor: int = field(default_factory=lambda: settings.SYSTEM_AUTH_DEFAULT_RF)
    superuser_setup_delay: timedelta = field(
        default_factory=lambda: timedelta(milliseconds=settings.SUPERUSER_SETUP_DELAY_MS)
    )


def read_node_config(path: str | Path) -> dict[str, Any]:
    """
    Load the YAML node config at `path`.

    Raises:
        ConfigurationDefaultError: if the file is missing, unreadable, or not a mapping.
    """
    config_path = Path(path)
    try:
        with config_path.open("r") as f:
            document = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationDefaultError(f"Cannot read node config {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationDefaultError(f"Invalid YAML in node config {config_path}") from exc

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigurationDefaultError(
            f"Node config {config_path} must be a mapping, got {type(document).__name__}."
        )
    return document


def _non_negative_int(conf: dict[str, Any], key: str) -> int:
    """Return conf[key] as a non-negative int or raise ConfigurationDefaultError."""
    if key not in conf or conf[key] is None:
        raise ConfigurationDefaultError(f"{key} is not configured.")
    value = conf[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationDefaultError(f"{key} must be an integer, got {value!r}.")
    if value < 0:
        raise ConfigurationDefaultError(f"{key} must be non-negative, got {value}.")
    return value


def _resolve_default_keyspace_rf(conf: dict[str, Any]) -> int | None:
    try:
        return _non_negative_int(conf, DEFAULT_KEYSPACE_RF_KEY)
    except ConfigurationDefaultError as exc:
        LOGGER.warning("%s Falling back to the replication floor.", exc)
        return None


def _resolve_superuser_setup_delay(conf: dict[str, Any]) -> timedelta:
    default = timedelta(milliseconds=settings.SUPERUSER_SETUP_DELAY_MS)
    if SUPERUSER_SETUP_DELAY_KEY not in conf:
        return default
    try:
        return timedelta(milliseconds=_non_negative_int(conf, SUPERUSER_SETUP_DELAY_KEY))
    except ConfigurationDefaultError as exc:
        LOGGER.warning("%s Using %d ms.", exc, settings.SUPERUSER_SETUP_DELAY_MS)
        return default


def load_bootstrap_config(path: str | Path | None = None) -> BootstrapConfig:
    """
    Build the BootstrapConfig from the node config file and environment settings.

    Falls back to settings.AUTH_SCHEMA_CONFIG_PATH when `path` is None. Without
    any config file the default replication factor is unavailable (None).
    Configuration problems are logged and tolerated, never raised.
    """
    config_path = path if path is not None else settings.AUTH_SCHEMA_CONFIG_PATH
    if config_path is None:
        LOGGER.info("No node config given; auth keyspace uses the replication floor.")
        return BootstrapConfig()

    try:
        conf = read_node_config(config_path)
    except ConfigurationDefaultError as exc:
        LOGGER.warning("%s Falling back to defaults.", exc)
        return BootstrapConfig()

    return BootstrapConfig(
        default_keyspace_rf=_resolve_default_keyspace_rf(conf),
        superuser_setup_delay=_resolve_superuser_setup_delay(conf),
    )
