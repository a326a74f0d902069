"""Configuration values sourced from environment variables."""

import os
from typing import Final

_replication_floor = os.getenv(key="SYSTEM_AUTH_DEFAULT_RF", default="1")
_superuser_setup_delay_ms = os.getenv(key="SUPERUSER_SETUP_DELAY_MS", default="10000")


SYSTEM_AUTH_DEFAULT_RF: Final[int] = int(_replication_floor)
SUPERUSER_SETUP_DELAY_MS: Final[int] = int(_superuser_setup_delay_ms)
AUTH_SCHEMA_CONFIG_PATH: Final[str | None] = os.getenv(key="AUTH_SCHEMA_CONFIG_PATH")
LOG_LEVEL: Final[str] = os.getenv(key="LOG_LEVEL", default="INFO")
LOGGER_NAME: Final[str] = os.getenv(key="LOGGER_NAME", default="auth-schema")
LOG_COLOUR_ENABLED: Final[bool] = bool(
    os.getenv(key="LOG_COLOUR_ENABLED", default="True").upper() == "TRUE"
)
