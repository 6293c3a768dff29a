"""Client configuration loaded from the environment (and an optional .env file)."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from luxacast.connection import BackoffPolicy
from luxacast.logger import get_logger

logger = get_logger("config")


class ClientConfig(BaseModel):
    """Settings of a luxacast client."""

    model_config = ConfigDict(frozen=True)

    host: str = Field("ws://localhost:8080", description="Websocket base URL of the server")
    group: str = Field("joris", min_length=1, description="Group whose state is followed")

    # Reconnect settings (seconds)
    min_reconnect_interval: float = Field(1.0, gt=0)
    max_reconnect_interval: float = Field(60.0, gt=0)
    reconnect_multiplier: float = Field(2.0, ge=1)
    keepalive_interval: float = Field(30.0, gt=0)

    brightness: float = Field(0.1, ge=0, le=1)
    log_level: str = "INFO"

    @property
    def address(self) -> str:
        """Websocket address of the group channel."""
        return f"{self.host.rstrip('/')}/{self.group}"

    def backoff_policy(self) -> BackoffPolicy:
        """
        Build the reconnect backoff policy.

        Raises:
            InvalidConfigurationError: If the reconnect bounds are inconsistent
        """
        return BackoffPolicy(
            min_delay=self.min_reconnect_interval,
            max_delay=self.max_reconnect_interval,
            multiplier=self.reconnect_multiplier,
        )


_ENV_VARS = {
    "host": "LUXACAST_HOST",
    "group": "LUXACAST_GROUP",
    "min_reconnect_interval": "LUXACAST_MIN_RECONNECT_INTERVAL",
    "max_reconnect_interval": "LUXACAST_MAX_RECONNECT_INTERVAL",
    "reconnect_multiplier": "LUXACAST_RECONNECT_MULTIPLIER",
    "keepalive_interval": "LUXACAST_KEEPALIVE_INTERVAL",
    "brightness": "LUXACAST_BRIGHTNESS",
    "log_level": "LUXACAST_LOG_LEVEL",
}


def load_config(env_file: Optional[str] = None, **overrides) -> ClientConfig:
    """
    Load client configuration from environment variables.

    Values set in the process environment win over the ``.env`` file.
    Keyword overrides that are not None win over both.

    Args:
        env_file: Path of a dotenv file (defaults to searching for ``.env``)
        **overrides: Field values taking precedence over the environment

    Returns:
        ClientConfig: Validated configuration

    Raises:
        ValidationError: If a value has the wrong type or is out of range
    """
    load_dotenv(env_file)

    values = {}
    for field_name, env_var in _ENV_VARS.items():
        value = os.getenv(env_var)
        if value is not None and value != "":
            values[field_name] = value

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        config = ClientConfig(**values)
    except ValidationError as e:
        logger.error(f"Invalid luxacast configuration: {e}")
        raise

    logger.debug(f"Loaded configuration for {config.address}")
    return config
