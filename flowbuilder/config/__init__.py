"""Client configuration."""

from flowbuilder.config.client_config import (
    ClientConfig,
    get_client_config,
    reset_client_config,
)

__all__ = ["ClientConfig", "get_client_config", "reset_client_config"]
