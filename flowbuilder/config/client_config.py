"""
Client Configuration.

Controls where the persistence/validation service lives, the HTTP
timeout, log verbosity, and where new nodes land on the canvas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flowbuilder.config.env_utils import read_env_defaults


@dataclass
class ClientConfig:
    """Flow builder client settings."""

    api_url: str = "http://localhost:3001"
    request_timeout: float = 0.0  # 0 = wait forever
    log_level: str = "INFO"

    # New nodes are dropped at origin + random() * spread on both axes
    canvas_origin: float = 100.0
    canvas_spread: float = 300.0

    _ENV_MAP = {
        "api_url": "FLOWBUILDER_API_URL",
        "request_timeout": "FLOWBUILDER_REQUEST_TIMEOUT",
        "log_level": "FLOWBUILDER_LOG_LEVEL",
        "canvas_origin": "FLOWBUILDER_CANVAS_ORIGIN",
        "canvas_spread": "FLOWBUILDER_CANVAS_SPREAD",
    }

    @classmethod
    def get_default_instance(cls) -> "ClientConfig":
        defaults = read_env_defaults(cls._ENV_MAP, cls.__dataclass_fields__)
        return cls(**defaults)

    @property
    def timeout(self) -> Optional[float]:
        """Timeout in the form httpx expects (``None`` disables it)."""
        return self.request_timeout if self.request_timeout > 0 else None


# ── Singleton ──

_config_instance: Optional[ClientConfig] = None


def get_client_config() -> ClientConfig:
    """Return the process-wide ClientConfig, reading the environment once."""
    global _config_instance
    if _config_instance is None:
        _config_instance = ClientConfig.get_default_instance()
    return _config_instance


def reset_client_config() -> None:
    """Forget the cached config so the next call re-reads the environment."""
    global _config_instance
    _config_instance = None
