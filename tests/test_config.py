"""Tests for environment-driven client configuration."""

import pytest

from flowbuilder.config.client_config import (
    ClientConfig,
    get_client_config,
    reset_client_config,
)
from flowbuilder.logging import configure_logging


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_client_config()
    yield
    reset_client_config()


def test_defaults(monkeypatch):
    for var in ClientConfig._ENV_MAP.values():
        monkeypatch.delenv(var, raising=False)
    config = ClientConfig.get_default_instance()
    assert config.api_url == "http://localhost:3001"
    assert config.timeout is None
    assert (config.canvas_origin, config.canvas_spread) == (100.0, 300.0)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FLOWBUILDER_API_URL", "https://flows.example.com")
    monkeypatch.setenv("FLOWBUILDER_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("FLOWBUILDER_CANVAS_SPREAD", "50")
    config = ClientConfig.get_default_instance()
    assert config.api_url == "https://flows.example.com"
    assert config.timeout == 2.5
    assert config.canvas_spread == 50.0


def test_malformed_value_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("FLOWBUILDER_REQUEST_TIMEOUT", "soon")
    assert ClientConfig.get_default_instance().request_timeout == 0.0


def test_singleton_reads_environment_once(monkeypatch):
    monkeypatch.setenv("FLOWBUILDER_LOG_LEVEL", "DEBUG")
    first = get_client_config()
    monkeypatch.setenv("FLOWBUILDER_LOG_LEVEL", "ERROR")
    assert get_client_config() is first
    assert first.log_level == "DEBUG"

    reset_client_config()
    assert get_client_config().log_level == "ERROR"


def test_configure_logging_installs_one_handler():
    logger = configure_logging("debug")
    configure_logging("warning")
    handlers = [h for h in logger.handlers if h.get_name() == "flowbuilder"]
    assert len(handlers) == 1
    assert logger.level == 30
    logger.removeHandler(handlers[0])
