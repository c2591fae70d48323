"""Tests for wiring configuration."""

import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from omnigraph import WiringConfig


class TestWiringConfig:
    """Test defaults, validation and environment loading"""

    def test_defaults(self):
        config = WiringConfig()

        assert config.confirmation_timeout == 120.0
        assert config.resolution_concurrency == 8
        assert config.otlp_endpoint is None
        config.validate()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"confirmation_timeout": 0},
            {"confirmation_timeout": -1.5},
            {"resolution_concurrency": 0},
            {"log_level": "LOUD"},
        ],
    )
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ValueError):
            WiringConfig(**kwargs).validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OMNIGRAPH_CONFIRMATION_TIMEOUT", "30.5")
        monkeypatch.setenv("OMNIGRAPH_RESOLUTION_CONCURRENCY", "2")
        monkeypatch.setenv("OMNIGRAPH_LOG_LEVEL", "debug")
        monkeypatch.setenv("OMNIGRAPH_OTLP_ENDPOINT", "http://localhost:4317")
        monkeypatch.setenv("OMNIGRAPH_CONSOLE_SPANS", "yes")

        config = WiringConfig.from_env()

        assert config.confirmation_timeout == 30.5
        assert config.resolution_concurrency == 2
        assert config.log_level == "debug"
        assert config.otlp_endpoint == "http://localhost:4317"
        assert config.console_spans is True

    def test_from_env_defaults(self, monkeypatch):
        for name in (
            "OMNIGRAPH_CONFIRMATION_TIMEOUT",
            "OMNIGRAPH_RESOLUTION_CONCURRENCY",
            "OMNIGRAPH_LOG_LEVEL",
            "OMNIGRAPH_OTLP_ENDPOINT",
            "OMNIGRAPH_CONSOLE_SPANS",
        ):
            monkeypatch.delenv(name, raising=False)

        config = WiringConfig.from_env()

        assert config == WiringConfig()

    def test_from_env_invalid(self, monkeypatch):
        monkeypatch.setenv("OMNIGRAPH_CONFIRMATION_TIMEOUT", "0")
        with pytest.raises(ValueError):
            WiringConfig.from_env()
