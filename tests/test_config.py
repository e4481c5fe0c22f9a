"""
Tests for environment configuration and logging configuration.
"""

import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from iotexec.config import EnvConfigProvider, ExecConfig
from iotexec.logging_config import KeepaliveFilter, get_logging_config

REQUIRED_ENV = {
    "IOTEXEC_API_URL": "https://broker.example.com/",
    "IOTEXEC_DEVICE_ID": "device-1",
    "IOTEXEC_TOKEN": "secret",
}


@pytest.fixture
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("IOTEXEC_") or name == "LOG_LEVEL":
            monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestEnvConfigProvider:
    """Test EnvConfigProvider."""

    def test_transport_defaults(self, clean_env):
        for name, value in REQUIRED_ENV.items():
            clean_env.setenv(name, value)

        config = EnvConfigProvider().get_transport_config()

        assert config.api_url == "https://broker.example.com"
        assert config.device_id == "device-1"
        assert config.token == "secret"
        assert config.topic == "exec"
        assert config.verify_ssl is True
        assert config.ca_cert_path is None
        assert config.reconnect_delay == 5.0
        assert config.request_timeout == 30.0

    def test_transport_overrides(self, clean_env):
        for name, value in REQUIRED_ENV.items():
            clean_env.setenv(name, value)
        clean_env.setenv("IOTEXEC_TOPIC", "exec-staging")
        clean_env.setenv("IOTEXEC_SSL_VERIFY", "false")
        clean_env.setenv("IOTEXEC_CA_CERT", "/etc/ssl/ca.pem")

        config = EnvConfigProvider().get_transport_config()

        assert config.topic == "exec-staging"
        assert config.verify_ssl is False
        assert config.ca_cert_path == "/etc/ssl/ca.pem"

    def test_missing_required_variables(self, clean_env):
        clean_env.setenv("IOTEXEC_API_URL", "https://broker.example.com")

        with pytest.raises(ValueError) as exc_info:
            EnvConfigProvider().get_transport_config()

        assert "IOTEXEC_DEVICE_ID" in str(exc_info.value)
        assert "IOTEXEC_TOKEN" in str(exc_info.value)
        assert "IOTEXEC_API_URL" not in str(exc_info.value)

    def test_exec_defaults(self, clean_env):
        config = EnvConfigProvider().get_exec_config()

        assert config.shell == "/bin/sh"
        assert config.command_timeout is None
        assert config.has_timeout is False
        assert config.poll_interval == 1.0
        assert config.log_level == "INFO"

    def test_exec_overrides(self, clean_env):
        clean_env.setenv("IOTEXEC_SHELL", "/bin/bash")
        clean_env.setenv("IOTEXEC_COMMAND_TIMEOUT", "120")
        clean_env.setenv("LOG_LEVEL", "debug")

        config = EnvConfigProvider().get_exec_config()

        assert config.shell == "/bin/bash"
        assert config.command_timeout == 120.0
        assert config.has_timeout is True
        assert config.log_level == "DEBUG"

    def test_blank_timeout_means_none(self, clean_env):
        clean_env.setenv("IOTEXEC_COMMAND_TIMEOUT", " ")

        assert EnvConfigProvider().get_exec_config().command_timeout is None

    @pytest.mark.parametrize("value", ["0", "-1", "0.0"])
    def test_non_positive_poll_interval_rejected(self, clean_env, value):
        clean_env.setenv("IOTEXEC_POLL_INTERVAL", value)

        with pytest.raises(ValueError, match="IOTEXEC_POLL_INTERVAL"):
            EnvConfigProvider().get_exec_config()

    def test_poll_interval_override(self, clean_env):
        clean_env.setenv("IOTEXEC_POLL_INTERVAL", "0.25")

        assert EnvConfigProvider().get_exec_config().poll_interval == 0.25

    def test_zero_timeout_disabled(self):
        assert ExecConfig(command_timeout=0).has_timeout is False


class TestLoggingConfig:
    """Test logging configuration."""

    def test_verbose_enables_debug(self):
        config = get_logging_config(verbose=True)

        assert config["loggers"]["iotexec"]["level"] == "DEBUG"

    def test_level_used_when_not_verbose(self):
        config = get_logging_config(verbose=False, level="WARNING")

        assert config["loggers"]["iotexec"]["level"] == "WARNING"
        assert config["root"]["level"] == "WARNING"

    def test_keepalive_filter(self):
        log_filter = KeepaliveFilter()

        def record(name, msg):
            return logging.LogRecord(name, logging.DEBUG, __file__, 1, msg, None, None)

        assert not log_filter.filter(record("iotexec.modules.transport.sse", "Keepalive received"))
        assert log_filter.filter(record("iotexec.modules.transport.sse", "SSE connection established"))
        assert log_filter.filter(record("iotexec.modules.dispatcher", "keepalive"))
