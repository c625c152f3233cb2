"""
Tests for YAML configuration loading.
"""

import pytest

from spending_alerts.config import load_config, parse_config
from spending_alerts.errors import ConfigError

VALID_CONFIG = """
payments_api:
  base_url: https://payments.example.com/api
  timeout_seconds: 10

smtp:
  host: smtp.example.com
  port: 587

email:
  sender_address: alerts@example.com

customer_id: customer-123
log_level: debug
"""


def minimal_config():
    return {
        "payments_api": {"base_url": "https://payments.example.com/"},
        "smtp": {"host": "smtp.example.com", "port": 25},
        "email": {"sender_address": "alerts@example.com"},
    }


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(VALID_CONFIG)
    return path


class TestLoadConfig:
    """Tests for reading the configuration file."""

    def test_loads_valid_file(self, config_file):
        config = load_config(config_file)

        assert config.payment_api.base_url == "https://payments.example.com/api/"
        assert config.payment_api.timeout_seconds == 10.0
        assert config.email_service.smtp_server.host == "smtp.example.com"
        assert config.email_service.smtp_server.port == 587
        assert config.email_service.sender_address == "alerts@example.com"
        assert config.customer_id == "customer-123"
        assert config.log_level == "DEBUG"

    def test_accepts_string_path(self, config_file):
        assert load_config(str(config_file)).customer_id == "customer-123"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("payments_api: [unclosed")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)


class TestParseConfig:
    """Tests for validating parsed configuration."""

    def test_defaults(self):
        config = parse_config(minimal_config())

        assert config.payment_api.timeout_seconds == 30.0
        assert config.email_service.timeout_seconds == 30.0
        assert config.customer_id is None
        assert config.log_level == "INFO"

    def test_base_url_slash_kept(self):
        assert parse_config(minimal_config()).payment_api.base_url == "https://payments.example.com/"

    @pytest.mark.parametrize("section", ["payments_api", "smtp", "email"])
    def test_missing_section(self, section):
        raw = minimal_config()
        del raw[section]

        with pytest.raises(ConfigError, match=section):
            parse_config(raw)

    @pytest.mark.parametrize("section,key", [
        ("payments_api", "base_url"),
        ("smtp", "host"),
        ("smtp", "port"),
        ("email", "sender_address"),
    ])
    def test_missing_value(self, section, key):
        raw = minimal_config()
        del raw[section][key]

        with pytest.raises(ConfigError, match=f"{section}.{key}"):
            parse_config(raw)

    @pytest.mark.parametrize("port", ["smtp", 0, 70000])
    def test_invalid_port(self, port):
        raw = minimal_config()
        raw["smtp"]["port"] = port

        with pytest.raises(ConfigError, match="smtp.port"):
            parse_config(raw)

    @pytest.mark.parametrize("timeout", [0, -1, "soon"])
    def test_invalid_timeout(self, timeout):
        raw = minimal_config()
        raw["payments_api"]["timeout_seconds"] = timeout

        with pytest.raises(ConfigError, match="timeout_seconds"):
            parse_config(raw)
