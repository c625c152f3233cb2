"""Loading and validation of the YAML configuration file."""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .adapters.email_service import EmailServiceConfig
from .adapters.payment_api import PaymentApiConfig
from .adapters.smtp_client import SmtpServerAddress
from .errors import ConfigError

logger = logging.getLogger("SpendingAlerts.Config")

DEFAULT_CONFIG_PATH = "config.yaml"


@dataclass(frozen=True)
class ApplicationConfig:
    """Start-up configuration. The only process-wide state of the service."""
    payment_api: PaymentApiConfig
    email_service: EmailServiceConfig
    customer_id: Optional[str] = None
    log_level: str = "INFO"


def load_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> ApplicationConfig:
    """
    Load configuration from a YAML file.

    Raises:
        ConfigError: If the file is missing, unreadable or incomplete.
    """
    config_file = Path(path)
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_file}")

    try:
        with open(config_file) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")

    config = parse_config(raw)
    logger.debug(f"Loaded configuration from {config_file}")
    return config


def parse_config(raw: Dict[str, Any]) -> ApplicationConfig:
    """Build an ApplicationConfig from an already parsed mapping."""
    payments = _section(raw, "payments_api")
    smtp = _section(raw, "smtp")
    email = _section(raw, "email")

    base_url = _required(payments, "payments_api", "base_url")
    # urljoin drops the last path segment unless the base ends with a slash
    if not base_url.endswith("/"):
        base_url += "/"

    return ApplicationConfig(
        payment_api=PaymentApiConfig(
            base_url=base_url,
            timeout_seconds=_timeout(payments, "payments_api")
        ),
        email_service=EmailServiceConfig(
            smtp_server=SmtpServerAddress(
                host=_required(smtp, "smtp", "host"),
                port=_port(smtp.get("port"))
            ),
            sender_address=_required(email, "email", "sender_address"),
            timeout_seconds=_timeout(smtp, "smtp")
        ),
        customer_id=raw.get("customer_id") or None,
        log_level=str(raw.get("log_level", "INFO")).upper()
    )


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = raw.get(name)
    if not isinstance(section, dict):
        raise ConfigError(f"Missing config section: {name}")
    return section


def _required(section: Dict[str, Any], section_name: str, key: str) -> str:
    value = section.get(key)
    if not value:
        raise ConfigError(f"Missing config value: {section_name}.{key}")
    return str(value)


def _port(value: Any) -> int:
    if value is None:
        raise ConfigError("Missing config value: smtp.port")
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid smtp.port: {value!r}")
    if not 0 < port < 65536:
        raise ConfigError(f"smtp.port out of range: {port}")
    return port


def _timeout(section: Dict[str, Any], section_name: str) -> float:
    value = section.get("timeout_seconds", 30)
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid {section_name}.timeout_seconds: {value!r}")
    if timeout <= 0:
        raise ConfigError(f"{section_name}.timeout_seconds must be positive")
    return timeout
