"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class TransportConfig:
    """Message broker connection configuration."""
    api_url: str
    device_id: str
    token: str
    topic: str = "exec"
    verify_ssl: bool = True
    ca_cert_path: Optional[str] = None
    reconnect_delay: float = 5.0
    request_timeout: float = 30.0


@dataclass
class ExecConfig:
    """Command execution configuration."""
    shell: str = "/bin/sh"
    command_timeout: Optional[float] = None
    poll_interval: float = 1.0
    log_level: str = "INFO"

    @property
    def has_timeout(self) -> bool:
        """Check if commands are killed after a timeout."""
        return self.command_timeout is not None and self.command_timeout > 0


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_transport_config(self) -> TransportConfig:
        """Get transport configuration."""
        ...

    def get_exec_config(self) -> ExecConfig:
        """Get execution configuration."""
        ...


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return float(value)


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_transport_config(self) -> TransportConfig:
        """Get transport configuration from environment variables."""
        api_url = os.getenv("IOTEXEC_API_URL")
        device_id = os.getenv("IOTEXEC_DEVICE_ID")
        token = os.getenv("IOTEXEC_TOKEN")

        missing = [
            name
            for name, value in (
                ("IOTEXEC_API_URL", api_url),
                ("IOTEXEC_DEVICE_ID", device_id),
                ("IOTEXEC_TOKEN", token),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Set them in the service environment or pass an env file with -e."
            )

        return TransportConfig(
            api_url=api_url.rstrip("/"),
            device_id=device_id,
            token=token,
            topic=os.getenv("IOTEXEC_TOPIC", "exec"),
            verify_ssl=os.getenv("IOTEXEC_SSL_VERIFY", "true").lower() == "true",
            ca_cert_path=os.getenv("IOTEXEC_CA_CERT") or None,
            reconnect_delay=float(os.getenv("IOTEXEC_RECONNECT_DELAY", "5")),
            request_timeout=float(os.getenv("IOTEXEC_REQUEST_TIMEOUT", "30")),
        )

    def get_exec_config(self) -> ExecConfig:
        """Get execution configuration from environment variables."""
        poll_interval = float(os.getenv("IOTEXEC_POLL_INTERVAL", "1.0"))
        if poll_interval <= 0:
            raise ValueError(
                f"IOTEXEC_POLL_INTERVAL must be greater than 0, got {poll_interval}. "
                "It bounds how long the service waits for a message before checking for shutdown."
            )

        return ExecConfig(
            shell=os.getenv("IOTEXEC_SHELL", "/bin/sh"),
            command_timeout=_optional_float("IOTEXEC_COMMAND_TIMEOUT"),
            poll_interval=poll_interval,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
