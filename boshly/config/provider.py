"""Configuration provider following Black Box Design principles."""
import os
import tempfile
from dataclasses import dataclass
from typing import Protocol


DEFAULT_CLI_PATH = "bosh"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


@dataclass(frozen=True)
class BoshSettings:
    """Explicit BOSH settings, before secret-folder fallback is applied."""
    director: str
    client: str
    client_secret: str
    ca_cert: str
    ca_cert_path: str
    cli_path: str
    timeout_seconds: int
    env_dir: str


@dataclass(frozen=True)
class RetrySettings:
    """Retry policy configuration."""
    max_attempts: int
    delay_seconds: float


@dataclass(frozen=True)
class InstallerSettings:
    """CLI installer configuration."""
    enabled: bool
    install_path: str
    cli_path: str


@dataclass(frozen=True)
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_bosh_settings(self) -> BoshSettings:
        """Get BOSH connection settings."""
        ...

    def get_retry_settings(self) -> RetrySettings:
        """Get retry settings."""
        ...

    def get_installer_settings(self) -> InstallerSettings:
        """Get CLI installer settings."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_bosh_settings(self) -> BoshSettings:
        """Get BOSH connection settings from environment variables."""
        return BoshSettings(
            director=os.getenv("BOSH_DIRECTOR", ""),
            client=os.getenv("BOSH_CLIENT", ""),
            client_secret=os.getenv("BOSH_CLIENT_SECRET", ""),
            ca_cert=os.getenv("BOSH_CA_CERT", ""),
            ca_cert_path=os.getenv("BOSH_CA_CERT_PATH", ""),
            cli_path=os.getenv("BOSH_CLI_PATH", DEFAULT_CLI_PATH),
            timeout_seconds=int(os.getenv("BOSH_CONNECTION_TIMEOUT", "60")),
            env_dir=os.getenv("BOSH_ENV_DIR", ".env"),
        )

    def get_retry_settings(self) -> RetrySettings:
        """Get retry settings from environment variables."""
        max_attempts = int(os.getenv("BOSH_RETRY_MAX_ATTEMPTS", "3"))
        if max_attempts < 1:
            raise ValueError("BOSH_RETRY_MAX_ATTEMPTS must be at least 1")
        return RetrySettings(
            max_attempts=max_attempts,
            delay_seconds=float(os.getenv("BOSH_RETRY_DELAY", "2")),
        )

    def get_installer_settings(self) -> InstallerSettings:
        """Get CLI installer settings from environment variables."""
        return InstallerSettings(
            enabled=_env_bool("BOSH_CLI_INSTALL_ENABLED", "true"),
            install_path=os.getenv(
                "BOSH_CLI_INSTALL_PATH", os.path.join(tempfile.gettempdir(), "bosh-cli")
            ),
            cli_path=os.getenv("BOSH_CLI_PATH", DEFAULT_CLI_PATH),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(os.getenv("API_PORT", "8080")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=_env_bool("API_DEBUG", "false"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
