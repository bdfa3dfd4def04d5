"""
Component wiring for Boshly.

Construction happens in two phases:

1. build_components() creates the resolved configuration, the executor, the
   installer and the services, then hands the installer's resolved-path
   accessor to the executor. Nothing is spawned or downloaded yet.
2. run_startup() runs the installer and the configuration validator. It must
   complete before the first tool call.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from boshly.config.provider import ConfigProvider, EnvConfigProvider
from boshly.modules.config import ConfigResolver, EffectiveConfig
from boshly.modules.executor import CommandExecutor
from boshly.modules.health import ConfigValidator, HealthProbe
from boshly.modules.installer import BoshCliInstaller
from boshly.modules.operations import BoshServices, build_services
from boshly.modules.retry import RetryPolicy

logger = logging.getLogger("boshly.bootstrap")


@dataclass
class Components:
    """Everything the application needs at runtime."""

    config: EffectiveConfig
    executor: CommandExecutor
    installer: BoshCliInstaller
    retry_policy: RetryPolicy
    services: BoshServices
    health_probe: HealthProbe


def build_components(provider: Optional[ConfigProvider] = None) -> Components:
    """
    Construct and wire all components.

    Raises:
        ConfigurationError: If the CA certificate cannot be materialized
    """
    provider = provider or EnvConfigProvider()

    config = ConfigResolver(provider.get_bosh_settings()).resolve()
    executor = CommandExecutor(config)
    installer = BoshCliInstaller(provider.get_installer_settings())
    executor.set_cli_path_provider(lambda: installer.resolved_cli_path)

    retry_settings = provider.get_retry_settings()
    retry_policy = RetryPolicy(
        max_retries=retry_settings.max_attempts,
        delay_seconds=retry_settings.delay_seconds,
    )

    return Components(
        config=config,
        executor=executor,
        installer=installer,
        retry_policy=retry_policy,
        services=build_services(executor, retry_policy),
        health_probe=HealthProbe(executor),
    )


def run_startup(components: Components) -> None:
    """
    Install the CLI, then validate configuration.

    Raises:
        ConfigurationError: If mandatory configuration is missing
    """
    components.installer.install()
    ConfigValidator(components.config, components.executor).validate()
    logger.info(f"BOSH commands will use: {components.executor.cli_path}")
