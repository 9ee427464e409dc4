"""Configuration module for nomnom."""

from nomnom.config.loader import get_config_path, load_config, save_config
from nomnom.config.schema import Config, RecoverySettings, RetrySettings
from nomnom.recovery.orchestrator import RetryOrchestrator
from nomnom.recovery.registry import AttemptRegistry


def build_orchestrator(config: Config, registry: AttemptRegistry | None = None) -> RetryOrchestrator:
    """Create an orchestrator honouring the recovery settings."""
    return RetryOrchestrator(registry, enable_logging=config.recovery.enable_logging)


__all__ = [
    "Config",
    "RecoverySettings",
    "RetrySettings",
    "build_orchestrator",
    "get_config_path",
    "load_config",
    "save_config",
]
