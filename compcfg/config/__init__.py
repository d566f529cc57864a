"""Configuration module for compcfg."""

from .loader import CONFIG_ENV_VAR, ConfigLoader, load_config
from .models import (
    ComponentSource,
    ComponentSourceConfig,
    ComponentsRootSource,
    RegistryConfig,
    RegistrySettings,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "ComponentSource",
    "ComponentSourceConfig",
    "ComponentsRootSource",
    "ConfigLoader",
    "RegistryConfig",
    "RegistrySettings",
    "load_config",
]
