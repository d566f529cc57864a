"""Locate, read and write the compcfg YAML configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import ComponentsRootSource, RegistryConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "COMPCFG_CONFIG"


class ConfigLoader:
    """Read and write registry configuration files.

    Lookup order is the file named by ``$COMPCFG_CONFIG``, then
    ``<project>/compcfg.yaml``, then ``~/.compcfg/compcfg.yaml``. The first
    existing file is used on its own; files are not merged.
    """

    CONFIG_FILENAME = "compcfg.yaml"
    USER_CONFIG_DIR = Path.home() / ".compcfg"

    def __init__(self, project_path: Path | None = None):
        self._project_path = project_path or Path.cwd()

    @property
    def project_path(self) -> Path:
        return self._project_path

    def candidate_paths(self) -> list[Path]:
        """Config file locations, most specific first."""
        candidates = []
        explicit = os.environ.get(CONFIG_ENV_VAR)
        if explicit:
            candidates.append(Path(explicit).expanduser())
        candidates.append(self._project_path / self.CONFIG_FILENAME)
        candidates.append(self.USER_CONFIG_DIR / self.CONFIG_FILENAME)
        return candidates

    def get_config_path(self) -> Path | None:
        return next((path for path in self.candidate_paths() if path.is_file()), None)

    def load(self) -> RegistryConfig:
        """Return the configuration from the first file found.

        A missing file yields the default configuration. So does an unreadable
        or invalid one, after a logged warning.
        """
        config_path = self.get_config_path()
        if config_path is None:
            logger.debug("No config file found, using defaults")
            return self.default_config()
        try:
            return self.read(config_path)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            logger.warning(f"Ignoring config at {config_path}: {e}")
            return self.default_config()

    @staticmethod
    def read(config_path: Path) -> RegistryConfig:
        """Parse one config file without any fallback.

        Raises:
            OSError: The file cannot be read.
            yaml.YAMLError: The file is not valid YAML.
            pydantic.ValidationError: The content does not match the schema.
        """
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        config = RegistryConfig.model_validate(data or {})
        logger.info(f"Loaded config from: {config_path} ({len(config.sources)} sources)")
        return config

    def save(self, config: RegistryConfig, user_level: bool = False) -> Path:
        """Write ``config`` as YAML next to the project, or under the user directory."""
        if user_level:
            target_dir = self.USER_CONFIG_DIR
            target_dir.mkdir(parents=True, exist_ok=True)
        else:
            target_dir = self._project_path
        config_path = target_dir / self.CONFIG_FILENAME

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                config.model_dump(mode="json", exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

        logger.info(f"Saved config to: {config_path}")
        return config_path

    @staticmethod
    def default_config() -> RegistryConfig:
        """A single ``./components`` root, relative to the project directory."""
        return RegistryConfig(
            sources=[ComponentsRootSource(path="./components", name="Components")]
        )


def load_config(project_path: Path | str | None = None) -> RegistryConfig:
    """Load the configuration for a project directory (default: the current one)."""
    return ConfigLoader(Path(project_path) if project_path else None).load()
