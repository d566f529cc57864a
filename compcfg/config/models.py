"""Configuration models for compcfg."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field


def _resolve(path: str, base: Path) -> Path:
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = base / candidate
    return candidate.resolve()


class ComponentsRootSource(BaseModel):
    """Directory whose sub-directories are components."""

    type: Literal["root"] = "root"
    path: str = Field(..., description="Path to the components root directory")
    name: str = Field(..., description="Display name for this source")
    enabled: bool = Field(default=True)

    def resolve_path(self, base: Path) -> Path:
        return _resolve(self.path, base)


class ComponentSource(BaseModel):
    """A single component directory."""

    type: Literal["component"] = "component"
    location: str = Field(..., description="Path to the component directory")
    name: str | None = Field(default=None, description="Display name for this source")
    global_name: str | None = Field(
        default=None, description="Registry name, overriding the declared component name"
    )
    required: bool = Field(default=False, description="Fail boot if this component cannot load")
    enabled: bool = Field(default=True)

    def resolve_path(self, base: Path) -> Path:
        return _resolve(self.location, base)


ComponentSourceConfig = Annotated[
    ComponentsRootSource | ComponentSource, Field(discriminator="type")
]


class RegistrySettings(BaseModel):
    """Global settings."""

    required_components: list[str] = Field(
        default_factory=list, description="Components whose absence aborts boot"
    )
    properties: dict[str, str] = Field(
        default_factory=dict,
        description="Values for resource-loader prepend-env, checked before the environment",
    )
    log_level: str = Field(default="INFO", description="Root logging level for the CLI")


class RegistryConfig(BaseModel):
    """Root configuration model."""

    version: int = Field(default=1)
    sources: list[ComponentSourceConfig] = Field(default_factory=list)
    settings: RegistrySettings = Field(default_factory=RegistrySettings)
