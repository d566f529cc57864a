"""Component record model."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import EnvironmentMissingError, ResourceLoaderNotFoundError
from .resources import (
    ClasspathInfo,
    ClasspathSpecialInfo,
    ContainerInfo,
    EntityResourceInfo,
    KeystoreInfo,
    ResourceLoaderInfo,
    ResourceLoaderType,
    ServiceResourceInfo,
    TestSuiteInfo,
    read_only,
)
from .webapp import WebappInfo

logger = logging.getLogger(__name__)


def normalize_root_location(root_location: str) -> str:
    """Use forward slashes and guarantee a trailing slash."""
    root_location = root_location.replace("\\", "/")
    if not root_location.endswith("/"):
        root_location += "/"
    return root_location


class ComponentConfig(BaseModel):
    """Immutable record of one component and everything its descriptor declares.

    Records are created once per descriptor read. The only derived record is the
    one produced by :meth:`with_webapps`, used when webapp overrides remove
    entries from a component.
    """

    model_config = ConfigDict(frozen=True)

    global_name: str = ""
    root_location: str
    component_name: str = Field(..., min_length=1)
    enabled: bool = True
    resource_loaders: Mapping[str, ResourceLoaderInfo] = Field(default_factory=dict)
    classpaths: tuple[ClasspathInfo, ...] = ()
    classpath_specials: tuple[ClasspathSpecialInfo, ...] = ()
    entity_resources: tuple[EntityResourceInfo, ...] = ()
    service_resources: tuple[ServiceResourceInfo, ...] = ()
    test_suites: tuple[TestSuiteInfo, ...] = ()
    keystores: tuple[KeystoreInfo, ...] = ()
    webapps: tuple[WebappInfo, ...] = ()
    containers: tuple[ContainerInfo, ...] = ()
    dependencies: tuple[str, ...] = ()
    descriptor_path: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_global_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("global_name"):
            data = dict(data)
            data["global_name"] = data.get("component_name", "")
        return data

    @field_validator("root_location")
    @classmethod
    def _normalize_root(cls, value: str) -> str:
        return normalize_root_location(value)

    @field_validator("resource_loaders")
    @classmethod
    def _freeze_loaders(
        cls, value: Mapping[str, ResourceLoaderInfo]
    ) -> Mapping[str, ResourceLoaderInfo]:
        return read_only(value)

    @property
    def resource_loader_infos(self) -> Mapping[str, ResourceLoaderInfo]:
        """Read-only view of the declared resource-loaders, in declaration order."""
        return self.resource_loaders

    def get_resource_loader(self, name: str) -> ResourceLoaderInfo:
        """Return the resource-loader declared under ``name``.

        Raises:
            ResourceLoaderNotFoundError: No loader of that name is declared.
        """
        loader = self.resource_loaders.get(name)
        if loader is None:
            raise ResourceLoaderNotFoundError(
                f"Could not find resource-loader named: {name}"
            )
        return loader

    def get_full_location(
        self,
        resource_loader_name: str,
        location: str,
        properties: Mapping[str, str] | None = None,
    ) -> str:
        """Build the full location of a resource behind one of our loaders.

        ``prepend-env`` values are looked up in ``properties`` first and then in
        the process environment.

        Raises:
            ResourceLoaderNotFoundError: The loader is not declared.
            EnvironmentMissingError: The ``prepend-env`` value is not set.
        """
        loader = self.get_resource_loader(resource_loader_name)
        parts: list[str] = []
        if loader.type is ResourceLoaderType.COMPONENT:
            parts.append(self.root_location)
        if loader.prepend_env:
            value = (properties or {}).get(loader.prepend_env)
            if value is None:
                value = os.environ.get(loader.prepend_env)
            if value is None:
                message = (
                    f"The environment property {loader.prepend_env} is not set, "
                    "cannot load resource."
                )
                logger.error(message)
                raise EnvironmentMissingError(message)
            parts.append(value)
        if loader.prefix:
            parts.append(loader.prefix)
        parts.append(location)
        return "".join(parts)

    def is_file_resource_loader(self, resource_loader_name: str) -> bool:
        """Whether the named loader resolves to plain files (``component`` or ``file``)."""
        return self.get_resource_loader(resource_loader_name).type.is_file

    def get_webapp(self, name: str) -> WebappInfo | None:
        """Return the webapp declared under ``name``, or None."""
        for webapp in self.webapps:
            if webapp.name == name:
                return webapp
        return None

    def webapp_location(self, webapp: WebappInfo) -> str:
        """Absolute location of a webapp owned by this component, no trailing slash."""
        return self.root_location + webapp.location

    def with_webapps(self, webapps: Iterable[WebappInfo]) -> ComponentConfig:
        """Copy this record with a replacement webapp list.

        Every other field is shared with this record. Webapps owned by another
        component name are retargeted to this one.
        """
        owned = tuple(
            webapp if webapp.component_name == self.global_name
            else webapp.retarget(self.global_name)
            for webapp in webapps
        )
        return self.model_copy(update={"webapps": owned})

    def __str__(self) -> str:
        return f"[componentName={self.global_name}, rootLocation={self.root_location}]"
