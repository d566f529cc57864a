"""Declaration models for the resources a component contributes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResourceLoaderType(str, Enum):
    """Supported resource-loader types."""

    COMPONENT = "component"
    FILE = "file"
    CLASSPATH = "classpath"
    URL = "url"

    @property
    def is_file(self) -> bool:
        """Whether the loader resolves to plain files on disk."""
        return self in (ResourceLoaderType.COMPONENT, ResourceLoaderType.FILE)


class ResourceRef(NamedTuple):
    """Logical address of a resource: component, loader and location."""

    component_name: str
    loader: str
    location: str


class Declaration(BaseModel):
    """Base for models parsed from descriptor element attributes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


def read_only(value: Mapping) -> Mapping:
    """Wrap a validated mapping in a read-only view over a private copy."""
    return MappingProxyType(dict(value))


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return value


class ResourceLoaderInfo(Declaration):
    """A <resource-loader> element."""

    name: str = Field(..., min_length=1)
    type: ResourceLoaderType
    prepend_env: str = Field(default="", alias="prepend-env")
    prefix: str = ""


class ClasspathInfo(Declaration):
    """A <classpath> element."""

    component_name: str
    type: str = ""
    location: str = ""


class ClasspathSpecialInfo(ClasspathInfo):
    """A <classpath-special> element.

    Entries carry one or more purpose tags and may be restricted to specific
    webapps of the component through nested <webapp name="..."/> filters.
    """

    purposes: tuple[str, ...] = Field(default=(), alias="purpose")
    webapp_names: frozenset[str] | None = Field(default=None, alias="webapp-names")
    optional: bool = False

    @field_validator("purposes", mode="before")
    @classmethod
    def _parse_purposes(cls, value: Any) -> Any:
        return _split_csv(value)

    @field_validator("webapp_names", mode="before")
    @classmethod
    def _empty_names_to_none(cls, value: Any) -> Any:
        if value is not None and not value:
            return None
        return value

    @field_validator("optional", mode="before")
    @classmethod
    def _parse_optional(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value == "true"
        return value

    @property
    def is_webapp_specific(self) -> bool:
        return self.webapp_names is not None


class ResourceInfo(Declaration):
    """Base for declarations that point at a resource through a loader."""

    component_name: str
    loader: str = ""
    location: str = ""

    def resource_ref(self) -> ResourceRef:
        """Return the logical address the registry can resolve."""
        return ResourceRef(self.component_name, self.loader, self.location)


class EntityResourceInfo(ResourceInfo):
    """An <entity-resource> element."""

    type: str = ""
    reader_name: str = Field(default="", alias="reader-name")


class ServiceResourceInfo(ResourceInfo):
    """A <service-resource> element."""

    type: str = ""


class TestSuiteInfo(ResourceInfo):
    """A <test-suite> element."""

    __test__ = False


class KeystoreInfo(ResourceInfo):
    """A <keystore> element."""

    name: str = ""
    type: str = ""
    password: str = ""
    is_cert_store: bool = Field(default=False, alias="is-certstore")
    is_trust_store: bool = Field(default=False, alias="is-truststore")

    @field_validator("is_cert_store", "is_trust_store", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower() == "true"
        return value


class ContainerInfo(Declaration):
    """A <container> element embedded in a component descriptor."""

    name: str = Field(..., min_length=1)
    class_name: str = Field(default="", alias="class")
    loaders: tuple[str, ...] = ()
    properties: Mapping[str, str] = Field(default_factory=dict)

    @field_validator("loaders", mode="before")
    @classmethod
    def _parse_loaders(cls, value: Any) -> Any:
        return _split_csv(value)

    @field_validator("properties")
    @classmethod
    def _freeze_properties(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return read_only(value)
