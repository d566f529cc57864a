"""Pydantic models for component descriptors."""

from .component import ComponentConfig, normalize_root_location
from .resources import (
    ClasspathInfo,
    ClasspathSpecialInfo,
    ContainerInfo,
    EntityResourceInfo,
    KeystoreInfo,
    ResourceInfo,
    ResourceLoaderInfo,
    ResourceLoaderType,
    ResourceRef,
    ServiceResourceInfo,
    TestSuiteInfo,
)
from .webapp import (
    OVERRIDE_MODE_REMOVE,
    WebappInfo,
    context_root_for,
    normalize_mount_point,
)

__all__ = [
    "ClasspathInfo",
    "ClasspathSpecialInfo",
    "ComponentConfig",
    "ContainerInfo",
    "EntityResourceInfo",
    "KeystoreInfo",
    "OVERRIDE_MODE_REMOVE",
    "ResourceInfo",
    "ResourceLoaderInfo",
    "ResourceLoaderType",
    "ResourceRef",
    "ServiceResourceInfo",
    "TestSuiteInfo",
    "WebappInfo",
    "context_root_for",
    "normalize_mount_point",
    "normalize_root_location",
]
