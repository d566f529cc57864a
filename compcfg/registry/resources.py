"""Resolve (component, resource-loader, location) triples to URLs and streams."""

from __future__ import annotations

import sys
import urllib.request
from collections.abc import Iterator
from pathlib import Path
from typing import IO, TYPE_CHECKING
from urllib.parse import urlparse
from urllib.request import url2pathname

from ..errors import ComponentError, ResourceNotFoundError
from ..models import ComponentConfig, ResourceLoaderType
from .locations import is_component_url, resolve_component_url

if TYPE_CHECKING:
    from .registry import ComponentRegistry


class ResourceResolver:
    """Resource access on behalf of a :class:`ComponentRegistry`.

    Components are looked up through the registry by global name, so the
    resolver always sees the registry's current caches.
    """

    def __init__(self, registry: ComponentRegistry):
        self.registry = registry

    def _component(self, component_name: str) -> ComponentConfig:
        return self.registry.resolve(component_name)

    def get_full_location(self, component_name: str, resource_loader_name: str, location: str) -> str:
        """Full location of a resource, with registry properties for ``prepend-env``."""
        component = self._component(component_name)
        return component.get_full_location(resource_loader_name, location, self.registry.properties)

    def is_file_resource_loader(self, component_name: str, resource_loader_name: str) -> bool:
        """Whether the component's named loader resolves to plain files."""
        return self._component(component_name).is_file_resource_loader(resource_loader_name)

    def get_url(self, component_name: str, resource_loader_name: str, location: str) -> str:
        """Return a URL for the resource.

        Raises:
            ComponentNotFoundError: The component is unknown.
            ResourceLoaderNotFoundError: The loader is not declared.
            EnvironmentMissingError: The loader's ``prepend-env`` value is unset.
            ResourceNotFoundError: The resource does not exist.
        """
        component = self._component(component_name)
        loader = component.get_resource_loader(resource_loader_name)
        full_location = component.get_full_location(
            resource_loader_name, location, self.registry.properties
        )

        if loader.type.is_file:
            path = self._to_path(full_location)
            if not path.is_file():
                raise ResourceNotFoundError(
                    f"File Resource not found: {full_location} (component {component_name}, "
                    f"loader {resource_loader_name})"
                )
            return path.as_uri()

        if loader.type is ResourceLoaderType.CLASSPATH:
            relative = full_location.lstrip("/")
            for root in self.classpath_roots():
                candidate = root / relative
                if candidate.is_file():
                    return candidate.resolve().as_uri()
            raise ResourceNotFoundError(
                f"Classpath Resource not found: {full_location} (component {component_name}, "
                f"loader {resource_loader_name})"
            )

        try:
            return self.resolve_location(location)
        except ValueError as e:
            raise ComponentError(
                f"Error with malformed URL while trying to load URL resource at location "
                f"[{location}]: {e}"
            ) from e

    def resolve_location(self, location: str) -> str:
        """Turn a raw location into a URL.

        ``component://`` URLs resolve through the registry, URLs with a scheme
        are returned unchanged and plain paths must name an existing file.

        Raises:
            ValueError: The location is a malformed component URL.
            ResourceNotFoundError: A path location does not exist.
        """
        if is_component_url(location):
            path = self._to_path(resolve_component_url(self.registry, location))
        elif len(urlparse(location).scheme) > 1:
            return location
        else:
            path = self._to_path(location)
        if not path.exists():
            raise ResourceNotFoundError(f"Resource not found at location [{location}]")
        return path.as_uri()

    def get_stream(self, component_name: str, resource_loader_name: str, location: str) -> IO[bytes]:
        """Open the resource for reading. The caller closes the stream."""
        url = self.get_url(component_name, resource_loader_name, location)
        try:
            parsed = urlparse(url)
            if parsed.scheme == "file":
                return open(url2pathname(parsed.path), "rb")
            return urllib.request.urlopen(url)
        except (OSError, ValueError) as e:
            raise ComponentError(f"Error opening resource at location [{url}]: {e}") from e

    def classpath_roots(self) -> Iterator[Path]:
        """Directories searched by classpath loaders, in search order."""
        for component in self.registry.get_all_components():
            for classpath in component.classpaths:
                if classpath.type == "dir":
                    yield Path(component.root_location) / classpath.location.strip("/")
        for entry in sys.path:
            if entry and Path(entry).is_dir():
                yield Path(entry)

    def _to_path(self, location: str) -> Path:
        path = Path(location)
        if not path.is_absolute():
            path = self.registry.home / path
        return path.resolve()
