"""Process-wide component registry."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import IO, TypeVar

from ..config import ComponentSource, ComponentsRootSource, RegistryConfig
from ..descriptor import ComponentScanner, DescriptorReader
from ..errors import ComponentError, ComponentNotFoundError, RegistryStateError
from ..models import (
    ClasspathInfo,
    ComponentConfig,
    ContainerInfo,
    EntityResourceInfo,
    KeystoreInfo,
    ServiceResourceInfo,
    TestSuiteInfo,
    WebappInfo,
)
from .cache import ComponentConfigCache
from .indices import SortKey, WebappIndex
from .overrides import override_key, resolve_webapp_overrides
from .resources import ResourceResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RegistryState(str, Enum):
    """Registry lifecycle states."""

    LOADING = "loading"
    READY = "ready"
    CLOSED = "closed"


class ComponentRegistry:
    """Registry of loaded components and the webapps they contribute.

    Components live in two immutable caches, one for enabled and one for
    disabled components. Reads dereference the current cache without locking;
    every write builds a replacement cache and publishes it under
    ``_write_lock``.

    Lifecycle: the registry starts in ``LOADING``, where components can be
    resolved one by one. :meth:`init` installs the final component list, runs
    webapp override resolution and builds the derived webapp index, moving the
    registry to ``READY``. Index-backed queries raise
    :class:`RegistryStateError` outside ``READY``. :meth:`shutdown` releases
    everything.
    """

    def __init__(
        self,
        properties: Mapping[str, str] | None = None,
        home: str | Path | None = None,
        reader: DescriptorReader | None = None,
    ):
        """Initialize an empty registry.

        Args:
            properties: Values for resource-loader ``prepend-env`` lookups,
                consulted before the process environment.
            home: Base directory for relative resource paths. Defaults to the
                current directory.
            reader: Descriptor reader used for lazily resolved components.
        """
        self.properties: Mapping[str, str] = MappingProxyType(dict(properties or {}))
        self.home = Path(home) if home else Path.cwd()
        self._reader = reader or DescriptorReader()
        self._enabled = ComponentConfigCache()
        self._disabled = ComponentConfigCache()
        self._write_lock = threading.Lock()
        self._overridden: Mapping[str, WebappInfo] = MappingProxyType({})
        self._index: WebappIndex | None = None
        self._state = RegistryState.LOADING
        self.resources = ResourceResolver(self)

    @property
    def state(self) -> RegistryState:
        return self._state

    # ========== lifecycle ==========

    def boot(self, config: RegistryConfig, project_path: str | Path | None = None) -> list[ComponentConfig]:
        """Discover, read and register every component named by ``config``.

        Components that fail to load are skipped with an error log, unless they
        are required, in which case the error propagates.

        Returns:
            The final component list installed by :meth:`init`.
        """
        base = Path(project_path) if project_path else self.home
        required = set(config.settings.required_components)
        components: list[ComponentConfig] = []
        for location, global_name, is_required in self._component_locations(config, base):
            try:
                component = self.resolve(global_name, str(location))
            except ComponentError as e:
                if is_required or (global_name or location.name) in required:
                    logger.error(f"Required component at {location} failed to load: {e}")
                    raise
                logger.error(f"Skipping component at {location}: {e}")
                continue
            if any(other is component for other in components):
                logger.debug(f"Component {component.global_name} listed twice; keeping first")
                continue
            components.append(component)

        loaded = {component.global_name for component in components}
        missing_required = required - loaded
        if missing_required:
            raise ComponentNotFoundError(
                f"Required components not found: {', '.join(sorted(missing_required))}"
            )
        self._warn_missing_dependencies(components, loaded)
        return self.init(components)

    def init(self, components: Sequence[ComponentConfig]) -> list[ComponentConfig]:
        """Install the full ordered component list and make the registry ready.

        Runs webapp override resolution, replaces both caches and builds the
        webapp index. Can be called again to reinitialize.
        """
        if self._state is RegistryState.CLOSED:
            raise RegistryStateError("Registry has been shut down")
        result = resolve_webapp_overrides(list(components))
        with self._write_lock:
            self._overridden = result.overridden
            self._bulk_replace(result.components)
            self._index = WebappIndex(self._enabled.values())
            self._state = RegistryState.READY
        return list(result.components)

    def shutdown(self) -> None:
        """Current lifecycle state."""
        with self._write_lock:
            self._enabled = ComponentConfigCache()
            self._disabled = ComponentConfigCache()
            self._overridden = MappingProxyType({})
            self._index = None
            self._state = RegistryState.CLOSED
        logger.info("Component registry shut down")

    def bulk_replace(self, components: Iterable[ComponentConfig]) -> None:
        """Replace both caches with ``components``, split by enabled flag."""
        with self._write_lock:
            self._bulk_replace(components)

    def _bulk_replace(self, components: Iterable[ComponentConfig]) -> None:
        """Drop every component and the webapp index, and close the registry."""
        enabled = []
        disabled = []
        for component in components:
            (enabled if component.enabled else disabled).append(component)
        self._enabled = ComponentConfigCache(enabled)
        self._disabled = ComponentConfigCache(disabled)
        logger.info(
            f"Setting global component cache: {len(enabled)} enabled components, "
            f"{len(disabled)} disabled components"
        )

    def _component_locations(
        self, config: RegistryConfig, base: Path
    ) -> Iterator[tuple[Path, str | None, bool]]:
        """Yield (directory, global name, required) for every configured component."""
        for source in config.sources:
            if not source.enabled:
                continue
            if isinstance(source, ComponentsRootSource):
                for directory in ComponentScanner(source.resolve_path(base)).scan():
                    yield directory, None, False
            elif isinstance(source, ComponentSource):
                yield source.resolve_path(base), source.global_name, source.required

    def _warn_missing_dependencies(
        self, components: Sequence[ComponentConfig], loaded: set[str]
    ) -> None:
        for component in components:
            for dependency in component.dependencies:
                if dependency not in loaded:
                    logger.warning(
                        f"Component '{component.global_name}' depends on unknown "
                        f"component '{dependency}'"
                    )

    def _require_index(self) -> WebappIndex:
        index = self._index
        if index is None:
            raise RegistryStateError(
                f"Webapp index is not available while the registry is {self._state.value}"
            )
        return index

    # ========== component lookup ==========

    def _check(self, global_name: str | None, root_location: str | None) -> ComponentConfig | None:
        for cache in (self._enabled, self._disabled):
            if global_name:
                component = cache.from_global_name(global_name)
                if component is not None:
                    return component
            if root_location:
                component = cache.from_root_location(root_location)
                if component is not None:
                    return component
        return None

    def resolve(
        self,
        global_name: str | None = None,
        root_location: str | None = None,
        existing_only: bool = False,
    ) -> ComponentConfig:
        """Return the component by name or location, reading it if necessary.

        Disabled components are returned too. When the component is not yet
        registered and ``root_location`` is given, its descriptor is read and
        the new record is registered. The whole check-then-insert runs under
        the write lock, so each name and location maps to one record.

        Raises:
            ComponentNotFoundError: Not registered and ``existing_only`` is set,
                or no root location was given.
            DescriptorError: The descriptor could not be read.
        """
        component = self._check(global_name, root_location)
        if component is not None:
            return component
        if existing_only or not root_location:
            raise ComponentNotFoundError(
                f"No component found named: {global_name or root_location or '(none specified)'}"
            )
        if self._state is RegistryState.CLOSED:
            raise RegistryStateError("Registry has been shut down")

        with self._write_lock:
            component = self._check(global_name, root_location)
            if component is not None:
                return component
            component = self._reader.read(root_location, global_name)
            if component.enabled:
                self._enabled = self._enabled.copy_and_put(component)
                logger.debug(
                    f"Registered new component in cache: {component} "
                    f"(total: {len(self._enabled)})"
                )
            else:
                self._disabled = self._disabled.copy_and_put(component)
                logger.debug(
                    f"Registered new disabled component in cache: {component} "
                    f"(total disabled: {len(self._disabled)})"
                )
            return component

    def get_component_config(self, global_name: str, root_location: str | None = None) -> ComponentConfig:
        """Return a component by global name, reading it from ``root_location`` if needed.

        Raises:
            ComponentNotFoundError: Unknown name and no root location given.
        """
        return self.resolve(global_name, root_location)

    def get_component_config_by_location(self, root_location: str) -> ComponentConfig:
        """Return the component rooted at ``root_location``, reading it if needed."""
        return self.resolve(None, root_location)

    def get_enabled_component_config_or_none(self, global_name: str) -> ComponentConfig | None:
        """Enabled component by global name, or None."""
        return self._enabled.from_global_name(global_name)

    def get_enabled_component_config_by_location_or_none(self, root_location: str) -> ComponentConfig | None:
        """Enabled component by root location, or None."""
        return self._enabled.from_root_location(root_location)

    def get_enabled_component_config(self, global_name: str) -> ComponentConfig:
        """Enabled component by global name.

        Raises:
            ComponentNotFoundError: No enabled component has that name.
        """
        component = self.get_enabled_component_config_or_none(global_name)
        if component is None:
            raise ComponentNotFoundError(f"No enabled component found named: {global_name}")
        return component

    def get_enabled_component_config_by_location(self, root_location: str) -> ComponentConfig:
        """Enabled component by root location.

        Raises:
            ComponentNotFoundError: No enabled component lives there.
        """
        component = self.get_enabled_component_config_by_location_or_none(root_location)
        if component is None:
            raise ComponentNotFoundError(f"No enabled component found for location: {root_location}")
        return component

    def component_exists(self, global_name: str) -> bool:
        """Whether an enabled component is registered under ``global_name``.

        Raises:
            ValueError: ``global_name`` is empty.
        """
        if not global_name:
            raise ValueError("global_name must not be empty")
        return global_name in self._enabled

    def is_component_enabled(self, global_name: str) -> bool:
        """Whether ``global_name`` is registered and enabled."""
        return global_name in self._enabled

    def is_component_present(self, global_name: str) -> bool:
        """Whether ``global_name`` is registered, enabled or not."""
        return global_name in self._enabled or global_name in self._disabled

    def get_root_location(self, global_name: str) -> str:
        """Root location of a registered component, with a trailing slash."""
        return self.resolve(global_name).root_location

    # ========== enumeration ==========

    def get_all_components(self) -> tuple[ComponentConfig, ...]:
        """All enabled components, in load order."""
        return self._enabled.values()

    get_enabled_components = get_all_components

    def get_disabled_components(self) -> tuple[ComponentConfig, ...]:
        """All disabled components, in load order."""
        return self._disabled.values()

    def _collect(
        self,
        component_name: str | None,
        items: Callable[[ComponentConfig], Iterable[T]],
    ) -> list[T]:
        collected: list[T] = []
        for component in self._enabled.values():
            if component_name is None or component_name == component.component_name:
                collected.extend(items(component))
        return collected

    def get_all_classpath_infos(self, component_name: str | None = None) -> list[ClasspathInfo]:
        """Classpath entries of enabled components, optionally of one component."""
        return self._collect(component_name, lambda c: c.classpaths)

    def get_all_containers(self, component_name: str | None = None) -> list[ContainerInfo]:
        """Container declarations of enabled components, optionally of one component."""
        return self._collect(component_name, lambda c: c.containers)

    def get_all_entity_resource_infos(
        self, resource_type: str | None = None, component_name: str | None = None
    ) -> list[EntityResourceInfo]:
        """Entity resources of enabled components.

        Args:
            resource_type: Only resources of this type (e.g. ``model``, ``data``).
            component_name: Only resources declared by this component.
        """
        return self._collect(
            component_name,
            lambda c: [info for info in c.entity_resources if not resource_type or info.type == resource_type],
        )

    def get_all_service_resource_infos(
        self, resource_type: str | None = None, component_name: str | None = None
    ) -> list[ServiceResourceInfo]:
        """Service resources of enabled components.

        Args:
            resource_type: Only resources of this type.
            component_name: Only resources declared by this component.
        """
        return self._collect(
            component_name,
            lambda c: [info for info in c.service_resources if not resource_type or info.type == resource_type],
        )

    def get_all_test_suite_infos(self, component_name: str | None = None) -> list[TestSuiteInfo]:
        """Test suites of enabled components, optionally of one component."""
        return self._collect(component_name, lambda c: c.test_suites)

    def get_all_keystore_infos(self, component_name: str | None = None) -> list[KeystoreInfo]:
        """Keystores of enabled components, optionally of one component."""
        return self._collect(component_name, lambda c: c.keystores)

    def get_all_webapp_resource_infos(self, component_name: str | None = None) -> list[WebappInfo]:
        """Webapps of enabled components, after override resolution."""
        return self._collect(component_name, lambda c: c.webapps)

    def get_keystore_info(self, component_name: str, keystore_name: str) -> KeystoreInfo | None:
        """Keystore ``keystore_name`` declared by ``component_name``, or None."""
        for keystore in self.get_all_keystore_infos(component_name):
            if keystore.name == keystore_name:
                return keystore
        return None

    # ========== webapps ==========

    def get_webapp_info_by_name(self, component_name: str, webapp_name: str) -> WebappInfo | None:
        """Exact webapp by component global name and webapp name, ignoring overrides."""
        found = None
        for component in self._enabled.values():
            if component.global_name != component_name:
                continue
            for webapp in component.webapps:
                if webapp.name == webapp_name:
                    found = webapp
        return found

    def get_overridden_webapp_info_by_name(self, component_name: str, webapp_name: str) -> WebappInfo | None:
        """The webapp that replaced ``component_name::webapp_name``, if it was overridden."""
        return self._overridden.get(override_key(component_name, webapp_name))

    def get_effective_webapp_info_by_name(self, component_name: str, webapp_name: str) -> WebappInfo | None:
        """Replacement of an overridden webapp, else the webapp itself."""
        webapp = self.get_overridden_webapp_info_by_name(component_name, webapp_name)
        if webapp is not None:
            return webapp
        return self.get_webapp_info_by_name(component_name, webapp_name)

    def get_webapp_infos_by_context_root(self, server: str | None = None) -> Mapping[str, WebappInfo] | None:
        """Context root -> webapp for ``server``, or across all servers when None.

        Raises:
            RegistryStateError: The registry is not ready.
        """
        return self._require_index().webapps_by_context_root(server)

    def get_webapp_info_by_context_root(self, server: str | None, context_root: str) -> WebappInfo | None:
        """Webapp mounted at ``context_root`` on ``server`` (any server when None).

        Raises:
            RegistryStateError: The registry is not ready.
        """
        return self._require_index().webapp_by_context_root(server, context_root)

    def get_app_bar_web_infos(
        self,
        server: str,
        menu_name: str | None = None,
        sort_key: SortKey | None = None,
    ) -> tuple[WebappInfo, ...]:
        """App-bar webapps of ``server``, ordered by position or title.

        Args:
            server: Server identifier.
            menu_name: Only webapps on this menu.
            sort_key: Key function applied to the position-or-title ordering key.

        Raises:
            RegistryStateError: The registry is not ready.
        """
        return self._require_index().app_bar_webapps(server, menu_name, sort_key)

    # ========== resources ==========

    def get_full_location(self, component_name: str, resource_loader_name: str, location: str) -> str:
        """Full location of a resource; see :meth:`ComponentConfig.get_full_location`."""
        return self.resources.get_full_location(component_name, resource_loader_name, location)

    def get_url(self, component_name: str, resource_loader_name: str, location: str) -> str:
        """URL of a resource; see :meth:`ResourceResolver.get_url`."""
        return self.resources.get_url(component_name, resource_loader_name, location)

    def get_stream(self, component_name: str, resource_loader_name: str, location: str) -> IO[bytes]:
        """Open a resource for reading; the caller closes it."""
        return self.resources.get_stream(component_name, resource_loader_name, location)

    def is_file_resource_loader(self, component_name: str, resource_loader_name: str) -> bool:
        """Whether the component's named loader resolves to plain files."""
        return self.resources.is_file_resource_loader(component_name, resource_loader_name)

    # ========== helpers ==========

    @staticmethod
    def component_names(components: Iterable[ComponentConfig]) -> list[str]:
        """Declared names of ``components``, in order."""
        return [component.component_name for component in components]

    @staticmethod
    def component_name_map(components: Iterable[ComponentConfig]) -> dict[str, ComponentConfig]:
        """Order-preserving map of component name to component."""
        return {component.component_name: component for component in components}
