"""Read component descriptors into ComponentConfig records."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from pydantic import ValidationError

from ..errors import DescriptorError
from ..models import (
    ClasspathInfo,
    ClasspathSpecialInfo,
    ComponentConfig,
    EntityResourceInfo,
    KeystoreInfo,
    ResourceLoaderInfo,
    ServiceResourceInfo,
    TestSuiteInfo,
    WebappInfo,
    normalize_root_location,
)
from .containers import read_containers
from .elements import attributes, child_elements
from .scanner import DESCRIPTOR_FILENAMES, find_descriptor

logger = logging.getLogger(__name__)


class DescriptorReader:
    """Read and validate one component descriptor."""

    RESOURCE_CLASSES = {
        "entity-resource": EntityResourceInfo,
        "service-resource": ServiceResourceInfo,
        "test-suite": TestSuiteInfo,
        "keystore": KeystoreInfo,
    }

    def read(self, root_location: str | Path, global_name: str | None = None) -> ComponentConfig:
        """Read the descriptor of the component rooted at ``root_location``.

        Args:
            root_location: Component directory.
            global_name: Registry name; defaults to the declared component name.

        Raises:
            DescriptorError: The directory or descriptor is missing, the XML is
                malformed, or a declaration is invalid.
        """
        root_location = normalize_root_location(str(root_location))
        root_dir = Path(root_location)
        if not root_dir.exists():
            raise DescriptorError(f"The component root location does not exist: {root_location}")
        if not root_dir.is_dir():
            raise DescriptorError(f"The component root location is not a directory: {root_location}")

        descriptor = find_descriptor(root_dir)
        if descriptor is None:
            raise DescriptorError(
                f"Could not find any of {', '.join(DESCRIPTOR_FILENAMES)} "
                f"in the component root location: {root_location}"
            )

        try:
            root = ET.parse(descriptor).getroot()
        except (ET.ParseError, OSError) as e:
            raise DescriptorError(f"Error reading the component config file: {descriptor}: {e}") from e

        try:
            config = self._build(root, root_location, global_name, descriptor)
        except ValidationError as e:
            raise DescriptorError(f"Invalid declaration in {descriptor}: {e}") from e

        logger.debug(f"Read component config: [{root_location}]")
        return config

    def _build(
        self,
        root: ET.Element,
        root_location: str,
        global_name: str | None,
        descriptor: Path,
    ) -> ComponentConfig:
        component_name = root.get("name", "")
        if not component_name:
            raise DescriptorError(f"Component descriptor has no name attribute: {descriptor}")
        enabled_attr = root.get("enabled")
        enabled = enabled_attr is None or enabled_attr.lower() == "true"
        owner = global_name or component_name

        resource_loaders: dict[str, ResourceLoaderInfo] = {}
        for element in child_elements(root, "resource-loader"):
            loader = ResourceLoaderInfo.model_validate(attributes(element))
            resource_loaders[loader.name] = loader

        resources = {
            tag: tuple(
                cls.model_validate({**attributes(element), "component_name": owner})
                for element in child_elements(root, tag)
            )
            for tag, cls in self.RESOURCE_CLASSES.items()
        }

        return ComponentConfig(
            global_name=owner,
            root_location=root_location,
            component_name=component_name,
            enabled=enabled,
            resource_loaders=resource_loaders,
            classpaths=tuple(
                ClasspathInfo.model_validate({**attributes(element), "component_name": owner})
                for element in child_elements(root, "classpath")
            ),
            classpath_specials=self._read_classpath_specials(root, owner),
            entity_resources=resources["entity-resource"],
            service_resources=resources["service-resource"],
            test_suites=resources["test-suite"],
            keystores=resources["keystore"],
            webapps=self._read_webapps(root, owner, component_name),
            containers=read_containers(root),
            dependencies=self._read_dependencies(root, component_name),
            descriptor_path=str(descriptor),
        )

    def _read_classpath_specials(
        self, root: ET.Element, owner: str
    ) -> tuple[ClasspathSpecialInfo, ...]:
        specials = []
        for element in child_elements(root, "classpath-special"):
            webapp_names = {
                webapp.get("name")
                for webapp in child_elements(element, "webapp")
                if webapp.get("name")
            }
            data = attributes(element)
            data["component_name"] = owner
            data["webapp-names"] = webapp_names
            specials.append(ClasspathSpecialInfo.model_validate(data))
        return tuple(specials)

    def _read_webapps(
        self, root: ET.Element, owner: str, component_name: str
    ) -> tuple[WebappInfo, ...]:
        webapps = []
        for element in child_elements(root, "webapp"):
            if element.get("enabled") == "false":
                logger.info(
                    f"Webapp '{element.get('name')}' of component '{component_name}' "
                    "is disabled; ignoring definition"
                )
                continue
            data = attributes(element)
            data["component_name"] = owner
            data["virtual-hosts"] = tuple(
                host.get("host-name", "") for host in child_elements(element, "virtual-host")
            )
            data["init-params"] = {
                param.get("name", ""): param.get("value", "")
                for param in child_elements(element, "init-param")
            }
            webapps.append(WebappInfo.model_validate(data))
        return tuple(webapps)

    def _read_dependencies(self, root: ET.Element, component_name: str) -> tuple[str, ...]:
        dependencies: list[str] = []
        for element in child_elements(root, "depends-on"):
            dependency = element.get("component-name", "")
            if not dependency:
                logger.warning(f"Component '{component_name}' has depends-on without component-name")
                continue
            if dependency == component_name:
                logger.warning(f"Component '{component_name}' has dependency on itself")
                continue
            if dependency in dependencies:
                logger.warning(
                    f"Component '{component_name}' has duplicate dependency "
                    f"on component '{dependency}'"
                )
                continue
            dependencies.append(dependency)
        return tuple(dependencies)


def read_component(root_location: str | Path, global_name: str | None = None) -> ComponentConfig:
    """Read one component descriptor.

    Convenience function that creates a DescriptorReader and reads the component.
    """
    return DescriptorReader().read(root_location, global_name)
