"""Read <container> declarations embedded in a component descriptor."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from ..models import ContainerInfo
from .elements import attributes, child_elements


def read_containers(root: ET.Element) -> tuple[ContainerInfo, ...]:
    """Parse every <container> child of a descriptor root element.

    Property values come from the ``value`` attribute, or the element text
    when the attribute is absent.
    """
    containers = []
    for element in child_elements(root, "container"):
        properties: dict[str, str] = {}
        for prop in child_elements(element, "property"):
            name = prop.get("name")
            if not name:
                continue
            value = prop.get("value")
            if value is None:
                value = (prop.text or "").strip()
            properties[name] = value
        data = attributes(element)
        data["properties"] = properties
        containers.append(ContainerInfo.model_validate(data))
    return tuple(containers)
