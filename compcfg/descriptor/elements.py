"""Helpers for walking ElementTree descriptor documents."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator


def local_name(tag: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix from a tag."""
    return tag.rsplit("}", 1)[-1]


def child_elements(element: ET.Element, name: str) -> Iterator[ET.Element]:
    """Yield direct children with the given local name, in document order."""
    for child in element:
        if isinstance(child.tag, str) and local_name(child.tag) == name:
            yield child


def attributes(element: ET.Element) -> dict[str, str]:
    """Return the element's attributes keyed by local name."""
    return {local_name(key): value for key, value in element.attrib.items()}
