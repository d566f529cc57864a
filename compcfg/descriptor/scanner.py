"""Locate component directories and their descriptor files."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from .elements import child_elements

logger = logging.getLogger(__name__)

# Tried in this order; the first existing file wins.
DESCRIPTOR_FILENAMES = (
    "scipio-component.xml",
    "scipio-theme.xml",
    "ofbiz-component.xml",
)

LOAD_FILENAME = "component-load.xml"


def find_descriptor(component_dir: str | Path) -> Path | None:
    """Return the descriptor file of a component directory, or None."""
    component_dir = Path(component_dir)
    for filename in DESCRIPTOR_FILENAMES:
        candidate = component_dir / filename
        if candidate.is_file():
            return candidate
    return None


class ComponentScanner:
    """Discover component directories under a components root."""

    def __init__(self, root_path: str | Path):
        self.root = Path(root_path)

    def scan(self) -> list[Path]:
        """Return component directories in load order.

        If the root contains a component-load.xml file, its load-component
        entries define the order. Otherwise every immediate sub-directory that
        holds a descriptor is returned, sorted by name.
        """
        if not self.root.is_dir():
            logger.warning(f"Components root does not exist: {self.root}")
            return []

        load_file = self.root / LOAD_FILENAME
        if load_file.is_file():
            return self._scan_load_file(load_file)

        return [
            child
            for child in sorted(self.root.iterdir())
            if child.is_dir() and find_descriptor(child) is not None
        ]

    def _scan_load_file(self, load_file: Path) -> list[Path]:
        try:
            root = ET.parse(load_file).getroot()
        except (ET.ParseError, OSError) as e:
            logger.error(f"Failed to read {load_file}: {e}")
            return []

        directories = []
        for element in child_elements(root, "load-component"):
            location = element.get("component-location", "").strip()
            if not location:
                logger.warning(f"load-component without component-location in {load_file}")
                continue
            directories.append(self.root / location)

        logger.debug(f"Read {len(directories)} component entries from {load_file}")
        return directories