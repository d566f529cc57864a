"""Component descriptor discovery and parsing."""

from .containers import read_containers
from .reader import DescriptorReader, read_component
from .scanner import DESCRIPTOR_FILENAMES, ComponentScanner, find_descriptor

__all__ = [
    "DESCRIPTOR_FILENAMES",
    "ComponentScanner",
    "DescriptorReader",
    "find_descriptor",
    "read_component",
    "read_containers",
]
