"""Classpath helpers: special jar locations and root resource files."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from ..models import ClasspathSpecialInfo, ComponentConfig

if TYPE_CHECKING:
    from .registry import ComponentRegistry

logger = logging.getLogger(__name__)

SPECIAL_TYPES = ("jar", "dir")


def _matches(info: ClasspathSpecialInfo, purpose: str | None, webapp_name: str | None) -> bool:
    if purpose is not None and purpose not in info.purposes:
        return False
    if webapp_name is not None:
        return info.webapp_names is not None and webapp_name in info.webapp_names
    return not info.is_webapp_specific


def _jar_locations(
    component: ComponentConfig, purpose: str | None, webapp_name: str | None
) -> list[Path]:
    jars: list[Path] = []
    for info in component.classpath_specials:
        if info.type not in SPECIAL_TYPES or not _matches(info, purpose, webapp_name):
            continue
        location = info.location.replace("\\", "/").lstrip("/")
        if location.endswith("/*"):
            location = location[:-2]
        path = Path(component.root_location) / location
        if path.is_dir():
            jars.extend(
                child for child in sorted(path.iterdir())
                if child.name.lower().endswith(".jar")
            )
        elif path.exists():
            jars.append(path)
        elif not info.optional:
            logger.error(
                f"Non-optional classpath-special entry location for component "
                f"'{component.global_name}' references non-existent path: {path}"
            )
    return jars


def classpath_special_jar_locations(
    registry: ComponentRegistry,
    purpose: str | None,
    component: ComponentConfig | None = None,
    webapp_name: str | None = None,
) -> list[Path]:
    """Jar files contributed by ``classpath-special`` entries for a purpose.

    Without ``component`` every enabled component is consulted. Without
    ``webapp_name`` only entries not restricted to specific webapps are
    returned; with it, only entries naming that webapp. Directory entries,
    including ``dir/*`` splats, contribute the ``.jar`` files directly inside.
    """
    components: Iterable[ComponentConfig] = (
        (component,) if component is not None else registry.get_all_components()
    )
    jars: list[Path] = []
    for candidate in components:
        jars.extend(_jar_locations(candidate, purpose, webapp_name))
    return jars


def root_resource_file_urls(
    registry: ComponentRegistry, name_filter: Callable[[str], bool] | None = None
) -> list[str]:
    """URLs of files directly inside each enabled component's ``dir`` classpath entries."""
    urls: list[str] = []
    for component in registry.get_all_components():
        for classpath in component.classpaths:
            if classpath.type != "dir":
                continue
            directory = Path(component.root_location) / classpath.location.lstrip("/")
            if not directory.is_dir():
                continue
            for child in sorted(directory.iterdir()):
                if child.is_file() and (name_filter is None or name_filter(child.name)):
                    urls.append(child.resolve().as_uri())
    return urls
