"""Map component:// URLs and filesystem paths to components and webapps."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlparse
from urllib.request import url2pathname

from ..errors import ComponentError
from ..models import ComponentConfig, WebappInfo

if TYPE_CHECKING:
    from .registry import ComponentRegistry

COMPONENT_URL_PREFIX = "component://"


def is_component_url(location: object) -> bool:
    return isinstance(location, str) and location.startswith(COMPONENT_URL_PREFIX)


def parse_component_url(url: str) -> tuple[str, str]:
    """Split ``component://<name>/<path>`` into name and relative path.

    Raises:
        ValueError: The string is not a well-formed component URL.
    """
    if not is_component_url(url):
        raise ValueError(f"Not a component:// URL [{url}]")
    next_slash = url.find("/", len(COMPONENT_URL_PREFIX))
    if next_slash < 0:
        raise ValueError(f"Invalid component:// URL [{url}]")
    name = url[len(COMPONENT_URL_PREFIX):next_slash]
    if not name:
        raise ValueError(f"Invalid component name in URL [{url}]")
    return name, url[next_slash + 1:]


def component_name_from_url(url: str) -> str:
    return parse_component_url(url)[0]


def resolve_component_url(registry: ComponentRegistry, url: str) -> str:
    """Return the filesystem location a component:// URL points at."""
    name, relative_path = parse_component_url(url)
    return registry.resolve(name).root_location + relative_path


def absolute_path(location: str | Path, home: Path) -> str | None:
    """Absolute forward-slash path of a filesystem path or file: URL.

    Relative paths are taken relative to ``home``. Returns None for URLs with
    any other scheme.
    """
    if isinstance(location, str):
        parsed = urlparse(location)
        if parsed.scheme == "file":
            location = url2pathname(parsed.path)
        elif len(parsed.scheme) > 1:
            return None
    path = Path(location)
    if not path.is_absolute():
        path = home / path
    return os.path.normpath(str(path)).replace("\\", "/")


def _owning_component(registry: ComponentRegistry, path: str) -> ComponentConfig | None:
    # root locations end with "/", so compare against the path with one appended
    check_path = path + "/"
    for components in (registry.get_all_components(), registry.get_disabled_components()):
        for component in components:
            if check_path.startswith(component.root_location):
                return component
    return None


def get_component_config_from_resource(
    registry: ComponentRegistry, location: str | Path
) -> ComponentConfig | None:
    """Return the component containing a path, file: URL or component:// URL."""
    if is_component_url(location):
        try:
            return registry.resolve(component_name_from_url(str(location)))
        except ComponentError:
            return None
    path = absolute_path(location, registry.home)
    if path is None:
        return None
    return _owning_component(registry, path)


def get_webapp_info_from_resource(
    registry: ComponentRegistry, location: str | Path, use_default: bool = False
) -> WebappInfo | None:
    """Return the most specific webapp whose directory contains the resource.

    When webapp locations nest, the webapp with the longest matching location
    is returned.

    With ``use_default``, resources inside the component but outside every
    webapp directory map to the component's first webapp.
    """
    if is_component_url(location):
        name, relative_path = parse_component_url(str(location))
        try:
            component = registry.resolve(name)
        except ComponentError:
            return None
    else:
        path = absolute_path(location, registry.home)
        if path is None:
            return None
        component = _owning_component(registry, path)
        if component is None:
            return None
        relative_path = path[len(component.root_location):]

    if not component.webapps:
        return None
    best: WebappInfo | None = None
    for webapp in component.webapps:
        if not webapp.has_location:
            continue
        if relative_path != webapp.location and not relative_path.startswith(webapp.location + "/"):
            continue
        # nested webapp directories: the longest location wins
        if best is None or len(webapp.location) > len(best.location):
            best = webapp
    if best is None and use_default:
        return component.webapps[0]
    return best
