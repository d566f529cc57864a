"""Component registry, webapp indices and resource resolution."""

from .cache import ComponentConfigCache
from .classpath import classpath_special_jar_locations, root_resource_file_urls
from .indices import SortKey, WebappIndex
from .locations import (
    COMPONENT_URL_PREFIX,
    absolute_path,
    component_name_from_url,
    get_component_config_from_resource,
    get_webapp_info_from_resource,
    is_component_url,
    parse_component_url,
    resolve_component_url,
)
from .overrides import (
    OverrideResult,
    group_webapps_by_context_root,
    override_key,
    resolve_webapp_overrides,
)
from .registry import ComponentRegistry, RegistryState
from .resources import ResourceResolver

__all__ = [
    "COMPONENT_URL_PREFIX",
    "ComponentConfigCache",
    "ComponentRegistry",
    "OverrideResult",
    "RegistryState",
    "ResourceResolver",
    "SortKey",
    "WebappIndex",
    "absolute_path",
    "classpath_special_jar_locations",
    "component_name_from_url",
    "get_component_config_from_resource",
    "get_webapp_info_from_resource",
    "group_webapps_by_context_root",
    "is_component_url",
    "override_key",
    "parse_component_url",
    "resolve_component_url",
    "resolve_webapp_overrides",
    "root_resource_file_urls",
]
