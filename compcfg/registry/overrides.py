"""Resolve duplicate webapp mount points across the loaded components."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from ..models import OVERRIDE_MODE_REMOVE, ComponentConfig, WebappInfo

logger = logging.getLogger(__name__)


def override_key(component_name: str, webapp_name: str) -> str:
    """Key of the overridden-webapp mapping."""
    return f"{component_name}::{webapp_name}"


@dataclass(frozen=True)
class OverrideResult:
    """Outcome of webapp override resolution."""

    components: Sequence[ComponentConfig]
    # "component::webapp" of each removed webapp -> the webapp that replaced it
    overridden: Mapping[str, WebappInfo] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def changed(self) -> bool:
        return bool(self.overridden)


def group_webapps_by_context_root(
    components: Sequence[ComponentConfig],
) -> dict[str, list[WebappInfo]]:
    """Group every webapp by context root, in component and declaration order."""
    groups: dict[str, list[WebappInfo]] = {}
    for component in components:
        for webapp in component.webapps:
            groups.setdefault(webapp.context_root, []).append(webapp)
    return groups


def resolve_webapp_overrides(components: Sequence[ComponentConfig]) -> OverrideResult:
    """Apply ``remove-overridden-webapp`` across a full, ordered component list.

    Within each context root shared by two or more webapps, only the last
    declared webapp can request the override. When it does, every earlier
    webapp on the same server is removed from its owning component, which is
    replaced by a copy with the reduced webapp list. Components that lose no
    webapp are returned unchanged; if nothing changes, ``components`` itself is
    returned.
    """
    modified: dict[str, ComponentConfig] = {}
    overridden: dict[str, WebappInfo] = {}
    originals = {component.global_name: component for component in components}

    for webapps in group_webapps_by_context_root(components).values():
        if len(webapps) < 2:
            continue
        last = webapps[-1]
        if last.override_mode != OVERRIDE_MODE_REMOVE:
            continue
        for webapp in webapps[:-1]:
            if webapp.server != last.server:
                continue
            logger.info(
                f"Applying {OVERRIDE_MODE_REMOVE} requested by webapp "
                f"{last.component_name}#{last.name}, removing webapp with the same "
                f"server and mount-point ({last.mount_point}): "
                f"{webapp.component_name}#{webapp.name}"
            )
            # the owner may already have lost another webapp
            owner = modified.get(webapp.component_name) or originals.get(webapp.component_name)
            if owner is None:
                continue
            remaining = []
            removed: WebappInfo | None = None
            for candidate in owner.webapps:
                if candidate is webapp or candidate.name == webapp.name:
                    removed = candidate
                else:
                    remaining.append(candidate)
            modified[owner.global_name] = owner.with_webapps(remaining)
            if removed is not None:
                overridden[override_key(owner.global_name, removed.name)] = last

    if not modified:
        return OverrideResult(components=components)

    resolved = [modified.get(component.global_name, component) for component in components]
    return OverrideResult(components=resolved, overridden=MappingProxyType(overridden))
