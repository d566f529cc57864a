"""Immutable component cache, replaced wholesale on every change."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..models import ComponentConfig, normalize_root_location


class ComponentConfigCache:
    """Components indexed by global name and by root location.

    Instances are never mutated after construction. Writers build a new cache
    with :meth:`copy_and_put` or :meth:`copy_and_put_all` and publish it by
    swapping a single reference, so readers can use whatever instance they
    hold without locking.
    """

    __slots__ = ("_by_name", "_locations", "_values")

    def __init__(
        self,
        configs: Iterable[ComponentConfig] = (),
        previous: ComponentConfigCache | None = None,
    ):
        by_name: dict[str, ComponentConfig] = dict(previous._by_name) if previous else {}
        locations: dict[str, str] = dict(previous._locations) if previous else {}
        for config in configs:
            locations[config.root_location] = config.global_name
            by_name[config.global_name] = config
        self._by_name = by_name
        self._locations = locations
        self._values = tuple(by_name.values())

    def copy_and_put(self, config: ComponentConfig) -> ComponentConfigCache:
        """Return a new cache holding this cache's entries plus ``config``."""
        return ComponentConfigCache((config,), previous=self)

    def copy_and_put_all(self, configs: Iterable[ComponentConfig]) -> ComponentConfigCache:
        """Return a new cache holding this cache's entries plus ``configs``."""
        return ComponentConfigCache(configs, previous=self)

    def from_global_name(self, global_name: str) -> ComponentConfig | None:
        return self._by_name.get(global_name)

    def from_root_location(self, root_location: str) -> ComponentConfig | None:
        global_name = self._locations.get(normalize_root_location(root_location))
        if global_name is None:
            return None
        return self._by_name.get(global_name)

    def values(self) -> tuple[ComponentConfig, ...]:
        """All components in insertion order."""
        return self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[ComponentConfig]:
        return iter(self._values)

    def __contains__(self, global_name: object) -> bool:
        return global_name in self._by_name
