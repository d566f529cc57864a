"""
Unit tests for the copy-on-write component cache.
"""

from compcfg.models import ComponentConfig
from compcfg.registry import ComponentConfigCache


def component(name: str, location: str | None = None) -> ComponentConfig:
    return ComponentConfig(root_location=location or f"/apps/{name}", component_name=name)


class TestComponentConfigCache:
    """Tests for ComponentConfigCache."""

    def test_empty(self):
        cache = ComponentConfigCache()
        assert len(cache) == 0
        assert cache.values() == ()
        assert cache.from_global_name("a") is None
        assert cache.from_root_location("/apps/a") is None

    def test_lookup_by_name_and_location(self):
        a = component("a")
        cache = ComponentConfigCache([a])
        assert cache.from_global_name("a") is a
        assert cache.from_root_location("/apps/a/") is a
        assert cache.from_root_location("/apps/a") is a
        assert "a" in cache

    def test_copy_and_put_is_non_destructive(self):
        a = component("a")
        b = component("b")
        original = ComponentConfigCache([a])
        updated = original.copy_and_put(b)

        assert original.from_global_name("b") is None
        assert original.from_root_location("/apps/b") is None
        assert original.values() == (a,)
        assert updated.from_global_name("b") is b
        assert updated.from_global_name("a") is a
        assert updated.values() == (a, b)

    def test_copy_and_put_all_preserves_order(self):
        cache = ComponentConfigCache().copy_and_put_all([component("c"), component("a")])
        assert [c.global_name for c in cache] == ["c", "a"]

    def test_overwrite_same_name(self):
        first = component("a")
        second = component("a", "/elsewhere/a")
        cache = ComponentConfigCache([first]).copy_and_put(second)
        assert cache.from_global_name("a") is second
        assert len(cache) == 1
        assert cache.from_root_location("/elsewhere/a") is second

    def test_location_index_consistent_with_names(self):
        cache = ComponentConfigCache([component("a"), component("b")])
        for config in cache:
            assert cache.from_root_location(config.root_location) is config
