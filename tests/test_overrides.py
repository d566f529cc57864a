"""
Unit tests for webapp override resolution.
"""

import logging

from compcfg.models import ComponentConfig, WebappInfo
from compcfg.registry import group_webapps_by_context_root, override_key, resolve_webapp_overrides


def webapp(component: str, name: str, mount_point: str, server: str = "main", **kwargs) -> WebappInfo:
    data = {"component_name": component, "name": name, "server": server, "mount-point": mount_point}
    data.update(kwargs)
    return WebappInfo.model_validate(data)


def component(name: str, *webapps: WebappInfo) -> ComponentConfig:
    return ComponentConfig(root_location=f"/apps/{name}", component_name=name, webapps=webapps)


OVERRIDE = {"override-mode": "remove-overridden-webapp"}


class TestGrouping:
    """Tests for context root grouping."""

    def test_groups_in_order(self):
        a = component("A", webapp("A", "admin", "/admin"), webapp("A", "shop", "/shop"))
        b = component("B", webapp("B", "admin", "admin/"))
        groups = group_webapps_by_context_root([a, b])
        assert [w.component_name for w in groups["/admin"]] == ["A", "B"]
        assert [w.name for w in groups["/shop"]] == ["shop"]


class TestResolveWebappOverrides:
    """Tests for resolve_webapp_overrides."""

    def test_last_webapp_removes_earlier(self, caplog):
        caplog.set_level(logging.INFO)
        a = component("A", webapp("A", "admin", "/admin"), webapp("A", "shop", "/shop"))
        b = component("B", webapp("B", "admin", "/admin", **OVERRIDE))

        result = resolve_webapp_overrides([a, b])

        assert result.changed
        new_a, new_b = result.components
        assert [w.name for w in new_a.webapps] == ["shop"]
        assert new_a is not a
        assert new_b is b
        assert result.overridden[override_key("A", "admin")] is b.webapps[0]
        assert "remove-overridden-webapp" in caplog.text
        # source records are untouched
        assert [w.name for w in a.webapps] == ["admin", "shop"]

    def test_no_override_mode_keeps_both(self):
        components = [
            component("A", webapp("A", "admin", "/admin")),
            component("B", webapp("B", "admin", "/admin")),
        ]
        result = resolve_webapp_overrides(components)
        assert result.components is components
        assert not result.changed

    def test_only_last_can_override(self):
        components = [
            component("A", webapp("A", "admin", "/admin", **OVERRIDE)),
            component("B", webapp("B", "admin", "/admin")),
        ]
        assert resolve_webapp_overrides(components).components is components

    def test_other_servers_untouched(self):
        a = component("A", webapp("A", "admin", "/admin", server="backend"))
        b = component("B", webapp("B", "admin", "/admin", server="main"))
        c = component("C", webapp("C", "admin", "/admin", server="main", **OVERRIDE))

        result = resolve_webapp_overrides([a, b, c])

        assert result.components[0] is a
        assert result.components[1].webapps == ()
        assert set(result.overridden) == {"B::admin"}

    def test_removes_every_earlier_webapp(self):
        a = component("A", webapp("A", "admin", "/admin"))
        b = component("B", webapp("B", "admin", "/admin"))
        c = component("C", webapp("C", "admin", "/admin", **OVERRIDE))

        result = resolve_webapp_overrides([a, b, c])

        assert [len(comp.webapps) for comp in result.components] == [0, 0, 1]
        surviving = c.webapps[0]
        assert result.overridden["A::admin"] is surviving
        assert result.overridden["B::admin"] is surviving

    def test_same_component_loses_multiple_webapps(self):
        a = component(
            "A",
            webapp("A", "admin", "/admin"),
            webapp("A", "tools", "/tools"),
            webapp("A", "shop", "/shop"),
        )
        b = component(
            "B",
            webapp("B", "admin", "/admin", **OVERRIDE),
            webapp("B", "tools", "/tools", **OVERRIDE),
        )
        result = resolve_webapp_overrides([a, b])
        assert [w.name for w in result.components[0].webapps] == ["shop"]
        assert set(result.overridden) == {"A::admin", "A::tools"}

    def test_idempotent(self):
        components = [
            component("A", webapp("A", "admin", "/admin")),
            component("B", webapp("B", "admin", "/admin", **OVERRIDE)),
        ]
        once = resolve_webapp_overrides(components)
        twice = resolve_webapp_overrides(list(once.components))
        assert not twice.changed
        assert [len(c.webapps) for c in twice.components] == [0, 1]
