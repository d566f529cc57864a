"""
pytest configuration and fixtures.
"""

from pathlib import Path
from typing import Callable

import pytest

from compcfg.config import ConfigLoader
from compcfg.registry import ComponentRegistry

MakeComponent = Callable[..., Path]


def descriptor_xml(name: str, body: str = "", enabled: str | None = None) -> str:
    """Render a component descriptor document."""
    enabled_attr = f' enabled="{enabled}"' if enabled is not None else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<ofbiz-component name="{name}"{enabled_attr}\n'
        '    xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"\n'
        '    xsi:noNamespaceSchemaLocation="ofbiz-component.xsd">\n'
        f"{body}\n"
        "</ofbiz-component>\n"
    )


@pytest.fixture
def components_root(tmp_path: Path) -> Path:
    """Empty components root directory."""
    root = tmp_path / "components"
    root.mkdir()
    return root


@pytest.fixture
def make_component(components_root: Path) -> MakeComponent:
    """Factory writing a component directory with a descriptor."""

    def make(
        name: str,
        body: str = "",
        enabled: str | None = None,
        directory: str | None = None,
        filename: str = "ofbiz-component.xml",
        parent: Path | None = None,
    ) -> Path:
        component_dir = (parent or components_root) / (directory or name)
        component_dir.mkdir(parents=True, exist_ok=True)
        (component_dir / filename).write_text(descriptor_xml(name, body, enabled), encoding="utf-8")
        return component_dir

    return make


@pytest.fixture
def registry(tmp_path: Path) -> ComponentRegistry:
    """Fresh registry rooted at the test directory."""
    return ComponentRegistry(home=tmp_path)


@pytest.fixture
def admin_components(make_component: MakeComponent) -> tuple[Path, Path]:
    """Components A and B both mounting /admin on server main; B overrides."""
    a = make_component(
        "A",
        '<webapp name="admin" title="A Admin" server="main" location="webapp/admin" '
        'mount-point="/admin"/>\n'
        '<webapp name="shop" server="main" location="webapp/shop" mount-point="/shop"/>',
    )
    b = make_component(
        "B",
        '<webapp name="admin" title="B Admin" server="main" location="webapp/admin" '
        'mount-point="/admin" override-mode="remove-overridden-webapp"/>',
    )
    return a, b


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep config lookups away from the real home directory and environment."""
    monkeypatch.setattr(ConfigLoader, "USER_CONFIG_DIR", tmp_path / "user-config")
    monkeypatch.delenv("COMPCFG_CONFIG", raising=False)
