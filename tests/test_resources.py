"""
Tests for resource-loader resolution through the registry.
"""

import pytest

from compcfg.errors import (
    ComponentError,
    ComponentNotFoundError,
    EnvironmentMissingError,
    ResourceLoaderNotFoundError,
    ResourceNotFoundError,
)
from compcfg.registry import ComponentRegistry

LOADERS = """
    <resource-loader name="main" type="component"/>
    <resource-loader name="shared" type="file" prepend-env="SHARED_HOME" prefix="/data/"/>
    <resource-loader name="cp" type="classpath"/>
    <resource-loader name="web" type="url"/>
    <classpath type="dir" location="config"/>
"""


@pytest.fixture
def component_dir(make_component):
    path = make_component("A", LOADERS)
    (path / "config").mkdir()
    (path / "config" / "foo.xml").write_text("<foo/>", encoding="utf-8")
    return path


@pytest.fixture
def resolved(registry, component_dir):
    registry.init([registry.resolve("A", str(component_dir))])
    return registry


class TestFullLocation:
    """Tests for full location construction."""

    def test_component_loader(self, resolved, component_dir):
        root = resolved.get_root_location("A")
        assert resolved.get_full_location("A", "main", "config/foo.xml") == root + "config/foo.xml"

    def test_prepend_env_uses_registry_properties(self, tmp_path, component_dir):
        registry = ComponentRegistry(properties={"SHARED_HOME": "/srv"}, home=tmp_path)
        registry.resolve("A", str(component_dir))
        assert registry.get_full_location("A", "shared", "x.xml") == "/srv/data/x.xml"

    def test_prepend_env_unset(self, resolved, monkeypatch):
        monkeypatch.delenv("SHARED_HOME", raising=False)
        with pytest.raises(EnvironmentMissingError):
            resolved.get_url("A", "shared", "x.xml")

    def test_undeclared_loader(self, resolved):
        with pytest.raises(ResourceLoaderNotFoundError):
            resolved.get_full_location("A", "nope", "x.xml")

    def test_unknown_component(self, resolved):
        with pytest.raises(ComponentNotFoundError):
            resolved.get_full_location("Z", "main", "x.xml")

    def test_is_file_resource_loader(self, resolved):
        assert resolved.is_file_resource_loader("A", "main")
        assert resolved.is_file_resource_loader("A", "shared")
        assert not resolved.is_file_resource_loader("A", "cp")
        assert not resolved.is_file_resource_loader("A", "web")


class TestGetUrl:
    """Tests for URL resolution per loader type."""

    def test_component_file(self, resolved, component_dir):
        url = resolved.get_url("A", "main", "config/foo.xml")
        assert url == (component_dir / "config" / "foo.xml").resolve().as_uri()

    def test_component_file_missing(self, resolved):
        with pytest.raises(ResourceNotFoundError, match="File Resource not found"):
            resolved.get_url("A", "main", "config/missing.xml")

    def test_file_loader(self, tmp_path, component_dir):
        shared = tmp_path / "shared" / "data"
        shared.mkdir(parents=True)
        (shared / "x.xml").write_text("<x/>")
        registry = ComponentRegistry(properties={"SHARED_HOME": str(tmp_path / "shared")}, home=tmp_path)
        registry.resolve("A", str(component_dir))
        assert registry.get_url("A", "shared", "x.xml") == (shared / "x.xml").resolve().as_uri()

    def test_classpath_loader(self, resolved, component_dir):
        url = resolved.get_url("A", "cp", "/foo.xml")
        assert url == (component_dir / "config" / "foo.xml").resolve().as_uri()

    def test_classpath_missing(self, resolved):
        with pytest.raises(ResourceNotFoundError, match="Classpath Resource not found"):
            resolved.get_url("A", "cp", "compcfg-no-such-resource.xml")

    def test_url_loader_absolute(self, resolved):
        url = "https://example.com/config/foo.xml"
        assert resolved.get_url("A", "web", url) == url

    def test_url_loader_component_url(self, resolved, component_dir):
        url = resolved.get_url("A", "web", "component://A/config/foo.xml")
        assert url == (component_dir / "config" / "foo.xml").resolve().as_uri()

    def test_url_loader_malformed_component_url(self, resolved):
        with pytest.raises(ComponentError, match="malformed URL"):
            resolved.get_url("A", "web", "component://A")

    def test_url_loader_missing_path(self, resolved):
        with pytest.raises(ResourceNotFoundError):
            resolved.get_url("A", "web", "nowhere/foo.xml")


class TestGetStream:
    """Tests for opening resources."""

    def test_reads_file(self, resolved):
        with resolved.get_stream("A", "main", "config/foo.xml") as stream:
            assert stream.read() == b"<foo/>"

    def test_missing_file(self, resolved):
        with pytest.raises(ResourceNotFoundError):
            resolved.get_stream("A", "main", "config/missing.xml")
