"""
Tests for configuration loading and saving.
"""

import pytest
import yaml

from compcfg.config import (
    CONFIG_ENV_VAR,
    ComponentSource,
    ComponentsRootSource,
    ConfigLoader,
    RegistryConfig,
    RegistrySettings,
    load_config,
)

PROJECT_CONFIG = """
version: 1
sources:
  - type: root
    path: ./plugins
    name: Plugins
  - type: component
    location: /opt/shared/payment
    global_name: payment
    required: true
settings:
  required_components: [payment]
  properties:
    DATA_HOME: /srv/data
  log_level: DEBUG
"""


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_defaults_without_file(self, tmp_path):
        config = load_config(tmp_path)
        assert len(config.sources) == 1
        source = config.sources[0]
        assert isinstance(source, ComponentsRootSource)
        assert source.resolve_path(tmp_path) == (tmp_path / "components").resolve()
        assert config.settings.log_level == "INFO"

    def test_project_file(self, tmp_path):
        (tmp_path / "compcfg.yaml").write_text(PROJECT_CONFIG, encoding="utf-8")
        config = load_config(tmp_path)

        root, component = config.sources
        assert isinstance(root, ComponentsRootSource)
        assert root.path == "./plugins"
        assert isinstance(component, ComponentSource)
        assert component.global_name == "payment"
        assert component.required is True
        assert config.settings.required_components == ["payment"]
        assert config.settings.properties == {"DATA_HOME": "/srv/data"}
        assert config.settings.log_level == "DEBUG"

    def test_user_level_fallback(self, tmp_path):
        user_dir = ConfigLoader.USER_CONFIG_DIR
        user_dir.mkdir(parents=True)
        (user_dir / "compcfg.yaml").write_text("settings:\n  log_level: WARNING\n")
        project = tmp_path / "project"
        project.mkdir()
        assert load_config(project).settings.log_level == "WARNING"

    def test_env_var_wins(self, tmp_path, monkeypatch):
        (tmp_path / "compcfg.yaml").write_text("settings:\n  log_level: DEBUG\n")
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("settings:\n  log_level: ERROR\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(explicit))
        loader = ConfigLoader(tmp_path)
        assert loader.get_config_path() == explicit
        assert loader.load().settings.log_level == "ERROR"

    @pytest.mark.parametrize(
        "content",
        [
            "sources: [unclosed",
            "sources:\n  - type: ftp\n    path: x\n",
            "settings:\n  required_components: 3\n",
        ],
    )
    def test_invalid_file_falls_back(self, tmp_path, caplog, content):
        (tmp_path / "compcfg.yaml").write_text(content)
        config = load_config(tmp_path)
        assert config == ConfigLoader.default_config()
        assert "Ignoring config" in caplog.text

    def test_read_raises(self, tmp_path):
        path = tmp_path / "compcfg.yaml"
        path.write_text("sources: [unclosed")
        with pytest.raises(yaml.YAMLError):
            ConfigLoader.read(path)

    def test_empty_file(self, tmp_path):
        (tmp_path / "compcfg.yaml").write_text("")
        assert load_config(tmp_path) == RegistryConfig()

    def test_save_and_reload(self, tmp_path):
        config = RegistryConfig(
            sources=[
                ComponentsRootSource(path="./components", name="Components"),
                ComponentSource(location="../extra", required=True),
            ],
            settings=RegistrySettings(properties={"DATA_HOME": "/srv"}),
        )
        loader = ConfigLoader(tmp_path)
        path = loader.save(config)

        assert path == tmp_path / "compcfg.yaml"
        data = yaml.safe_load(path.read_text())
        assert data["sources"][1] == {
            "type": "component",
            "location": "../extra",
            "required": True,
            "enabled": True,
        }
        assert loader.load() == config

    def test_save_user_level(self, tmp_path):
        path = ConfigLoader(tmp_path).save(RegistryConfig(), user_level=True)
        assert path == ConfigLoader.USER_CONFIG_DIR / "compcfg.yaml"
        assert path.is_file()
