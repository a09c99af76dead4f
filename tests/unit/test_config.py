"""Unit tests for configuration management."""

import json
from pathlib import Path

import pytest

from hedgehog.config import (
    BackendConfig,
    Engine,
    HedgehogConfig,
    LayoutConfig,
    LogLevel,
    StoreKind,
    ViewportConfig,
    find_config_file,
    load_config,
)


class TestBackendConfig:
    """Test BackendConfig model."""

    def test_defaults(self):
        """Test the backend invocation defaults."""
        config = BackendConfig()
        assert config.executable is None
        assert config.binary_name == "mr_hedgehog"
        assert config.engine == Engine.SYN.value
        assert config.format == "dot"
        assert config.expand_paths is False
        assert config.store is None
        assert Path(config.output).name == "mr_hedgehog_output.dot"
        assert str(Path("target") / "release") in config.search_paths

    def test_aliases(self):
        """Test camelCase keys from the JSON file."""
        config = BackendConfig(**{
            "binaryName": "mr_hedgehog_dev",
            "searchPaths": ["/opt/hedgehog/bin"],
            "expandPaths": True,
            "engine": "scip",
            "store": "disk",
        })
        assert config.binary_name == "mr_hedgehog_dev"
        assert config.search_paths == ["/opt/hedgehog/bin"]
        assert config.expand_paths is True
        assert config.engine == "scip"
        assert config.store == StoreKind.DISK.value

    def test_binary_name_must_be_bare(self):
        """Test that a path is rejected as a binary name."""
        with pytest.raises(ValueError):
            BackendConfig(binaryName="bin/mr_hedgehog")

    def test_unknown_engine(self):
        """Test engine validation."""
        with pytest.raises(ValueError):
            BackendConfig(engine="rust-analyzer")


class TestLayoutConfig:
    """Test LayoutConfig model."""

    def test_defaults(self):
        config = LayoutConfig()
        assert config.columns == 5
        assert config.column_spacing == 200
        assert config.row_spacing == 120
        assert (config.node_width, config.node_height) == (150, 50)
        assert config.arrow_size == 10

    def test_columns_validation(self):
        with pytest.raises(ValueError):
            LayoutConfig(columns=0)

    def test_node_size_validation(self):
        with pytest.raises(ValueError):
            LayoutConfig(nodeWidth=0)


class TestViewportConfig:
    """Test ViewportConfig model."""

    def test_defaults(self):
        config = ViewportConfig()
        assert (config.width, config.height) == (1200, 800)
        assert config.padding == 50
        assert config.fit_margin == 0.9
        assert config.zoom_step == 1.1

    @pytest.mark.parametrize("margin", [0, -0.5, 1.5])
    def test_fit_margin_range(self, margin):
        with pytest.raises(ValueError):
            ViewportConfig(fitMargin=margin)

    def test_zoom_step_must_grow(self):
        with pytest.raises(ValueError):
            ViewportConfig(zoomStep=1.0)


class TestHedgehogConfig:
    """Test the complete configuration model."""

    def test_config_from_dict(self):
        """Test config creation from dictionary."""
        config = HedgehogConfig(**{
            "backend": {"engine": "scip", "debug": True},
            "layout": {"columns": 3, "rowSpacing": 90},
            "viewport": {"width": 640, "height": 480},
            "logging": {"level": "debug"},
        })
        assert config.backend.engine == "scip"
        assert config.backend.debug is True
        assert config.layout.columns == 3
        assert config.layout.row_spacing == 90
        assert config.viewport.width == 640
        assert config.logging.level == LogLevel.DEBUG.value

    def test_unknown_section_rejected(self):
        """Test that unknown top-level keys are rejected."""
        with pytest.raises(ValueError):
            HedgehogConfig(**{"renderer": {}})


class TestConfigLoading:
    """Test configuration file loading."""

    def test_load_config_file(self, tmp_path):
        """Test loading configuration from file."""
        config_file = tmp_path / ".hedgehog.json"
        config_file.write_text(json.dumps({"layout": {"columns": 2}}))

        config = load_config(config_file)
        assert config.layout.columns == 2
        assert config.viewport.width == 1200

    def test_load_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.json")
        assert config == HedgehogConfig()

    def test_load_invalid_json(self, tmp_path):
        """Test loading invalid JSON raises error."""
        config_file = tmp_path / ".hedgehog.json"
        config_file.write_text("{ invalid json }")

        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(config_file)

    def test_load_invalid_values(self, tmp_path):
        config_file = tmp_path / ".hedgehog.json"
        config_file.write_text(json.dumps({"layout": {"columns": -1}}))

        with pytest.raises(ValueError, match="Failed to load config"):
            load_config(config_file)

    def test_load_non_object_json(self, tmp_path):
        config_file = tmp_path / ".hedgehog.json"
        config_file.write_text("[1, 2]")

        with pytest.raises(ValueError, match="Failed to load config"):
            load_config(config_file)

    def test_unexpected_errors_propagate(self, tmp_path, monkeypatch):
        """Only JSON and validation problems are reported as config errors."""
        config_file = tmp_path / ".hedgehog.json"
        config_file.write_text("{}")

        def broken_load(f):
            raise RuntimeError("bug in loader")

        monkeypatch.setattr(json, "load", broken_load)

        with pytest.raises(RuntimeError, match="bug in loader"):
            load_config(config_file)

    def test_find_config_file_in_parent(self, tmp_path):
        """Test finding config file by searching up the tree."""
        config_file = tmp_path / ".hedgehog.json"
        config_file.write_text("{}")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == config_file.resolve()

    def test_find_config_file_none(self, tmp_path, monkeypatch):
        """Test that the search stops at the filesystem root."""
        monkeypatch.setattr(Path, "exists", lambda self: False)

        assert find_config_file(tmp_path) is None
