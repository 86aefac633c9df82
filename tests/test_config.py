"""
Unit tests for the editor config module.

Tests validation, dict conversion and JSON load/save.
"""

import json
import tempfile
from pathlib import Path

import pytest

from OR_Libs.config import EditorConfig, load_editor_config, save_editor_config


class TestEditorConfig:
    """Tests for EditorConfig."""

    def test_defaults(self):
        config = EditorConfig()

        assert config.viewport_padding == 64
        assert config.default_text_size == 32
        assert config.default_brush_radius == 20
        assert config.export_filename == "edited-photo.png"
        assert config.export_format == "PNG"

    def test_invalid_values_raise(self):
        with pytest.raises(ValueError):
            EditorConfig(viewport_padding=-1)
        with pytest.raises(ValueError):
            EditorConfig(default_text_size=0)
        with pytest.raises(ValueError):
            EditorConfig(default_brush_radius=-3)
        with pytest.raises(ValueError):
            EditorConfig(selection_dash=(6, 0))

    def test_dict_round_trip(self):
        config = EditorConfig(selection_dash=[3, 2], font_candidates=["a.ttf"])
        data = config.to_dict()

        assert data["selection_dash"] == [3, 2]
        assert EditorConfig.from_dict(data) == config

    def test_from_dict_ignores_unknown_keys(self):
        config = EditorConfig.from_dict({"default_text_size": 48, "theme": "dark"})

        assert config.default_text_size == 48


class TestLoadSaveConfig:
    """Tests for load_editor_config and save_editor_config."""

    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_editor_config(Path(tmpdir) / "editor.json")

            assert config == EditorConfig()

    def test_save_then_load(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "editor.json"
            config = EditorConfig(selection_color="#ff00ff", export_filename="x.png")

            save_editor_config(config, path)

            assert json.loads(path.read_text())["selection_color"] == "#ff00ff"
            assert load_editor_config(path) == config

    def test_invalid_json_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "editor.json"
            path.write_text("{not json")

            with pytest.raises(ValueError):
                load_editor_config(path)

    def test_non_object_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "editor.json"
            path.write_text("[1, 2]")

            with pytest.raises(ValueError):
                load_editor_config(path)
