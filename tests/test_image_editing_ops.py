"""
Unit tests for image_editing_ops module.

Tests image ingestion from files and bytes, and export encoding/saving.
"""

import io
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
from PIL import Image

from OR_Libs.ImageEditingLib.image_editing_ops import (
    export_png_bytes,
    is_image_content_type,
    load_source_from_bytes,
    load_source_image,
    save_export,
)


def _png_bytes(size=(6, 4), color=(10, 20, 30)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class TestIsImageContentType:
    """Tests for is_image_content_type function."""

    def test_accepts_image_types(self):
        """Should accept any image/* MIME type."""
        assert is_image_content_type("image/png")
        assert is_image_content_type("IMAGE/JPEG")

    def test_rejects_other_types(self):
        """Should reject non-image and missing types."""
        assert not is_image_content_type("text/plain")
        assert not is_image_content_type("")
        assert not is_image_content_type(None)


class TestLoadSourceFromBytes:
    """Tests for load_source_from_bytes function."""

    def test_decodes_image_bytes(self):
        """Should decode PNG bytes into an RGBA source."""
        source = load_source_from_bytes(_png_bytes(), "image/png")

        assert source.width == 6
        assert source.height == 4
        assert source.image.mode == "RGBA"
        assert source.image.getpixel((0, 0)) == (10, 20, 30, 255)

    def test_ignores_non_image_content(self):
        """Should return None for non-image content types."""
        assert load_source_from_bytes(b"hello", "text/plain") is None

    def test_undecodable_bytes_raise(self):
        """Should let Pillow's decode error propagate."""
        with pytest.raises(OSError):
            load_source_from_bytes(b"not really a png", "image/png")


class TestLoadSourceImage:
    """Tests for load_source_image function."""

    def test_loads_image_file(self):
        """Should load a supported image file and keep its path."""
        with tempfile.TemporaryDirectory() as tmpdir:
            image_path = Path(tmpdir) / "photo.png"
            image_path.write_bytes(_png_bytes(size=(9, 5)))

            source = load_source_image(image_path)

            assert (source.width, source.height) == (9, 5)
            assert source.path == image_path

    def test_ignores_unsupported_extension(self):
        """Should return None for non-image files."""
        with tempfile.TemporaryDirectory() as tmpdir:
            notes = Path(tmpdir) / "notes.txt"
            notes.write_text("not an image")

            assert load_source_image(notes) is None

    def test_missing_file_raises(self):
        """Should raise FileNotFoundError for a missing image."""
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(FileNotFoundError):
                load_source_image(Path(tmpdir) / "missing.png")


class TestExport:
    """Tests for export_png_bytes and save_export functions."""

    def test_png_bytes(self):
        """Should encode as PNG."""
        data = export_png_bytes(Image.new("RGBA", (3, 3), (1, 2, 3, 4)))

        assert data.startswith(b"\x89PNG")

    def test_png_bytes_invalid_input(self):
        with pytest.raises(TypeError):
            export_png_bytes("not_an_image")

    def test_saves_with_default_name(self):
        """Should save to edited-photo.png in PNG format."""
        with tempfile.TemporaryDirectory() as tmpdir:
            output_dir = Path(tmpdir)
            mock_image = Mock()

            path = save_export(mock_image, output_dir)

            assert path == output_dir / "edited-photo.png"
            mock_image.save.assert_called_once_with(path, format="PNG")

    def test_missing_directory_raises(self):
        """Should raise OSError when the directory does not exist."""
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(OSError):
                save_export(Mock(), Path(tmpdir) / "missing")

    def test_file_as_directory_raises(self):
        """Should raise OSError when the output path is a file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            file_path = Path(tmpdir) / "file.png"
            file_path.touch()

            with pytest.raises(OSError):
                save_export(Mock(), file_path)
