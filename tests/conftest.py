"""
Pytest configuration and shared fixtures for Open Retouch tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import pytest
from PIL import Image, ImageDraw

from OR_Libs.ImageEditingLib.image_models import SourceImage
from OR_Libs.SessionLib.edit_session import EditSession


@pytest.fixture
def temp_output_dir(tmp_path):
    """
    Provide a temporary directory for exported files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def red_eye_surface():
    """
    Provide a 100x100 gray surface with one red pixel at (50, 50)
    and a different non-red pixel at (50, 80).
    """
    surface = Image.new("RGBA", (100, 100), (90, 90, 90, 255))
    surface.putpixel((50, 50), (200, 20, 20, 255))
    surface.putpixel((50, 80), (30, 120, 200, 255))
    return surface


@pytest.fixture
def portrait_source():
    """
    Provide a 1200x800 source image with a red disc centred at (600, 400).
    """
    img = Image.new("RGBA", (1200, 800), (220, 180, 150, 255))
    draw = ImageDraw.Draw(img)
    draw.ellipse([560, 360, 640, 440], fill=(210, 30, 35, 255))
    return SourceImage.from_image(img)


@pytest.fixture
def session(portrait_source):
    """
    Provide an EditSession whose preview is 300x200 (render scale 4).

    The viewport is the preview limit plus the default 64px padding.
    """
    edit_session = EditSession(viewport_size=(364, 264))
    edit_session.load_image(portrait_source)
    return edit_session
