"""
Red-eye detection and correction for Open Retouch.

A click with the red-eye brush rewrites the pixels of a rendered surface
inside a circle around the click. Only red-dominant pixels are touched:

    candidate  <=>  R > 80  and  R > 1.4 * G  and  R > 1.4 * B

For a candidate at distance d from the centre (dist_ratio = d / radius):

    intensity = 1 - dist_ratio ** 2
    R'        = R - (R - (G + B) / 2) * intensity
    darken    = 0.7 + 0.3 * dist_ratio
    result    = round(R' * darken), round(G * darken), round(B * darken)

so correction is strongest at the centre and fades out at the rim.

Example:
    >>> surface = Image.new("RGBA", (100, 100), (200, 20, 20, 255))
    >>> changed = apply_red_eye_removal(surface, 50, 50, radius=10)
"""

import logging
import math
from typing import Any, Tuple

import numpy as np

from OR_Libs.pillow_compat import Image
from OR_Libs.constants import (
    RED_EYE_BASE_DARKEN,
    RED_EYE_DOMINANCE,
    RED_EYE_MIN_RED,
    RED_EYE_RIM_DARKEN,
)

logger = logging.getLogger(__name__)

_SUPPORTED_MODES = ("RGB", "RGBA")


def is_red_eye_candidate(r: float, g: float, b: float) -> bool:
    """True if the red channel dominates green and blue."""
    return r > RED_EYE_MIN_RED and r > RED_EYE_DOMINANCE * g and r > RED_EYE_DOMINANCE * b


def correct_pixel(r: int, g: int, b: int, dist_ratio: float) -> Tuple[int, int, int]:
    """
    Correct a single candidate pixel.

    Args:
        r, g, b: Channel values (0-255)
        dist_ratio: Distance from the brush centre divided by the radius (0-1)

    Returns:
        Corrected (r, g, b)
    """
    intensity = 1.0 - dist_ratio * dist_ratio
    avg = (g + b) / 2.0
    new_r = r - (r - avg) * intensity
    darken = RED_EYE_BASE_DARKEN + RED_EYE_RIM_DARKEN * dist_ratio
    return (
        int(math.floor(new_r * darken + 0.5)),
        int(math.floor(g * darken + 0.5)),
        int(math.floor(b * darken + 0.5)),
    )


def brush_bounds(
    cx: float,
    cy: float,
    radius: float,
    surface_size: Tuple[int, int],
) -> Tuple[int, int, int, int]:
    """
    Bounding box of the brush clipped to the surface.

    Returns:
        (left, top, right, bottom) with right/bottom exclusive; empty when
        the brush lies entirely outside the surface
    """
    width, height = surface_size
    left = max(0, int(math.floor(cx - radius)))
    top = max(0, int(math.floor(cy - radius)))
    right = min(width, int(math.ceil(cx + radius)) + 1)
    bottom = min(height, int(math.ceil(cy + radius)) + 1)
    return left, top, max(left, right), max(top, bottom)


def apply_red_eye_removal(surface: Any, cx: float, cy: float, radius: float) -> int:
    """
    Remove red-eye around a click, modifying the surface in place.

    Pixels outside the circle, and non-candidate pixels inside it, are left
    unchanged. Alpha is preserved. A click outside the surface is clipped
    rather than rejected.

    Args:
        surface: PIL Image in RGB or RGBA mode (modified in place)
        cx: Click x in surface pixels
        cy: Click y in surface pixels
        radius: Brush radius in surface pixels

    Returns:
        Number of pixels that were corrected

    Raises:
        TypeError: If surface is not a PIL Image
        ValueError: If radius <= 0 or the surface mode is unsupported
    """
    if not hasattr(surface, "paste"):
        raise TypeError(f"Expected PIL Image, got {type(surface)}")

    if radius <= 0:
        raise ValueError(f"radius must be > 0, got {radius}")

    if surface.mode not in _SUPPORTED_MODES:
        raise ValueError(f"Unsupported surface mode: {surface.mode}. Use RGB or RGBA.")

    left, top, right, bottom = brush_bounds(cx, cy, radius, surface.size)
    if right <= left or bottom <= top:
        return 0

    region = np.array(surface.crop((left, top, right, bottom)), dtype=np.float64)

    ys, xs = np.mgrid[top:bottom, left:right]
    dx = xs - cx
    dy = ys - cy
    dist_sq = dx * dx + dy * dy
    inside = dist_sq <= radius * radius

    red = region[..., 0]
    green = region[..., 1]
    blue = region[..., 2]
    candidate = (
        inside
        & (red > RED_EYE_MIN_RED)
        & (red > RED_EYE_DOMINANCE * green)
        & (red > RED_EYE_DOMINANCE * blue)
    )

    count = int(candidate.sum())
    if count == 0:
        return 0

    dist_ratio = np.sqrt(dist_sq) / radius
    intensity = 1.0 - dist_ratio * dist_ratio
    avg = (green + blue) / 2.0
    new_red = red - (red - avg) * intensity
    darken = RED_EYE_BASE_DARKEN + RED_EYE_RIM_DARKEN * dist_ratio

    corrected = region.copy()
    corrected[..., 0] = np.where(candidate, np.floor(new_red * darken + 0.5), red)
    corrected[..., 1] = np.where(candidate, np.floor(green * darken + 0.5), green)
    corrected[..., 2] = np.where(candidate, np.floor(blue * darken + 0.5), blue)

    patch = Image.fromarray(np.clip(corrected, 0, 255).astype(np.uint8))
    surface.paste(patch, (left, top))

    logger.debug(f"Red-eye at ({cx:.1f}, {cy:.1f}) r={radius:.1f} corrected {count} pixels")
    return count
