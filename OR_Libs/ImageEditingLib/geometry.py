"""
Orientation geometry for Open Retouch.

Maps an OrientationState to render-surface dimensions and to the drawing
transform applied before the source image is painted. The transform is:
translate to the surface centre, rotate clockwise by the rotation angle,
mirror for each active flip, then draw the image centred using its
pre-rotation dimensions. In image terms the flips are applied first and the
rotation second.

Example:
    >>> state = rotate_right(OrientationState())
    >>> oriented_size(400, 300, state)
    (300, 400)
    >>> display_size(4000, 3000, state, max_width=600, max_height=600)
    (450, 600)
"""

import logging
from dataclasses import dataclass
from typing import Any, Tuple

from OR_Libs.pillow_compat import Image
from OR_Libs.constants import ROTATION_STEP
from OR_Libs.ImageEditingLib.image_models import OrientationState

logger = logging.getLogger(__name__)


# ============================================================================
# Orientation state transitions
# ============================================================================

def rotate_right(state: OrientationState) -> OrientationState:
    """Rotate a quarter turn clockwise."""
    return OrientationState(
        rotation=(state.rotation + ROTATION_STEP) % 360,
        flip_horizontal=state.flip_horizontal,
        flip_vertical=state.flip_vertical,
    )


def rotate_left(state: OrientationState) -> OrientationState:
    """Rotate a quarter turn counter-clockwise."""
    return OrientationState(
        rotation=(state.rotation - ROTATION_STEP + 360) % 360,
        flip_horizontal=state.flip_horizontal,
        flip_vertical=state.flip_vertical,
    )


def toggle_flip_horizontal(state: OrientationState) -> OrientationState:
    return OrientationState(state.rotation, not state.flip_horizontal, state.flip_vertical)


def toggle_flip_vertical(state: OrientationState) -> OrientationState:
    return OrientationState(state.rotation, state.flip_horizontal, not state.flip_vertical)


# ============================================================================
# Dimensions
# ============================================================================

def oriented_size(width: int, height: int, state: OrientationState) -> Tuple[int, int]:
    """Intrinsic size after orientation: width and height swap on quarter turns."""
    if state.is_quarter_turn:
        return height, width
    return width, height


def fit_ratio(width: float, height: float, max_width: float, max_height: float) -> float:
    """
    Scale factor fitting (width, height) inside the viewport without upscaling.

    Returns:
        min(max_width / width, max_height / height, 1), or 0 for an empty size
    """
    if width <= 0 or height <= 0:
        return 0.0
    return max(0.0, min(max_width / width, max_height / height, 1.0))


def display_size(
    width: int,
    height: int,
    state: OrientationState,
    max_width: float,
    max_height: float,
) -> Tuple[int, int]:
    """
    Preview surface size for an image of intrinsic (width, height).

    Dimensions are swapped for quarter turns, scaled by fit_ratio and
    truncated to whole pixels (never below 1 for a non-empty image).

    Returns:
        (width, height) in pixels, or (0, 0) for an empty image
    """
    dw, dh = oriented_size(width, height, state)
    ratio = fit_ratio(dw, dh, max_width, max_height)
    if ratio <= 0:
        return 0, 0
    return max(1, int(dw * ratio)), max(1, int(dh * ratio))


# ============================================================================
# Drawing transform
# ============================================================================

@dataclass(frozen=True)
class DrawInstructions:
    """Affine steps used to paint the source onto a surface.

    Attributes:
        translate: Surface centre the origin is moved to
        rotation: Clockwise rotation in degrees applied after translating
        scale: (-1 or 1, -1 or 1) mirror applied after rotating
        draw_rect: (x, y, width, height) of the image relative to the moved origin
    """
    translate: Tuple[float, float]
    rotation: int
    scale: Tuple[int, int]
    draw_rect: Tuple[float, float, float, float]


def draw_instructions(state: OrientationState, surface_size: Tuple[int, int]) -> DrawInstructions:
    """Build the transform for drawing onto a surface of the given size."""
    surface_width, surface_height = surface_size
    draw_width, draw_height = oriented_size(surface_width, surface_height, state)
    return DrawInstructions(
        translate=(surface_width / 2, surface_height / 2),
        rotation=state.rotation,
        scale=(-1 if state.flip_horizontal else 1, -1 if state.flip_vertical else 1),
        draw_rect=(-draw_width / 2, -draw_height / 2, draw_width, draw_height),
    )


_CLOCKWISE_TRANSPOSE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def apply_orientation(image: Any, state: OrientationState) -> Any:
    """
    Flip and rotate an image losslessly.

    Args:
        image: PIL Image in its intrinsic orientation
        state: Orientation to apply

    Returns:
        New PIL Image; the input is never modified
    """
    if not hasattr(image, "transpose"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    result = image
    if state.flip_horizontal:
        result = result.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    if state.flip_vertical:
        result = result.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    if state.rotation in _CLOCKWISE_TRANSPOSE:
        result = result.transpose(_CLOCKWISE_TRANSPOSE[state.rotation])

    return result if result is not image else image.copy()


def render_oriented(image: Any, state: OrientationState, surface_size: Tuple[int, int]) -> Any:
    """
    Draw the source onto a surface of surface_size using the orientation.

    Equivalent to executing draw_instructions(state, surface_size): the image
    is oriented first, then resampled to fill the surface exactly.
    """
    oriented = apply_orientation(image, state)
    if oriented.size != tuple(surface_size):
        oriented = oriented.resize(tuple(surface_size), Image.Resampling.LANCZOS)
    return oriented


# ============================================================================
# Coordinate mapping
# ============================================================================

def source_to_surface(u: float, v: float, state: OrientationState) -> Tuple[float, float]:
    """Map a normalised source point to a normalised surface point."""
    if state.flip_horizontal:
        u = 1.0 - u
    if state.flip_vertical:
        v = 1.0 - v

    if state.rotation == 90:
        return 1.0 - v, u
    if state.rotation == 180:
        return 1.0 - u, 1.0 - v
    if state.rotation == 270:
        return v, 1.0 - u
    return u, v


def surface_to_source(x: float, y: float, state: OrientationState) -> Tuple[float, float]:
    """Inverse of source_to_surface."""
    if state.rotation == 90:
        u, v = y, 1.0 - x
    elif state.rotation == 180:
        u, v = 1.0 - x, 1.0 - y
    elif state.rotation == 270:
        u, v = 1.0 - y, x
    else:
        u, v = x, y

    if state.flip_horizontal:
        u = 1.0 - u
    if state.flip_vertical:
        v = 1.0 - v
    return u, v
