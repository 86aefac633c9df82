"""
Filter Pipeline for Open Retouch.

Serialises a FilterState into a fixed-order adjustment stack and applies it
to an image. The order is always:

    brightness -> contrast -> saturation -> grayscale -> sepia -> blur -> hue_rotate

Preview and export run the very same stack, so the only difference between
them is the blur radius, which is multiplied by the render scale.

Colour operators follow the CSS Filter Effects definitions: brightness and
contrast are linear per-channel transfers, saturation/grayscale/sepia/hue
rotation are 3x3 colour matrices in linear-coefficient RGB, and blur is a
Gaussian with the radius in pixels. Alpha is passed through untouched by the
colour operators.

Example:
    >>> state = FilterState()
    >>> apply_preset(state, "bw")
    True
    >>> state.as_tuple()
    (100, 120, 0, 100, 0, 0, 0)
    >>> filtered = apply_filter_stack(img, state)
"""

import logging
import math
from typing import Any, List, Tuple

import numpy as np

from OR_Libs.pillow_compat import Image, ImageFilter
from OR_Libs.constants import (
    FILTER_ALIASES,
    FILTER_BLUR,
    FILTER_BRIGHTNESS,
    FILTER_CONTRAST,
    FILTER_DEFAULTS,
    FILTER_GRAYSCALE,
    FILTER_HUE_ROTATE,
    FILTER_ORDER,
    FILTER_PRESETS,
    FILTER_SATURATION,
    FILTER_SEPIA,
    WORKING_MODE,
)
from OR_Libs.ImageEditingLib.image_models import FilterState

logger = logging.getLogger(__name__)

_BLEND_FILTERS = (FILTER_GRAYSCALE, FILTER_SEPIA)
_CSS_NAMES = {
    FILTER_BRIGHTNESS: "brightness",
    FILTER_CONTRAST: "contrast",
    FILTER_SATURATION: "saturate",
    FILTER_GRAYSCALE: "grayscale",
    FILTER_SEPIA: "sepia",
    FILTER_BLUR: "blur",
    FILTER_HUE_ROTATE: "hue-rotate",
}


# ============================================================================
# Filter state editing
# ============================================================================

def canonical_filter_name(name: str) -> str:
    """
    Resolve a filter name or alias (e.g. 'hueRotate') to its canonical name.

    Raises:
        ValueError: If the name is not one of the seven filters
    """
    key = str(name).strip()
    key = FILTER_ALIASES.get(key, key)
    if key not in FILTER_DEFAULTS:
        raise ValueError(
            f"Unknown filter: {name}. Valid filters: {', '.join(FILTER_ORDER)}"
        )
    return key


def clamp_filter_value(name: str, value: float) -> float:
    """Clamp a value to the filter's conceptual domain."""
    name = canonical_filter_name(name)
    value = float(value)
    if name in _BLEND_FILTERS:
        return max(0.0, min(100.0, value))
    if name == FILTER_HUE_ROTATE:
        return value
    return max(0.0, value)


def set_filter(state: FilterState, name: str, value: float) -> FilterState:
    """Set one parameter in place and return the state."""
    name = canonical_filter_name(name)
    setattr(state, name, clamp_filter_value(name, value))
    logger.debug(f"Filter {name} set to {getattr(state, name)}")
    return state


def apply_preset(state: FilterState, preset_name: str) -> bool:
    """
    Overwrite all seven parameters with a named preset.

    Returns:
        True if the preset exists, False (state untouched) otherwise
    """
    preset = FILTER_PRESETS.get(str(preset_name))
    if preset is None:
        logger.warning(f"Ignoring unknown preset: {preset_name}")
        return False

    for name, value in zip(FILTER_ORDER, preset):
        setattr(state, name, value)
    logger.debug(f"Applied preset {preset_name}")
    return True


def reset_filters(state: FilterState) -> FilterState:
    """Restore the identity filter in place."""
    for name in FILTER_ORDER:
        setattr(state, name, FILTER_DEFAULTS[name])
    return state


def format_filter_value(name: str, value: float) -> str:
    """Slider read-out: '4px' for blur, '180°' for hue, '110%' otherwise."""
    name = canonical_filter_name(name)
    number = f"{float(value):g}"
    if name == FILTER_BLUR:
        return f"{number}px"
    if name == FILTER_HUE_ROTATE:
        return f"{number}°"
    return f"{number}%"


# ============================================================================
# Stack serialisation
# ============================================================================

def build_filter_stack(state: FilterState, scale: float = 1.0) -> List[Tuple[str, float]]:
    """
    Ordered (name, amount) pairs for the state.

    Args:
        state: Filter parameters
        scale: Render scale; multiplies the blur radius only

    Returns:
        Seven pairs in pipeline order
    """
    stack = []
    for name in FILTER_ORDER:
        amount = float(getattr(state, name))
        if name == FILTER_BLUR:
            amount *= scale
        stack.append((name, amount))
    return stack


def filter_string(state: FilterState, scale: float = 1.0) -> str:
    """CSS-style rendering of the stack, e.g. 'brightness(110%) ... hue-rotate(0deg)'."""
    parts = []
    for name, amount in build_filter_stack(state, scale):
        if name == FILTER_BLUR:
            unit = "px"
        elif name == FILTER_HUE_ROTATE:
            unit = "deg"
        else:
            unit = "%"
        parts.append(f"{_CSS_NAMES[name]}({amount:g}{unit})")
    return " ".join(parts)


# ============================================================================
# Colour operators
# ============================================================================

def saturation_matrix(amount: float) -> np.ndarray:
    """Matrix for saturate(); amount 1.0 = identity, 0.0 = luminance only."""
    s = amount
    return np.array([
        [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
    ], dtype=np.float32)


def grayscale_matrix(amount: float) -> np.ndarray:
    """Matrix for grayscale(); amount 0.0 = identity, 1.0 = fully gray."""
    a = 1.0 - max(0.0, min(1.0, amount))
    return np.array([
        [0.2126 + 0.7874 * a, 0.7152 - 0.7152 * a, 0.0722 - 0.0722 * a],
        [0.2126 - 0.2126 * a, 0.7152 + 0.2848 * a, 0.0722 - 0.0722 * a],
        [0.2126 - 0.2126 * a, 0.7152 - 0.7152 * a, 0.0722 + 0.9278 * a],
    ], dtype=np.float32)


def sepia_matrix(amount: float) -> np.ndarray:
    """Matrix for sepia(); amount 0.0 = identity, 1.0 = full sepia."""
    a = 1.0 - max(0.0, min(1.0, amount))
    return np.array([
        [0.393 + 0.607 * a, 0.769 - 0.769 * a, 0.189 - 0.189 * a],
        [0.349 - 0.349 * a, 0.686 + 0.314 * a, 0.168 - 0.168 * a],
        [0.272 - 0.272 * a, 0.534 - 0.534 * a, 0.131 + 0.869 * a],
    ], dtype=np.float32)


def hue_rotate_matrix(degrees: float) -> np.ndarray:
    """Matrix for hue-rotate() by the given angle in degrees."""
    angle = math.radians(degrees % 360)
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([
        [0.213 + c * 0.787 - s * 0.213, 0.715 - c * 0.715 - s * 0.715, 0.072 - c * 0.072 + s * 0.928],
        [0.213 - c * 0.213 + s * 0.143, 0.715 + c * 0.285 + s * 0.140, 0.072 - c * 0.072 - s * 0.283],
        [0.213 - c * 0.213 - s * 0.787, 0.715 - c * 0.715 + s * 0.715, 0.072 + c * 0.928 + s * 0.072],
    ], dtype=np.float32)


def _apply_matrix(rgb: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    return np.clip(rgb @ matrix.T, 0.0, 1.0)


def _apply_linear(rgb: np.ndarray, slope: float, intercept: float) -> np.ndarray:
    return np.clip(rgb * slope + intercept, 0.0, 1.0)


def _to_array(image: Any) -> np.ndarray:
    return np.asarray(image.convert(WORKING_MODE), dtype=np.float32) / 255.0


def _to_image(array: np.ndarray) -> Any:
    data = np.floor(np.clip(array, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
    return Image.fromarray(data)


def apply_filter_stack(image: Any, state: FilterState, scale: float = 1.0) -> Any:
    """
    Apply the full adjustment stack to an image.

    The function is pure: the same image, state and scale always yield the
    same pixels, and the input image is not modified.

    Args:
        image: PIL Image (converted to RGBA)
        state: Filter parameters
        scale: Render scale used to size the blur radius

    Returns:
        Filtered PIL Image in RGBA mode

    Raises:
        TypeError: If image is not a PIL Image
    """
    if not hasattr(image, "convert"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    if state.is_identity():
        return image.convert(WORKING_MODE).copy()

    array = _to_array(image)

    for name, amount in build_filter_stack(state, scale):
        if amount == FILTER_DEFAULTS[name] or (name == FILTER_HUE_ROTATE and amount % 360 == 0):
            continue

        rgb = array[..., :3]
        if name == FILTER_BRIGHTNESS:
            rgb = _apply_linear(rgb, amount / 100.0, 0.0)
        elif name == FILTER_CONTRAST:
            slope = amount / 100.0
            rgb = _apply_linear(rgb, slope, 0.5 - 0.5 * slope)
        elif name == FILTER_SATURATION:
            rgb = _apply_matrix(rgb, saturation_matrix(amount / 100.0))
        elif name == FILTER_GRAYSCALE:
            rgb = _apply_matrix(rgb, grayscale_matrix(amount / 100.0))
        elif name == FILTER_SEPIA:
            rgb = _apply_matrix(rgb, sepia_matrix(amount / 100.0))
        elif name == FILTER_BLUR:
            blurred = _to_image(array).filter(ImageFilter.GaussianBlur(radius=amount))
            array = _to_array(blurred)
            continue
        elif name == FILTER_HUE_ROTATE:
            rgb = _apply_matrix(rgb, hue_rotate_matrix(amount))

        array = np.concatenate([rgb, array[..., 3:]], axis=-1)

    return _to_image(array)
