"""
Image editing data models for Open Retouch.

This module defines core data structures used throughout the editing engine.

Classes:
    SourceImage: Immutable decoded image the session renders from
    OrientationState: Quarter-turn rotation plus horizontal/vertical flips
    FilterState: The seven filter parameters of the adjustment stack
    TextLayer: A positioned, styled text annotation
    RedEyeToolState: Red-eye interaction mode and brush radius
    RetouchOperation: A recorded red-eye click, stored in source coordinates

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from OR_Libs.pillow_compat import Image
from OR_Libs.constants import (
    DEFAULT_BRUSH_RADIUS,
    DEFAULT_FILL_COLOR,
    DEFAULT_STROKE_COLOR,
    DEFAULT_TEXT_POSITION,
    DEFAULT_TEXT_SIZE,
    FILTER_DEFAULTS,
    FILTER_ORDER,
    WORKING_MODE,
)

RgbaColor = Tuple[int, int, int, int]


@dataclass(frozen=True)
class SourceImage:
    """Decoded pixel buffer plus its intrinsic size.

    The session never mutates the buffer; a new upload replaces the whole
    SourceImage.
    """
    image: 'Image.Image'
    path: Optional[Path] = None

    @classmethod
    def from_image(cls, image: Any, path: Optional[Path] = None) -> "SourceImage":
        """Wrap a Pillow image, converting it to the working RGBA mode."""
        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        return cls(image=image.convert(WORKING_MODE), path=path)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class OrientationState:
    """Rotation in quarter turns (clockwise degrees) and two flip flags."""
    rotation: int = 0
    flip_horizontal: bool = False
    flip_vertical: bool = False

    def __post_init__(self):
        if self.rotation % 90 != 0:
            raise ValueError(f"rotation must be a multiple of 90, got {self.rotation}")
        object.__setattr__(self, "rotation", self.rotation % 360)

    @property
    def is_quarter_turn(self) -> bool:
        """True when width and height swap (90 or 270 degrees)."""
        return self.rotation in (90, 270)


@dataclass
class FilterState:
    """Filter parameters; the defaults are the identity filter.

    Attributes:
        brightness: Percent, 100 = unchanged
        contrast: Percent, 100 = unchanged
        saturation: Percent, 100 = unchanged, 0 = fully desaturated
        grayscale: Percent blend toward luminance (0-100)
        sepia: Percent blend toward sepia tone (0-100)
        blur: Gaussian blur radius in preview pixels
        hue_rotate: Hue rotation in degrees
    """
    brightness: float = FILTER_DEFAULTS["brightness"]
    contrast: float = FILTER_DEFAULTS["contrast"]
    saturation: float = FILTER_DEFAULTS["saturation"]
    grayscale: float = FILTER_DEFAULTS["grayscale"]
    sepia: float = FILTER_DEFAULTS["sepia"]
    blur: float = FILTER_DEFAULTS["blur"]
    hue_rotate: float = FILTER_DEFAULTS["hue_rotate"]

    def as_tuple(self) -> Tuple[float, ...]:
        """Values in pipeline order."""
        return tuple(getattr(self, name) for name in FILTER_ORDER)

    def is_identity(self) -> bool:
        return all(getattr(self, name) == FILTER_DEFAULTS[name] for name in FILTER_ORDER)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class TextLayer:
    """A text annotation drawn over the filtered image.

    Attributes:
        content: Text to draw; empty layers are skipped when rendering
        size: Font size in preview pixels
        fill_color: Text fill colour (any Pillow colour string)
        stroke_color: Text outline colour
        x: Horizontal centre as a fraction of the surface width (0-1)
        y: Vertical centre as a fraction of the surface height (0-1)
    """
    content: str = ""
    size: float = DEFAULT_TEXT_SIZE
    fill_color: str = DEFAULT_FILL_COLOR
    stroke_color: str = DEFAULT_STROKE_COLOR
    x: float = DEFAULT_TEXT_POSITION[0]
    y: float = DEFAULT_TEXT_POSITION[1]

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class RedEyeToolState:
    """Interaction mode of the red-eye brush (not image content)."""
    active: bool = False
    brush_radius: float = DEFAULT_BRUSH_RADIUS


@dataclass(frozen=True)
class RetouchOperation:
    """A red-eye click recorded independently of the render resolution.

    Attributes:
        u: Horizontal click position as a fraction of the unoriented source width
        v: Vertical click position as a fraction of the unoriented source height
        radius: Brush radius measured in source pixels
    """
    u: float
    v: float
    radius: float
