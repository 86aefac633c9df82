"""
Constants and configuration values for Open Retouch.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Orientation
ROTATION_STEP = 90

# Filter names in pipeline order (order matters for preview/export fidelity)
FILTER_BRIGHTNESS = "brightness"
FILTER_CONTRAST = "contrast"
FILTER_SATURATION = "saturation"
FILTER_GRAYSCALE = "grayscale"
FILTER_SEPIA = "sepia"
FILTER_BLUR = "blur"
FILTER_HUE_ROTATE = "hue_rotate"

# Alternate spellings accepted from UI collaborators
FILTER_ALIASES = {"hueRotate": "hue_rotate", "hue-rotate": "hue_rotate", "saturate": "saturation"}

FILTER_ORDER = (
    FILTER_BRIGHTNESS,
    FILTER_CONTRAST,
    FILTER_SATURATION,
    FILTER_GRAYSCALE,
    FILTER_SEPIA,
    FILTER_BLUR,
    FILTER_HUE_ROTATE,
)

FILTER_DEFAULTS = {
    FILTER_BRIGHTNESS: 100.0,
    FILTER_CONTRAST: 100.0,
    FILTER_SATURATION: 100.0,
    FILTER_GRAYSCALE: 0.0,
    FILTER_SEPIA: 0.0,
    FILTER_BLUR: 0.0,
    FILTER_HUE_ROTATE: 0.0,
}

# Slider ranges offered to the UI (min, max)
FILTER_RANGES = {
    FILTER_BRIGHTNESS: (0.0, 200.0),
    FILTER_CONTRAST: (0.0, 200.0),
    FILTER_SATURATION: (0.0, 200.0),
    FILTER_GRAYSCALE: (0.0, 100.0),
    FILTER_SEPIA: (0.0, 100.0),
    FILTER_BLUR: (0.0, 20.0),
    FILTER_HUE_ROTATE: (0.0, 360.0),
}

# Named presets: brightness, contrast, saturation, grayscale, sepia, blur, hueRotate
FILTER_PRESETS = {
    "vintage": (110, 85, 70, 0, 40, 0, 0),
    "cool": (100, 100, 90, 0, 0, 0, 180),
    "warm": (105, 105, 110, 0, 20, 0, 0),
    "dramatic": (90, 150, 80, 0, 0, 0, 0),
    "bw": (100, 120, 0, 100, 0, 0, 0),
}

# Text layers
DEFAULT_TEXT_SIZE = 32.0
DEFAULT_FILL_COLOR = "#ffffff"
DEFAULT_STROKE_COLOR = "#000000"
DEFAULT_TEXT_POSITION = (0.5, 0.5)
MIN_STROKE_WIDTH = 2.0
STROKE_WIDTH_DIVISOR = 16.0
EMPTY_LAYER_LABEL = "(empty)"
TEXT_LAYER_FIELDS = ("content", "size", "fill_color", "stroke_color", "x", "y")

# Selection indicator (preview only)
SELECTION_PADDING = 8
SELECTION_DASH = (6, 4)
SELECTION_COLOR = "#00aaff"
SELECTION_LINE_WIDTH = 1

# Red-eye tool
DEFAULT_BRUSH_RADIUS = 20.0
RED_EYE_MIN_RED = 80
RED_EYE_DOMINANCE = 1.4
RED_EYE_BASE_DARKEN = 0.7
RED_EYE_RIM_DARKEN = 0.3

# Preview viewport
DEFAULT_VIEWPORT_WIDTH = 1024
DEFAULT_VIEWPORT_HEIGHT = 768
VIEWPORT_PADDING = 64

# Fonts tried in order before falling back to Pillow's bundled font
FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "DejaVuSans.ttf", "Arial.ttf", "arial.ttf")

# Export
DEFAULT_EXPORT_FILENAME = "edited-photo.png"
DEFAULT_OUTPUT_FORMAT = "PNG"
WORKING_MODE = "RGBA"

# Supported inputs
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}
IMAGE_CONTENT_TYPE_PREFIX = "image/"
