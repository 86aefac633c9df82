"""
Editor configuration for Open Retouch.

Holds the tunable values of the editing engine (viewport padding, text and
brush defaults, selection indicator style, fonts, export naming) and reads or
writes them as a JSON file.

Classes:
    EditorConfig: Tunable editor settings with dict round-tripping

Functions:
    load_editor_config: Load settings from a JSON file (defaults if missing)
    save_editor_config: Write settings to a JSON file
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

from OR_Libs.constants import (
    DEFAULT_BRUSH_RADIUS,
    DEFAULT_EXPORT_FILENAME,
    DEFAULT_FILL_COLOR,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_STROKE_COLOR,
    DEFAULT_TEXT_SIZE,
    FONT_CANDIDATES,
    SELECTION_COLOR,
    SELECTION_DASH,
    SELECTION_LINE_WIDTH,
    SELECTION_PADDING,
    VIEWPORT_PADDING,
)

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    """Tunable editor settings.

    Attributes:
        viewport_padding: Pixels subtracted from the container size before fitting the preview
        default_text_size: Font size (preview pixels) for new text layers
        default_fill_color: Fill colour for new text layers
        default_stroke_color: Outline colour for new text layers
        default_brush_radius: Initial red-eye brush radius (preview pixels)
        selection_padding: Gap between a selected layer's text and its dashed box
        selection_dash: (dash length, gap length) of the selection box
        selection_color: Outline colour of the selection box
        selection_line_width: Outline width of the selection box
        font_candidates: TrueType font files tried in order for text layers
        export_filename: File name used when saving an export
        export_format: Pillow format name used when encoding an export
    """
    viewport_padding: int = VIEWPORT_PADDING
    default_text_size: float = DEFAULT_TEXT_SIZE
    default_fill_color: str = DEFAULT_FILL_COLOR
    default_stroke_color: str = DEFAULT_STROKE_COLOR
    default_brush_radius: float = DEFAULT_BRUSH_RADIUS
    selection_padding: int = SELECTION_PADDING
    selection_dash: Tuple[int, int] = SELECTION_DASH
    selection_color: str = SELECTION_COLOR
    selection_line_width: int = SELECTION_LINE_WIDTH
    font_candidates: Tuple[str, ...] = field(default_factory=lambda: tuple(FONT_CANDIDATES))
    export_filename: str = DEFAULT_EXPORT_FILENAME
    export_format: str = DEFAULT_OUTPUT_FORMAT

    def __post_init__(self):
        """Validate settings."""
        if self.viewport_padding < 0:
            raise ValueError(f"viewport_padding must be >= 0, got {self.viewport_padding}")

        if self.default_text_size <= 0:
            raise ValueError(f"default_text_size must be > 0, got {self.default_text_size}")

        if self.default_brush_radius <= 0:
            raise ValueError(f"default_brush_radius must be > 0, got {self.default_brush_radius}")

        if len(self.selection_dash) != 2 or min(self.selection_dash) <= 0:
            raise ValueError(f"selection_dash must be two positive lengths, got {self.selection_dash}")

        self.selection_dash = tuple(int(v) for v in self.selection_dash)
        self.font_candidates = tuple(str(v) for v in self.font_candidates)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["selection_dash"] = list(self.selection_dash)
        data["font_candidates"] = list(self.font_candidates)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


def load_editor_config(config_path: Path) -> EditorConfig:
    """
    Load editor settings from a JSON file.

    Args:
        config_path: Path to the JSON config file

    Returns:
        The loaded EditorConfig, or defaults if the file does not exist

    Raises:
        ValueError: If the file is not a JSON object or holds invalid values
    """
    if not config_path.exists():
        logger.debug(f"No config at {config_path}, using defaults")
        return EditorConfig()

    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Config file is not valid JSON: {config_path}") from exc

    if not isinstance(payload, dict):
        raise ValueError(f"Config file must contain a JSON object: {config_path}")

    return EditorConfig.from_dict(payload)


def save_editor_config(config: EditorConfig, config_path: Path) -> Path:
    """Write editor settings to a JSON file and return its path."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    logger.info(f"Saved editor config to {config_path}")
    return config_path
