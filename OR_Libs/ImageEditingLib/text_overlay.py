"""
Text Overlay Layer System for Open Retouch.

Text layers are kept in an ordered stack: insertion order is z-order, so a
later layer is drawn over an earlier one. At most one layer is selected and
bound to the edit controls. Layers are drawn after the filter stack and are
never filtered themselves.

Classes:
    TextLayerStack: Ordered layers plus the current selection

Functions:
    text_metrics: Font size and stroke width of a layer at a render scale
    load_font: Resolve a TrueType font for a pixel size
    layer_bbox: Bounding box of a layer's text on a surface
    draw_text_layers: Paint every non-empty layer onto a surface

Example:
    >>> stack = TextLayerStack()
    >>> stack.add_layer()
    0
    >>> stack.update_selected("content", "Hello")
    True
    >>> draw_text_layers(surface, stack.layers, stack.selected_index)
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Tuple

from OR_Libs.pillow_compat import Image, ImageDraw, ImageFont
from OR_Libs.config import EditorConfig
from OR_Libs.constants import (
    EMPTY_LAYER_LABEL,
    FONT_CANDIDATES,
    MIN_STROKE_WIDTH,
    STROKE_WIDTH_DIVISOR,
    TEXT_LAYER_FIELDS,
)
from OR_Libs.ImageEditingLib.image_models import TextLayer

logger = logging.getLogger(__name__)


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class TextLayerStack:
    """Ordered text layers with single selection.

    Selection follows the layer it points at: deleting a layer below the
    selection shifts the index down by one, deleting the selected layer moves
    the selection to the layer now at that index (or the new last layer).
    """

    def __init__(self, config: Optional[EditorConfig] = None):
        self.config = config or EditorConfig()
        self.layers: List[TextLayer] = []
        self.selected_index: Optional[int] = None

    def __len__(self) -> int:
        return len(self.layers)

    @property
    def selected_layer(self) -> Optional[TextLayer]:
        if self.selected_index is None:
            return None
        return self.layers[self.selected_index]

    def add_layer(self) -> int:
        """
        Append an empty layer on top of the stack and select it.

        Returns:
            Index of the new layer
        """
        layer = TextLayer(
            size=self.config.default_text_size,
            fill_color=self.config.default_fill_color,
            stroke_color=self.config.default_stroke_color,
        )
        self.layers.append(layer)
        self.selected_index = len(self.layers) - 1
        logger.debug(f"Added text layer {self.selected_index}")
        return self.selected_index

    def select_layer(self, index: Optional[int]) -> bool:
        """
        Select a layer by index, or clear the selection with None.

        Returns:
            False if index is out of range (selection unchanged), True otherwise
        """
        if index is not None and not (0 <= index < len(self.layers)):
            logger.debug(f"Ignoring selection of missing layer {index}")
            return False
        self.selected_index = index
        return True

    def update_selected(self, field_name: str, value: Any) -> bool:
        """
        Change one field of the selected layer.

        Args:
            field_name: One of content, size, fill_color, stroke_color, x, y
            value: New value (coerced: size >= 1, positions clamped to 0-1)

        Returns:
            False when nothing is selected, True otherwise

        Raises:
            ValueError: If field_name is not a text layer field
        """
        if field_name not in TEXT_LAYER_FIELDS:
            raise ValueError(
                f"Unknown text layer field: {field_name}. "
                f"Valid fields: {', '.join(TEXT_LAYER_FIELDS)}"
            )

        layer = self.selected_layer
        if layer is None:
            return False

        if field_name == "content":
            layer.content = str(value)
        elif field_name == "size":
            layer.size = max(1.0, float(value))
        elif field_name in ("x", "y"):
            setattr(layer, field_name, _clamp_unit(value))
        else:
            setattr(layer, field_name, str(value))
        return True

    def delete_layer(self, index: int) -> bool:
        """
        Remove a layer and re-derive the selection.

        Returns:
            False if index is out of range, True otherwise
        """
        if not (0 <= index < len(self.layers)):
            return False

        del self.layers[index]
        selected = self.selected_index

        if selected is not None:
            if index == selected:
                self.selected_index = min(index, len(self.layers) - 1) if self.layers else None
            elif index < selected:
                self.selected_index = selected - 1

        logger.debug(f"Deleted text layer {index}, selection now {self.selected_index}")
        return True

    def position_from_pointer(
        self,
        px: float,
        py: float,
        surface_width: int,
        surface_height: int,
        red_eye_active: bool = False,
    ) -> bool:
        """
        Move the selected layer's centre to a pointer position.

        Positioning is suppressed while the red-eye tool is active.

        Returns:
            True if a layer was moved
        """
        layer = self.selected_layer
        if layer is None or red_eye_active:
            return False
        if surface_width <= 0 or surface_height <= 0:
            return False

        layer.x = _clamp_unit(px / surface_width)
        layer.y = _clamp_unit(py / surface_height)
        return True

    def layer_at_point(self, px: float, py: float, surface_size: Tuple[int, int]) -> Optional[int]:
        """Index of the top-most non-empty layer whose text box contains the point."""
        for index in range(len(self.layers) - 1, -1, -1):
            layer = self.layers[index]
            if not layer.content:
                continue
            left, top, right, bottom = layer_bbox(
                layer, surface_size, candidates=self.config.font_candidates
            )
            if left <= px <= right and top <= py <= bottom:
                return index
        return None

    def clear(self) -> None:
        self.layers.clear()
        self.selected_index = None

    def layer_labels(self) -> List[str]:
        """Layer list entries: the content, or '(empty)'."""
        return [layer.content if layer.content else EMPTY_LAYER_LABEL for layer in self.layers]

    def selected_fields(self) -> Optional[Dict[str, Any]]:
        """Field values for the edit controls, or None when hidden."""
        layer = self.selected_layer
        return layer.to_dict() if layer is not None else None


# ============================================================================
# Rendering
# ============================================================================

def text_metrics(layer: TextLayer, render_scale: float = 1.0) -> Tuple[float, float]:
    """
    Font size and stroke width used to draw a layer.

    Returns:
        (size * render_scale, max(2, size * render_scale / 16))
    """
    font_size = layer.size * render_scale
    stroke_width = max(MIN_STROKE_WIDTH, font_size / STROKE_WIDTH_DIVISOR)
    return font_size, stroke_width


@lru_cache(maxsize=64)
def load_font(size: int, candidates: Tuple[str, ...] = FONT_CANDIDATES) -> Any:
    """Load the first available TrueType candidate at size, else Pillow's bundled font."""
    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    logger.debug(f"No TrueType candidate found, using Pillow default font at {size}px")
    return ImageFont.load_default(size=size)


def _layer_anchor(layer: TextLayer, surface_size: Tuple[int, int]) -> Tuple[float, float]:
    width, height = surface_size
    return layer.x * width, layer.y * height


def layer_bbox(
    layer: TextLayer,
    surface_size: Tuple[int, int],
    render_scale: float = 1.0,
    candidates: Sequence[str] = FONT_CANDIDATES,
) -> Tuple[float, float, float, float]:
    """Measured (left, top, right, bottom) of a layer's text, stroke included."""
    font_size, stroke_width = text_metrics(layer, render_scale)
    font = load_font(max(1, round(font_size)), tuple(candidates))
    measure = ImageDraw.Draw(Image.new("L", (1, 1)))
    return measure.textbbox(
        _layer_anchor(layer, surface_size),
        layer.content,
        font=font,
        anchor="mm",
        stroke_width=max(1, round(stroke_width)),
    )


def _draw_dashed_rectangle(
    draw: Any,
    box: Tuple[float, float, float, float],
    dash: Tuple[int, int],
    color: str,
    width: int,
) -> None:
    left, top, right, bottom = box
    on, off = dash
    edges = [
        ((left, top), (right, top)),
        ((right, top), (right, bottom)),
        ((right, bottom), (left, bottom)),
        ((left, bottom), (left, top)),
    ]
    for (x0, y0), (x1, y1) in edges:
        length = abs(x1 - x0) + abs(y1 - y0)
        if length == 0:
            continue
        ux, uy = (x1 - x0) / length, (y1 - y0) / length
        offset = 0.0
        while offset < length:
            end = min(offset + on, length)
            draw.line(
                [(x0 + ux * offset, y0 + uy * offset), (x0 + ux * end, y0 + uy * end)],
                fill=color,
                width=width,
            )
            offset += on + off


def draw_text_layers(
    surface: Any,
    layers: Sequence[TextLayer],
    selected_index: Optional[int] = None,
    render_scale: float = 1.0,
    show_selection: bool = True,
    config: Optional[EditorConfig] = None,
) -> Any:
    """
    Draw text layers onto a surface in z-order.

    Each non-empty layer is centred on (x * width, y * height). The selected
    layer gets a dashed box around its measured extent, but only on the
    interactive preview (render_scale == 1 and show_selection).

    Args:
        surface: PIL Image to draw on (modified in place)
        layers: Layers bottom to top
        selected_index: Index of the selected layer, or None
        render_scale: Export/preview size ratio applied to sizes
        show_selection: Whether the selection box may be drawn
        config: Editor settings (fonts, selection style)

    Returns:
        The same surface
    """
    if not hasattr(surface, "size"):
        raise TypeError(f"Expected PIL Image, got {type(surface)}")

    config = config or EditorConfig()
    draw = ImageDraw.Draw(surface)
    draw_selection = show_selection and render_scale == 1

    for index, layer in enumerate(layers):
        if not layer.content:
            continue

        font_size, stroke_width = text_metrics(layer, render_scale)
        font = load_font(max(1, round(font_size)), config.font_candidates)
        anchor = _layer_anchor(layer, surface.size)

        draw.text(
            anchor,
            layer.content,
            font=font,
            anchor="mm",
            fill=layer.fill_color,
            stroke_width=max(1, round(stroke_width)),
            stroke_fill=layer.stroke_color,
        )

        if draw_selection and index == selected_index:
            left, top, right, bottom = layer_bbox(
                layer, surface.size, render_scale, config.font_candidates
            )
            pad = config.selection_padding
            _draw_dashed_rectangle(
                draw,
                (left - pad, top - pad, right + pad, bottom + pad),
                config.selection_dash,
                config.selection_color,
                config.selection_line_width,
            )

    return surface
