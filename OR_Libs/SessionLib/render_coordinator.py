"""
Render Coordinator for Open Retouch.

Produces the two render targets of an edit session from one shared state:

- Preview: fitted inside the viewport, used for interactive editing. Pointer
  coordinates (text placement, red-eye clicks) are in preview pixels.
- Export: the full, orientation-adjusted intrinsic size of the source.

Every size-dependent quantity (font size, stroke width, blur radius, brush
radius) is multiplied by the render scale so both targets look the same:

    render_scale = export_width / preview_width

A render pass is: orient + resample the source, run the filter stack,
replay recorded red-eye retouches, then draw text layers unfiltered.

Classes:
    RenderState: Snapshot of everything a render pass reads

Functions:
    viewport_limits: Usable preview area inside a container
    preview_size / export_size / render_scale: Target dimensions
    render_base: Geometry + filter stack
    retouch_from_click: Record a preview click in source coordinates
    replay_retouches: Apply recorded retouches to a surface
    compose_surface: Retouches and text layers over a base
    render_surface: Full render pass for any target size
    render_preview / render_export: The two targets
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Tuple

from OR_Libs.config import EditorConfig
from OR_Libs.ImageEditingLib.filter_pipeline import apply_filter_stack
from OR_Libs.ImageEditingLib.geometry import (
    display_size,
    oriented_size,
    render_oriented,
    source_to_surface,
    surface_to_source,
)
from OR_Libs.ImageEditingLib.image_models import (
    FilterState,
    OrientationState,
    RetouchOperation,
    SourceImage,
    TextLayer,
)
from OR_Libs.ImageEditingLib.red_eye import apply_red_eye_removal
from OR_Libs.ImageEditingLib.text_overlay import draw_text_layers

logger = logging.getLogger(__name__)

Size = Tuple[int, int]


@dataclass
class RenderState:
    """Everything a render pass reads. Rendering never mutates it."""
    source: Optional[SourceImage] = None
    orientation: OrientationState = field(default_factory=OrientationState)
    filters: FilterState = field(default_factory=FilterState)
    layers: Sequence[TextLayer] = field(default_factory=list)
    selected_index: Optional[int] = None
    retouches: Sequence[RetouchOperation] = field(default_factory=list)

    @property
    def has_image(self) -> bool:
        return self.source is not None and not self.source.is_empty


# ============================================================================
# Target sizes
# ============================================================================

def viewport_limits(container_width: int, container_height: int, padding: int) -> Size:
    """Area available to the preview inside a container of the given size."""
    return max(0, container_width - padding), max(0, container_height - padding)


def preview_size(state: RenderState, max_width: int, max_height: int) -> Size:
    """Fitted preview size, or (0, 0) without an image."""
    if not state.has_image:
        return 0, 0
    return display_size(
        state.source.width, state.source.height, state.orientation, max_width, max_height
    )


def export_size(state: RenderState) -> Size:
    """Full-resolution size after orientation, or (0, 0) without an image."""
    if not state.has_image:
        return 0, 0
    return oriented_size(state.source.width, state.source.height, state.orientation)


def render_scale(export_width: int, preview_width: int) -> float:
    """Ratio of export to preview width (1.0 when the preview is empty)."""
    if preview_width <= 0:
        return 1.0
    return export_width / preview_width


# ============================================================================
# Render passes
# ============================================================================

def render_base(
    source: SourceImage,
    orientation: OrientationState,
    filters: FilterState,
    surface_size: Size,
    scale: float = 1.0,
) -> Any:
    """Oriented, resampled and filtered source at surface_size."""
    oriented = render_oriented(source.image, orientation, surface_size)
    return apply_filter_stack(oriented, filters, scale)


def retouch_from_click(
    px: float,
    py: float,
    brush_radius: float,
    surface_size: Size,
    orientation: OrientationState,
    source_size: Size,
) -> RetouchOperation:
    """
    Convert a red-eye click on a surface into a resolution-independent record.

    The click is stored at the centre of the clicked pixel in normalised
    source coordinates, and the radius in source pixels.
    """
    surface_width, surface_height = surface_size
    u, v = surface_to_source(
        (px + 0.5) / surface_width, (py + 0.5) / surface_height, orientation
    )
    oriented_width, _ = oriented_size(source_size[0], source_size[1], orientation)
    radius = brush_radius * oriented_width / surface_width
    return RetouchOperation(u=u, v=v, radius=radius)


def replay_retouches(
    surface: Any,
    retouches: Sequence[RetouchOperation],
    orientation: OrientationState,
    source_size: Size,
) -> int:
    """
    Apply recorded retouches, in order, to a surface of any size.

    Returns:
        Total number of corrected pixels
    """
    if not retouches:
        return 0

    surface_width, surface_height = surface.size
    oriented_width, _ = oriented_size(source_size[0], source_size[1], orientation)
    to_surface = surface_width / oriented_width

    corrected = 0
    for op in retouches:
        x, y = source_to_surface(op.u, op.v, orientation)
        radius = op.radius * to_surface
        if radius <= 0:
            continue
        corrected += apply_red_eye_removal(
            surface, x * surface_width - 0.5, y * surface_height - 0.5, radius
        )
    return corrected


def compose_surface(
    base: Any,
    state: RenderState,
    scale: float = 1.0,
    show_selection: bool = True,
    config: Optional[EditorConfig] = None,
) -> Any:
    """Copy a filtered base, replay retouches onto it and draw the text layers."""
    surface = base.copy()
    replay_retouches(
        surface, state.retouches, state.orientation, (state.source.width, state.source.height)
    )
    draw_text_layers(
        surface,
        state.layers,
        state.selected_index,
        render_scale=scale,
        show_selection=show_selection,
        config=config,
    )
    return surface


def render_surface(
    state: RenderState,
    surface_size: Size,
    scale: float = 1.0,
    show_selection: bool = True,
    config: Optional[EditorConfig] = None,
) -> Optional[Any]:
    """
    Full render pass at surface_size.

    Returns:
        RGBA PIL Image, or None without an image or for an empty size
    """
    if not state.has_image or surface_size[0] <= 0 or surface_size[1] <= 0:
        return None

    base = render_base(state.source, state.orientation, state.filters, surface_size, scale)
    return compose_surface(base, state, scale, show_selection, config)


def render_preview(
    state: RenderState,
    max_width: int,
    max_height: int,
    config: Optional[EditorConfig] = None,
) -> Optional[Any]:
    """Interactive preview, selection indicator included."""
    return render_surface(
        state, preview_size(state, max_width, max_height), 1.0, True, config
    )


def render_export(
    state: RenderState,
    preview_width: int,
    config: Optional[EditorConfig] = None,
) -> Optional[Any]:
    """
    Full-resolution export matching a preview of preview_width pixels.

    Returns:
        RGBA PIL Image without the selection indicator, or None without an image
    """
    size = export_size(state)
    if size == (0, 0):
        return None

    scale = render_scale(size[0], preview_width)
    logger.debug(f"Rendering export {size[0]}x{size[1]} at scale {scale:.3f}")
    return render_surface(state, size, scale, False, config)
