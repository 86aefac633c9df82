"""
Edit session for Open Retouch.

EditSession is the single owner of the editing state: source image,
orientation, filters, text layers, red-eye tool and recorded retouches. Every
mutating call re-renders the preview synchronously and notifies listeners
with a RenderEvent, unless the call happens inside deferred_render(), in which
case one render runs when the outermost block exits.

Operations that need an image are no-ops without one; they return False (or
None) instead of raising.

Classes:
    RenderEvent: What a UI collaborator needs after each render
    EditSession: Session state plus the control operations
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from OR_Libs.config import EditorConfig
from OR_Libs.constants import (
    DEFAULT_VIEWPORT_HEIGHT,
    DEFAULT_VIEWPORT_WIDTH,
    FILTER_ORDER,
)
from OR_Libs.ImageEditingLib import filter_pipeline, geometry
from OR_Libs.ImageEditingLib.image_editing_ops import save_export
from OR_Libs.ImageEditingLib.image_models import (
    FilterState,
    OrientationState,
    RedEyeToolState,
    RetouchOperation,
    SourceImage,
)
from OR_Libs.ImageEditingLib.text_overlay import TextLayerStack
from OR_Libs.SessionLib.render_coordinator import (
    RenderState,
    compose_surface,
    export_size,
    preview_size,
    render_base,
    render_export,
    render_scale,
    retouch_from_click,
    viewport_limits,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderEvent:
    """Emitted to listeners after every preview render.

    Attributes:
        surface: The rendered preview (RGBA PIL Image)
        layer_labels: Layer list entries, bottom to top
        selected_index: Selected layer index, or None
        selected_fields: Field values for the edit controls, or None to hide them
        filter_labels: Slider read-outs keyed by filter name
        red_eye_active: Whether clicks are routed to the red-eye brush
    """
    surface: Any
    layer_labels: Tuple[str, ...]
    selected_index: Optional[int]
    selected_fields: Optional[Dict[str, Any]]
    filter_labels: Dict[str, str]
    red_eye_active: bool


RenderListener = Callable[[RenderEvent], None]


class EditSession:
    """
    Editing state for one image and the operations that change it.

    Example:
        >>> session = EditSession(viewport_size=(864, 664))
        >>> session.load_image(SourceImage.from_image(img))
        True
        >>> session.apply_preset("vintage")
        True
        >>> session.add_text()
        0
        >>> session.edit_text("content", "Hello")
        True
        >>> full_res = session.export()
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        viewport_size: Tuple[int, int] = (DEFAULT_VIEWPORT_WIDTH, DEFAULT_VIEWPORT_HEIGHT),
    ):
        self.config = config or EditorConfig()
        self.source: Optional[SourceImage] = None
        self.orientation = OrientationState()
        self.filters = FilterState()
        self.text_layers = TextLayerStack(self.config)
        self.red_eye = RedEyeToolState(brush_radius=self.config.default_brush_radius)
        self.retouches: List[RetouchOperation] = []
        self.viewport_size = tuple(viewport_size)
        self.surface: Optional[Any] = None

        self._listeners: List[RenderListener] = []
        self._defer_depth = 0
        self._render_pending = False
        # Filtered preview base, valid only while _base_source is self.source
        self._base_source: Optional[SourceImage] = None
        self._base_key: Optional[Tuple[Any, ...]] = None
        self._base: Optional[Any] = None

    # ------------------------------------------------------------------
    # State views
    # ------------------------------------------------------------------

    @property
    def has_image(self) -> bool:
        return self.source is not None and not self.source.is_empty

    def snapshot(self) -> RenderState:
        """Current state as a RenderState for the pure render functions."""
        return RenderState(
            source=self.source,
            orientation=self.orientation,
            filters=self.filters,
            layers=self.text_layers.layers,
            selected_index=self.text_layers.selected_index,
            retouches=self.retouches,
        )

    @property
    def preview_limits(self) -> Tuple[int, int]:
        width, height = self.viewport_size
        return viewport_limits(width, height, self.config.viewport_padding)

    @property
    def preview_size(self) -> Tuple[int, int]:
        return preview_size(self.snapshot(), *self.preview_limits)

    @property
    def export_size(self) -> Tuple[int, int]:
        return export_size(self.snapshot())

    @property
    def render_scale(self) -> float:
        return render_scale(self.export_size[0], self.preview_size[0])

    def filter_labels(self) -> Dict[str, str]:
        return {
            name: filter_pipeline.format_filter_value(name, getattr(self.filters, name))
            for name in FILTER_ORDER
        }

    # ------------------------------------------------------------------
    # Rendering and listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: RenderListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: RenderListener) -> bool:
        if listener in self._listeners:
            self._listeners.remove(listener)
            return True
        return False

    @contextmanager
    def deferred_render(self) -> Iterator["EditSession"]:
        """Coalesce the renders requested inside the block into one."""
        self._defer_depth += 1
        try:
            yield self
        finally:
            self._defer_depth -= 1
            if self._defer_depth == 0 and self._render_pending:
                self._render_pending = False
                self.render()

    def request_render(self) -> None:
        if self._defer_depth > 0:
            self._render_pending = True
            return
        self.render()

    def _filtered_base(self, size: Tuple[int, int]) -> Any:
        key = (self.orientation, self.filters.as_tuple(), size)
        if self._base_source is not self.source or key != self._base_key:
            self._base = render_base(self.source, self.orientation, self.filters, size)
            self._base_source = self.source
            self._base_key = key
        return self._base

    def _clear_base_cache(self) -> None:
        self._base_source = None
        self._base_key = None
        self._base = None

    def render(self) -> Optional[Any]:
        """
        Re-render the preview and notify listeners.

        Returns:
            The preview surface, or None without an image
        """
        if not self.has_image:
            logger.debug("Render skipped: no image loaded")
            self.surface = None
            return None

        size = self.preview_size
        if size[0] <= 0 or size[1] <= 0:
            logger.debug(f"Render skipped: empty preview for viewport {self.viewport_size}")
            self.surface = None
            return None

        self.surface = compose_surface(
            self._filtered_base(size), self.snapshot(), 1.0, True, self.config
        )

        event = RenderEvent(
            surface=self.surface,
            layer_labels=tuple(self.text_layers.layer_labels()),
            selected_index=self.text_layers.selected_index,
            selected_fields=self.text_layers.selected_fields(),
            filter_labels=self.filter_labels(),
            red_eye_active=self.red_eye.active,
        )
        for listener in list(self._listeners):
            listener(event)
        return self.surface

    # ------------------------------------------------------------------
    # Image and viewport
    # ------------------------------------------------------------------

    def load_image(self, source: Optional[SourceImage]) -> bool:
        """
        Replace the source image.

        Orientation and recorded retouches are reset; filters and text layers
        are kept. None (an ignored non-image input) leaves the session as is.
        """
        if source is None:
            return False

        self.source = source
        self.orientation = OrientationState()
        self.retouches.clear()
        self._clear_base_cache()
        logger.info(f"Session image set ({source.width}x{source.height})")
        self.request_render()
        return True

    def set_viewport(self, width: int, height: int) -> None:
        """Update the container size the preview is fitted into."""
        self.viewport_size = (int(width), int(height))
        self.request_render()

    # ------------------------------------------------------------------
    # Orientation
    # ------------------------------------------------------------------

    def _set_orientation(self, orientation: OrientationState) -> None:
        self.orientation = orientation
        logger.debug(f"Orientation now {orientation}")
        self.request_render()

    def rotate_left(self) -> None:
        self._set_orientation(geometry.rotate_left(self.orientation))

    def rotate_right(self) -> None:
        self._set_orientation(geometry.rotate_right(self.orientation))

    def flip_horizontal(self) -> None:
        self._set_orientation(geometry.toggle_flip_horizontal(self.orientation))

    def flip_vertical(self) -> None:
        self._set_orientation(geometry.toggle_flip_vertical(self.orientation))

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def set_filter(self, name: str, value: float) -> None:
        filter_pipeline.set_filter(self.filters, name, value)
        self.request_render()

    def apply_preset(self, preset_name: str) -> bool:
        applied = filter_pipeline.apply_preset(self.filters, preset_name)
        if applied:
            self.request_render()
        return applied

    def reset_filters(self) -> None:
        filter_pipeline.reset_filters(self.filters)
        self.request_render()

    # ------------------------------------------------------------------
    # Text layers
    # ------------------------------------------------------------------

    def add_text(self) -> int:
        index = self.text_layers.add_layer()
        self.request_render()
        return index

    def select_text(self, index: Optional[int]) -> bool:
        selected = self.text_layers.select_layer(index)
        if selected:
            self.request_render()
        return selected

    def edit_text(self, field_name: str, value: Any) -> bool:
        updated = self.text_layers.update_selected(field_name, value)
        if updated:
            self.request_render()
        return updated

    def delete_text(self, index: int) -> bool:
        deleted = self.text_layers.delete_layer(index)
        if deleted:
            self.request_render()
        return deleted

    def hit_test(self, px: float, py: float) -> Optional[int]:
        """Top-most text layer under a preview point."""
        return self.text_layers.layer_at_point(px, py, self.preview_size)

    # ------------------------------------------------------------------
    # Pointer and red-eye tool
    # ------------------------------------------------------------------

    def toggle_red_eye_tool(self, active: Optional[bool] = None) -> bool:
        """
        Switch the red-eye brush on or off (toggle when active is None).

        Turning the brush on deselects any text layer.

        Returns:
            The new active flag
        """
        self.red_eye.active = (not self.red_eye.active) if active is None else bool(active)
        if self.red_eye.active:
            self.text_layers.select_layer(None)
        logger.debug(f"Red-eye tool {'on' if self.red_eye.active else 'off'}")
        self.request_render()
        return self.red_eye.active

    def set_brush_radius(self, radius: float) -> float:
        self.red_eye.brush_radius = max(1.0, float(radius))
        return self.red_eye.brush_radius

    def remove_red_eye(self, px: float, py: float) -> bool:
        """
        Record a red-eye correction at a preview point and re-render.

        The retouch is kept in source coordinates, so it survives later
        filter and orientation changes and is replayed on export.
        """
        if not self.has_image:
            logger.warning("Red-eye removal requested without an image")
            return False

        size = self.preview_size
        if size[0] <= 0 or size[1] <= 0:
            return False

        op = retouch_from_click(
            px,
            py,
            self.red_eye.brush_radius,
            size,
            self.orientation,
            (self.source.width, self.source.height),
        )
        self.retouches.append(op)
        logger.debug(f"Recorded retouch {op}")
        self.request_render()
        return True

    def clear_retouches(self) -> None:
        self.retouches.clear()
        self.request_render()

    def handle_pointer(self, px: float, py: float) -> Optional[str]:
        """
        Route a click on the preview.

        The red-eye brush takes priority; otherwise the selected text layer is
        moved to the click.

        Returns:
            'red-eye', 'position', or None if the click did nothing
        """
        if not self.has_image:
            logger.warning(f"Pointer at ({px}, {py}) ignored: no image loaded")
            return None

        if self.red_eye.active:
            return "red-eye" if self.remove_red_eye(px, py) else None

        width, height = self.preview_size
        if self.text_layers.position_from_pointer(px, py, width, height, self.red_eye.active):
            self.request_render()
            return "position"
        return None

    # ------------------------------------------------------------------
    # Reset and export
    # ------------------------------------------------------------------

    def reset_all(self) -> None:
        """Default filters and orientation; no layers, retouches or active brush."""
        filter_pipeline.reset_filters(self.filters)
        self.orientation = OrientationState()
        self.text_layers.clear()
        self.retouches.clear()
        self.red_eye.active = False
        logger.debug("Session reset")
        self.request_render()

    def export(self) -> Optional[Any]:
        """
        Render at full resolution.

        Returns:
            RGBA PIL Image, or None without an image
        """
        if not self.has_image:
            logger.warning("Export requested without an image")
            return None
        return render_export(self.snapshot(), self.preview_size[0], self.config)

    def export_to(self, output_dir: Path) -> Optional[Path]:
        """Render at full resolution and save to output_dir."""
        image = self.export()
        if image is None:
            return None
        return save_export(
            image, Path(output_dir), self.config.export_filename, self.config.export_format
        )
