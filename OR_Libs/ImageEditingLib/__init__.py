"""
ImageEditingLib - Core image editing functionality

This module provides the data models, orientation geometry, filter stack,
text overlay layers and red-eye retouching used by the Open Retouch project.
"""

from OR_Libs.ImageEditingLib.image_models import (
    FilterState,
    OrientationState,
    RedEyeToolState,
    RetouchOperation,
    RgbaColor,
    SourceImage,
    TextLayer,
)
from OR_Libs.ImageEditingLib.image_editing_ops import (
    export_png_bytes,
    is_image_content_type,
    load_source_from_bytes,
    load_source_image,
    save_export,
)
from OR_Libs.ImageEditingLib.geometry import (
    DrawInstructions,
    apply_orientation,
    display_size,
    draw_instructions,
    oriented_size,
    rotate_left,
    rotate_right,
    toggle_flip_horizontal,
    toggle_flip_vertical,
)
from OR_Libs.ImageEditingLib.filter_pipeline import (
    apply_filter_stack,
    apply_preset,
    build_filter_stack,
    filter_string,
    format_filter_value,
    reset_filters,
    set_filter,
)
from OR_Libs.ImageEditingLib.text_overlay import (
    TextLayerStack,
    draw_text_layers,
    text_metrics,
)
from OR_Libs.ImageEditingLib.red_eye import (
    apply_red_eye_removal,
    is_red_eye_candidate,
)

__all__ = [
    "FilterState",
    "OrientationState",
    "RedEyeToolState",
    "RetouchOperation",
    "RgbaColor",
    "SourceImage",
    "TextLayer",
    "export_png_bytes",
    "is_image_content_type",
    "load_source_from_bytes",
    "load_source_image",
    "save_export",
    "DrawInstructions",
    "apply_orientation",
    "display_size",
    "draw_instructions",
    "oriented_size",
    "rotate_left",
    "rotate_right",
    "toggle_flip_horizontal",
    "toggle_flip_vertical",
    "apply_filter_stack",
    "apply_preset",
    "build_filter_stack",
    "filter_string",
    "format_filter_value",
    "reset_filters",
    "set_filter",
    "TextLayerStack",
    "draw_text_layers",
    "text_metrics",
    "apply_red_eye_removal",
    "is_red_eye_candidate",
]
