"""
SessionLib - Edit session state, rendering and control commands

This module holds the editing session, the preview/export render
coordinator and the registry that maps UI control events to session
operations.
"""

from OR_Libs.SessionLib.render_coordinator import (
    RenderState,
    render_export,
    render_preview,
    render_scale,
    render_surface,
)
from OR_Libs.SessionLib.edit_session import EditSession, RenderEvent
from OR_Libs.SessionLib.command_registry import (
    CommandRegistry,
    get_default_registry,
    register_default_commands,
)

__all__ = [
    "RenderState",
    "render_export",
    "render_preview",
    "render_scale",
    "render_surface",
    "EditSession",
    "RenderEvent",
    "CommandRegistry",
    "get_default_registry",
    "register_default_commands",
]
