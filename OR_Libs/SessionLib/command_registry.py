"""
Control Command Registry.

This module maps the control events a UI collaborator sends (button clicks,
slider moves, pointer clicks) to EditSession operations, so the UI can
forward events by name without knowing the session API.

Classes:
    CommandRegistry: Registry for command handlers

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_commands: Register all built-in control commands
"""

from typing import Any, Callable, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

# Type alias for handler function: handler(session, **payload)
CommandHandler = Callable[..., Any]


class CommandRegistry:
    """
    Registry for control command handlers.

    Example:
        >>> registry = get_default_registry()
        >>> registry.dispatch("set-filter", session, name="sepia", value=40)
        >>> registry.dispatch("pointer", session, x=120, y=88)
        'position'
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._handlers: Dict[str, CommandHandler] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    def register(
        self,
        command: str,
        handler: CommandHandler,
        description: str = "",
        parameters: Optional[List[str]] = None,
    ) -> None:
        """
        Register a command handler.

        Args:
            command: Unique event name (e.g., "rotate-left")
            handler: Callable invoked as handler(session, **payload)
            description: Human-readable description
            parameters: Payload keys the handler accepts

        Raises:
            ValueError: If command is empty or handler is not callable
            RuntimeError: If command is already registered
        """
        command = str(command).strip()

        if not command:
            raise ValueError("command cannot be empty")

        if not callable(handler):
            raise ValueError(f"handler must be callable, got {type(handler)}")

        if command in self._handlers:
            raise RuntimeError(
                f"Command '{command}' is already registered. "
                f"Use unregister() first to replace it."
            )

        self._handlers[command] = handler
        self._metadata[command] = {
            "description": str(description),
            "parameters": list(parameters) if parameters else [],
        }

        logger.debug(f"Registered handler for command: {command}")

    def unregister(self, command: str) -> bool:
        """
        Unregister a command handler.

        Returns:
            True if unregistered, False if command was not registered
        """
        command = str(command).strip()

        if command in self._handlers:
            del self._handlers[command]
            del self._metadata[command]
            logger.debug(f"Unregistered handler for command: {command}")
            return True

        return False

    def get_handler(self, command: str) -> CommandHandler:
        """
        Get the handler for a command.

        Raises:
            KeyError: If command is not registered
        """
        command = str(command).strip()

        if command not in self._handlers:
            available = ", ".join(self.list_commands())
            raise KeyError(
                f"No handler registered for command '{command}'. "
                f"Available commands: {available}"
            )

        return self._handlers[command]

    def has_command(self, command: str) -> bool:
        return str(command).strip() in self._handlers

    def dispatch(self, command: str, session: Any, **payload: Any) -> Any:
        """
        Run a command against a session.

        Args:
            command: Registered event name
            session: EditSession to operate on
            **payload: Event data passed to the handler

        Returns:
            Whatever the handler returns

        Raises:
            KeyError: If command is not registered
            ValueError: If the payload carries keys the command does not accept
        """
        handler = self.get_handler(command)
        accepted = self._metadata[str(command).strip()]["parameters"]
        unexpected = sorted(set(payload) - set(accepted))
        if unexpected:
            raise ValueError(
                f"Command '{command}' does not accept {', '.join(unexpected)}. "
                f"Accepted payload keys: {', '.join(accepted) or '(none)'}"
            )

        logger.debug(f"Dispatching {command} {payload}")
        return handler(session, **payload)

    def list_commands(self) -> List[str]:
        """Sorted list of registered command names."""
        return sorted(self._handlers.keys())

    def get_metadata(self, command: str) -> Dict[str, Any]:
        """
        Get metadata for a command.

        Raises:
            KeyError: If command is not registered
        """
        command = str(command).strip()

        if command not in self._metadata:
            raise KeyError(f"No metadata for command: {command}")

        meta = dict(self._metadata[command])
        meta["parameters"] = list(meta["parameters"])
        return meta


# Global singleton registry
_default_registry: Optional[CommandRegistry] = None


def get_default_registry() -> CommandRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers default commands.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = CommandRegistry()
        register_default_commands(_default_registry)

    return _default_registry


def _edit_text(session, field: str, value: Any) -> bool:
    return session.edit_text(field, value)


def _pointer(session, x: float, y: float) -> Optional[str]:
    return session.handle_pointer(x, y)


def _export(session, output_dir: Optional[str] = None) -> Any:
    if output_dir is None:
        return session.export()
    return session.export_to(output_dir)


def register_default_commands(registry: CommandRegistry) -> None:
    """
    Register the built-in control events.

    Args:
        registry: The registry to register handlers with
    """
    from OR_Libs.SessionLib.edit_session import EditSession

    commands = [
        ("rotate-left", EditSession.rotate_left, "Rotate a quarter turn counter-clockwise", []),
        ("rotate-right", EditSession.rotate_right, "Rotate a quarter turn clockwise", []),
        ("flip-horizontal", EditSession.flip_horizontal, "Mirror left to right", []),
        ("flip-vertical", EditSession.flip_vertical, "Mirror top to bottom", []),
        ("set-filter", EditSession.set_filter, "Set one filter parameter", ["name", "value"]),
        ("apply-preset", EditSession.apply_preset, "Apply a named filter preset", ["preset_name"]),
        ("reset-filters", EditSession.reset_filters, "Restore the identity filter", []),
        ("add-text", EditSession.add_text, "Add and select an empty text layer", []),
        ("select-text", EditSession.select_text, "Select a text layer (None to clear)", ["index"]),
        ("edit-text", _edit_text, "Change a field of the selected text layer", ["field", "value"]),
        ("delete-text", EditSession.delete_text, "Delete a text layer", ["index"]),
        ("pointer", _pointer, "Click on the preview surface", ["x", "y"]),
        ("toggle-red-eye-tool", EditSession.toggle_red_eye_tool, "Toggle or set the red-eye brush", ["active"]),
        ("set-brush-radius", EditSession.set_brush_radius, "Set the red-eye brush radius", ["radius"]),
        ("reset-all", EditSession.reset_all, "Reset filters, orientation, text and retouches", []),
        ("export", _export, "Render at full resolution, optionally saving it", ["output_dir"]),
    ]

    for command, handler, description, parameters in commands:
        registry.register(
            command=command,
            handler=handler,
            description=description,
            parameters=parameters,
        )

    logger.info("Registered default control commands")
