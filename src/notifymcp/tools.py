"""Tool descriptors exposed over MCP.

Descriptors are built once and never mutated; listing them twice yields
identical data.
"""

import functools
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

import jsonschema

# Available macOS notification sounds
MACOS_SOUNDS = (
    "Basso",
    "Blow",
    "Bottle",
    "Frog",
    "Funk",
    "Glass",
    "Hero",
    "Morse",
    "Ping",
    "Pop",
    "Purr",
    "Sosumi",
    "Submarine",
    "Tink",
    "default",
)

# "none" is caller-facing only; it means silence
SOUND_CHOICES = (*MACOS_SOUNDS, "none")

SEND_NOTIFICATION = "send_notification"
SEND_SIMPLE_NOTIFICATION = "send_simple_notification"


@dataclass(frozen=True)
class OperationDescriptor:
    """One named, schema-described tool."""

    name: str
    description: str
    input_schema: Mapping[str, Any]

    def schema_dict(self) -> dict[str, Any]:
        """Return a plain (mutable) deep copy of the input schema."""
        return _thaw(self.input_schema)


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _send_notification_schema(strict: bool) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "title": {
                "type": "string",
                "description": "The notification title",
                "minLength": 1,
            },
            "message": {
                "type": "string",
                "description": "The notification message body",
            },
            "subtitle": {
                "type": "string",
                "description": "Optional subtitle for the notification",
            },
            "sound": {
                "type": "string",
                "description": (
                    f"Notification sound. Can be: {', '.join(MACOS_SOUNDS)}, or 'none' for silent"
                ),
                "enum": list(SOUND_CHOICES),
            },
            "icon": {
                "type": "string",
                "description": (
                    "Path to an icon image file (relative paths resolve against the server's cwd)"
                ),
            },
            "contentImage": {
                "type": "string",
                "description": "Path to an image to display in the notification body (macOS 10.9+)",
            },
            "wait": {
                "type": "boolean",
                "description": "Wait for user interaction with the notification",
                "default": False,
            },
            "timeout": {
                "type": "number",
                "description": "Timeout in seconds (default: 10)",
                "default": 10,
            },
            "closeLabel": {
                "type": "string",
                "description": "Label for the close button (macOS only)",
            },
            "actions": {
                "type": "array",
                "description": "Action buttons for the notification (macOS 10.9+)",
                "items": {
                    "type": "string",
                    # labels are passed to the binary comma-separated
                    "pattern": "^[^,]*$",
                },
                "maxItems": 2,
            },
            "reply": {
                "type": "boolean",
                "description": "Enable reply functionality (macOS 10.9+)",
                "default": False,
            },
        },
        "required": ["title", "message"] if strict else ["title"],
    }


def _send_simple_notification_schema(strict: bool) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "title": {
                "type": "string",
                "description": "The notification title",
                "minLength": 1,
            },
            "message": {
                "type": "string",
                "description": "The notification message",
            },
            "sound": {
                "type": "boolean",
                "description": "Play the default notification sound",
                "default": True,
            },
        },
        "required": ["title", "message"] if strict else ["title"],
    }


@functools.cache
def build_tools(strict: bool = False) -> tuple[OperationDescriptor, ...]:
    """Build the tool descriptors.

    Args:
        strict: Use the stricter compatibility schemas (message required)

    Returns:
        The descriptors, in listing order. Cached, so every call returns the
        same objects.
    """
    return (
        OperationDescriptor(
            name=SEND_NOTIFICATION,
            description="Send a macOS notification with customizable options",
            input_schema=_freeze(_send_notification_schema(strict)),
        ),
        OperationDescriptor(
            name=SEND_SIMPLE_NOTIFICATION,
            description="Send a simple notification with just title and message",
            input_schema=_freeze(_send_simple_notification_schema(strict)),
        ),
    )


def get_tool(name: str, strict: bool = False) -> OperationDescriptor | None:
    """Look up a descriptor by name."""
    for tool in build_tools(strict):
        if tool.name == name:
            return tool
    return None


def validate_arguments(tool: OperationDescriptor, arguments: Mapping[str, Any]) -> None:
    """Validate arguments against a tool's input schema.

    Raises:
        jsonschema.ValidationError: if the arguments don't match
    """
    jsonschema.validate(dict(arguments), tool.schema_dict())
