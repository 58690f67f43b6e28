"""Tests for notifymcp.tools module."""

import jsonschema
import pytest

from notifymcp.tools import (
    MACOS_SOUNDS,
    SOUND_CHOICES,
    build_tools,
    get_tool,
    validate_arguments,
)


def test_sounds_list():
    """14 named sounds plus default; none is an extra caller choice."""
    assert len(MACOS_SOUNDS) == 15
    assert MACOS_SOUNDS[-1] == "default"
    assert SOUND_CHOICES == (*MACOS_SOUNDS, "none")


def test_build_tools_names():
    names = [t.name for t in build_tools()]
    assert names == ["send_notification", "send_simple_notification"]


def test_build_tools_is_idempotent():
    """Listing twice returns identical descriptors."""
    first = [(t.name, t.description, t.schema_dict()) for t in build_tools()]
    second = [(t.name, t.description, t.schema_dict()) for t in build_tools()]
    assert first == second
    assert build_tools() is build_tools()


def test_schema_dict_is_a_copy():
    """Mutating a returned schema doesn't leak into the descriptor."""
    tool = get_tool("send_notification")
    schema = tool.schema_dict()
    schema["required"].append("subtitle")
    assert tool.schema_dict()["required"] == ["title"]


def test_sound_enum_in_schema():
    schema = get_tool("send_notification").schema_dict()
    assert schema["properties"]["sound"]["enum"] == list(SOUND_CHOICES)


def test_strict_schema_requires_message():
    canonical = get_tool("send_notification").schema_dict()
    strict = get_tool("send_notification", strict=True).schema_dict()
    assert canonical["required"] == ["title"]
    assert strict["required"] == ["title", "message"]


def test_get_tool_unknown():
    assert get_tool("send_sms") is None


def test_validate_rejects_unknown_sound():
    tool = get_tool("send_notification")
    with pytest.raises(jsonschema.ValidationError):
        validate_arguments(tool, {"title": "t", "sound": "Trumpet"})


def test_validate_rejects_three_actions():
    tool = get_tool("send_notification")
    with pytest.raises(jsonschema.ValidationError):
        validate_arguments(tool, {"title": "t", "actions": ["a", "b", "c"]})


def test_validate_rejects_missing_title():
    tool = get_tool("send_simple_notification")
    with pytest.raises(jsonschema.ValidationError):
        validate_arguments(tool, {"message": "hi"})


def test_validate_accepts_full_request():
    tool = get_tool("send_notification")
    validate_arguments(
        tool,
        {
            "title": "t",
            "message": "m",
            "sound": "none",
            "wait": True,
            "timeout": 5,
            "actions": ["Yes", "No"],
            "reply": True,
        },
    )


def test_validate_rejects_comma_in_action_label():
    """Labels are joined with commas for the binary, so a comma would split one."""
    tool = get_tool("send_notification")
    with pytest.raises(jsonschema.ValidationError):
        validate_arguments(tool, {"title": "t", "actions": ["Yes, please"]})


def test_simple_tool_message_required_only_in_strict_mode():
    canonical = get_tool("send_simple_notification").schema_dict()
    strict = get_tool("send_simple_notification", strict=True).schema_dict()
    assert canonical["required"] == ["title"]
    assert strict["required"] == ["title", "message"]
    validate_arguments(get_tool("send_simple_notification"), {"title": "Ping"})
