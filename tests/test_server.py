"""Tests for notifymcp.server module."""

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from notifymcp.config import Config, ServerConfig
from notifymcp.notifier import NotifierError
from notifymcp.server import NotificationService, build_server


def _service(notifier, strict=False, cwd=None):
    config = Config(server=ServerConfig(compatibility="strict" if strict else "canonical"))
    return NotificationService(notifier, config, cwd=cwd)


@pytest.mark.asyncio
async def test_send_notification_scenario_a(make_notifier):
    notifier = make_notifier()
    text = await _service(notifier).call_tool(
        "send_notification", {"title": "Build", "message": "Done", "sound": "none"}
    )

    assert text == 'Notification sent successfully: "Build"'
    assert notifier.calls[0].sound is False


@pytest.mark.asyncio
async def test_send_simple_notification_default_sound(make_notifier):
    notifier = make_notifier()
    text = await _service(notifier).call_tool("send_simple_notification", {"title": "Ping"})

    assert text == 'Notification sent successfully: "Ping"'
    assert notifier.calls[0].sound is True
    assert notifier.calls[0].message == ""


@pytest.mark.asyncio
async def test_wait_timeout_scenario_c(make_notifier):
    notifier = make_notifier(events=[("timeout", None), ("click", None)])
    text = await _service(notifier).call_tool("send_notification", {"title": "Alert", "wait": True})
    assert text == 'Notification timed out: "Alert"'


@pytest.mark.asyncio
async def test_notification_center_failure_is_text(make_notifier):
    """Delivery failures come back as advisory text by default."""
    notifier = make_notifier(error=NotifierError("Notification Center unavailable"))
    text = await _service(notifier).call_tool("send_notification", {"title": "t"})

    assert "System Settings" in text
    assert "Focus" in text


@pytest.mark.asyncio
async def test_failure_raises_in_strict_mode(make_notifier):
    notifier = make_notifier(error=NotifierError("Notification Center unavailable"))
    with pytest.raises(McpError) as exc_info:
        await _service(notifier, strict=True).call_tool(
            "send_simple_notification", {"title": "t", "message": "m"}
        )
    assert exc_info.value.error.code == types.INTERNAL_ERROR
    assert "Failed to send notification" in exc_info.value.error.message


@pytest.mark.asyncio
async def test_strict_mode_requires_message(make_notifier):
    with pytest.raises(McpError) as exc_info:
        await _service(make_notifier(), strict=True).call_tool("send_notification", {"title": "t"})
    assert exc_info.value.error.code == types.INVALID_PARAMS


@pytest.mark.asyncio
async def test_strict_mode_simple_tool_requires_message(make_notifier):
    with pytest.raises(McpError) as exc_info:
        await _service(make_notifier(), strict=True).call_tool(
            "send_simple_notification", {"title": "Ping"}
        )
    assert exc_info.value.error.code == types.INVALID_PARAMS


@pytest.mark.asyncio
async def test_action_label_with_comma_rejected(make_notifier):
    notifier = make_notifier()
    with pytest.raises(McpError) as exc_info:
        await _service(notifier).call_tool(
            "send_notification", {"title": "t", "actions": ["Yes, please"]}
        )
    assert exc_info.value.error.code == types.INVALID_PARAMS
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_unknown_tool_scenario_e(make_notifier):
    notifier = make_notifier()
    with pytest.raises(McpError) as exc_info:
        await _service(notifier).call_tool("send_sms", {"title": "t"})

    assert exc_info.value.error.code == types.METHOD_NOT_FOUND
    assert exc_info.value.error.message == "Unknown tool: send_sms"
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_missing_arguments(make_notifier):
    """Absent arguments are rejected before routing."""
    with pytest.raises(McpError) as exc_info:
        await _service(make_notifier()).call_tool("send_sms", None)
    assert exc_info.value.error.code == types.INVALID_PARAMS


@pytest.mark.asyncio
async def test_invalid_sound_rejected_before_delivery(make_notifier):
    notifier = make_notifier()
    with pytest.raises(McpError) as exc_info:
        await _service(notifier).call_tool("send_notification", {"title": "t", "sound": "Trumpet"})
    assert exc_info.value.error.code == types.INVALID_PARAMS
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_relative_icon_uses_service_cwd(make_notifier, tmp_path):
    notifier = make_notifier()
    await _service(notifier, cwd=str(tmp_path)).call_tool(
        "send_notification", {"title": "t", "icon": "./img.png"}
    )
    assert notifier.calls[0].icon == str(tmp_path / "img.png")


@pytest.mark.asyncio
async def test_call_tool_request_handler_returns_text(make_notifier):
    server = build_server(_service(make_notifier(events=[("click", None)])))
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(
            name="send_notification", arguments={"title": "Hi", "wait": True}
        ),
    )

    result = await handler(request)

    content = result.root.content
    assert len(content) == 1
    assert content[0].type == "text"
    assert content[0].text == 'Notification clicked: "Hi"'


@pytest.mark.asyncio
async def test_call_tool_request_handler_raises_protocol_error(make_notifier):
    server = build_server(_service(make_notifier()))
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name="send_sms", arguments={}),
    )

    with pytest.raises(McpError) as exc_info:
        await handler(request)
    assert exc_info.value.error.code == types.METHOD_NOT_FOUND


def test_list_tools_twice_identical(make_notifier):
    service = _service(make_notifier())
    assert service.list_tools() == service.list_tools()
