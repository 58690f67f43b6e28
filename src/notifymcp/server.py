"""MCP server exposing macOS notifications as tools.

NotificationService does the routing and validation and is independent of
the transport; build_server() wires it into an MCP low-level Server and
serve() runs that over stdio.

Errors that are the caller's fault (missing arguments, schema violations,
unknown tool names) are raised as MCP protocol errors. Delivery failures
are returned as advisory text, unless the server runs in "strict"
compatibility mode, where they become InternalError.
"""

import asyncio
import os
from collections.abc import Awaitable, Callable
from typing import Any

import jsonschema
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from .config import Config
from .driver import Failed, Notifier, Outcome, deliver
from .log import get_logger
from .notifier import TerminalNotifier
from .options import NotificationRequest, normalize, normalize_simple
from .results import format_outcome
from .tools import (
    SEND_NOTIFICATION,
    SEND_SIMPLE_NOTIFICATION,
    OperationDescriptor,
    build_tools,
    get_tool,
    validate_arguments,
)

_log = get_logger("server")


def _error(code: int, message: str) -> McpError:
    return McpError(types.ErrorData(code=code, message=message))


class NotificationService:
    """Route tool calls to their handlers."""

    def __init__(self, notifier: Notifier, config: Config | None = None, cwd: str | None = None):
        self.notifier = notifier
        self.config = config or Config()
        # relative icon paths resolve against this (process cwd when None)
        self.cwd = cwd
        self._handlers: dict[str, Callable[[dict[str, Any]], Awaitable[str]]] = {
            SEND_NOTIFICATION: self._send_notification,
            SEND_SIMPLE_NOTIFICATION: self._send_simple_notification,
        }

    @property
    def strict(self) -> bool:
        return self.config.server.strict

    def list_tools(self) -> tuple[OperationDescriptor, ...]:
        return build_tools(self.strict)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> str:
        """Run a tool and return its result text.

        Raises:
            McpError: INVALID_PARAMS, METHOD_NOT_FOUND, or (strict mode only)
                INTERNAL_ERROR
        """
        if arguments is None:
            raise _error(types.INVALID_PARAMS, "No arguments provided")

        tool = get_tool(name, self.strict)
        handler = self._handlers.get(name)
        if tool is None or handler is None:
            raise _error(types.METHOD_NOT_FOUND, f"Unknown tool: {name}")

        try:
            validate_arguments(tool, arguments)
        except jsonschema.ValidationError as e:
            raise _error(types.INVALID_PARAMS, f"Invalid arguments for {name}: {e.message}") from e

        _log.info("calling %s title=%r", name, arguments.get("title"))
        return await handler(arguments)

    async def _send_notification(self, arguments: dict[str, Any]) -> str:
        request = NotificationRequest.from_arguments(arguments)
        options = normalize(
            request, cwd=self.cwd, default_timeout=self.config.notifier.default_timeout
        )
        outcome = await deliver(options, self.notifier)
        return self._result_text(outcome, request.title)

    async def _send_simple_notification(self, arguments: dict[str, Any]) -> str:
        options = normalize_simple(arguments, default_timeout=self.config.notifier.default_timeout)
        outcome = await deliver(options, self.notifier)
        return self._result_text(outcome, options.title)

    def _result_text(self, outcome: Outcome, title: str) -> str:
        _log.info("outcome for %r: %r", title, outcome)
        if isinstance(outcome, Failed) and self.strict:
            raise _error(types.INTERNAL_ERROR, f"Failed to send notification: {outcome.reason}")
        return format_outcome(outcome, title)


def build_server(service: NotificationService) -> Server:
    """Create the MCP server for a service."""
    config = service.config.server
    server = Server(config.name, version=config.version)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=t.name, description=t.description, inputSchema=t.schema_dict())
            for t in service.list_tools()
        ]

    # Registered directly (not via @server.call_tool()) so McpError reaches
    # the client as a JSON-RPC error instead of an isError tool result.
    async def _call_tool(req: types.CallToolRequest) -> types.ServerResult:
        text = await service.call_tool(req.params.name, req.params.arguments)
        return types.ServerResult(
            types.CallToolResult(content=[types.TextContent(type="text", text=text)])
        )

    server.request_handlers[types.CallToolRequest] = _call_tool
    return server


async def serve(config: Config) -> None:
    """Serve the notification tools over stdin/stdout until EOF."""
    notifier = TerminalNotifier(binary=config.notifier.binary, sender=config.notifier.sender)
    service = NotificationService(notifier, config, cwd=os.getcwd())
    server = build_server(service)

    _log.info("%s MCP server running on stdio", config.server.name)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run(config: Config) -> None:
    asyncio.run(serve(config))
