"""MCP protocol bridge over the tool registry.

Uses the low-level `mcp` server so the advertised input schemas are exactly
the Pydantic schemas the registry validates against.
"""

from __future__ import annotations

from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager

from wincc_unified_mcp import __version__
from wincc_unified_mcp.agent.registry import ToolRegistry

SERVER_NAME = "WinCC Unified Extended"


def list_tool_definitions(registry: ToolRegistry) -> list[types.Tool]:
    return [
        types.Tool(
            name=spec.name,
            description=spec.description,
            inputSchema=spec.input_schema(),
        )
        for spec in registry.specs()
    ]


async def call_registry_tool(
    registry: ToolRegistry, name: str, arguments: dict[str, Any] | None
) -> list[types.TextContent]:
    text = await registry.invoke(name, arguments or {})
    return [types.TextContent(type="text", text=text)]


def build_mcp_server(registry: ToolRegistry) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return list_tool_definitions(registry)

    @server.call_tool()
    async def _call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        return await call_registry_tool(registry, name, arguments)

    return server


class StreamableHTTPEndpoint:
    """ASGI endpoint handing `/mcp` requests to a stateless session manager."""

    def __init__(self, registry: ToolRegistry) -> None:
        self.session_manager = StreamableHTTPSessionManager(
            app=build_mcp_server(registry),
            json_response=True,
            stateless=True,
        )

    async def __call__(self, scope: Any, receive: Any, send: Any) -> None:
        await self.session_manager.handle_request(scope, receive, send)
