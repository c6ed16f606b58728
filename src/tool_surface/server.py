"""Model Context Protocol server for the tool surface.

Registers the four tool names with an MCP ``Server`` and answers them over
stdio. Each call is delegated to ``ToolSurface.call``; its JSON result is
returned as a single text content item. Domain errors come back as tool
results flagged ``isError`` carrying the same JSON error object.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .tool_surface import ToolSurface

logger = logging.getLogger(__name__)

SERVER_NAME = "microtext-editor"


class ToolCallFailed(Exception):
    """Raised inside the call handler so the SDK marks the result as an error.

    The message is the JSON error object returned by ``ToolSurface.call``.
    """


def _to_text(result: Dict[str, Any]) -> str:
    return json.dumps(result, ensure_ascii=False, default=str)


def build_server(tools: ToolSurface) -> Server:
    """Create an MCP server whose tools delegate to ``tools``."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(
                name=definition["name"],
                description=definition["description"],
                inputSchema=definition["inputSchema"],
            )
            for definition in tools.tool_definitions()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        logger.debug(f"Tool call: {name}")
        # Interpreter calls block on HTTP
        result = await asyncio.to_thread(tools.call, name, arguments)
        if result.get("isError"):
            raise ToolCallFailed(_to_text(result))
        return [types.TextContent(type="text", text=_to_text(result))]

    return server


async def run_stdio(tools: ToolSurface) -> None:
    """Serve ``tools`` on stdin/stdout until the client disconnects."""
    server = build_server(tools)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Tool server ready")
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("Tool server stopped")


def serve(tools: ToolSurface) -> None:
    """Blocking entry point used by the ``serve-tools`` command."""
    asyncio.run(run_stdio(tools))
