"""MCP server entrypoint for the react_code_to_video tool.

Tool arguments are forwarded untouched to the registry, so type checks happen
only in the argument validator.

Run as:
    react-video-mcp
    python -m mcp_server
"""
import asyncio
import json
from typing import Any, Dict, List, Optional

import mcp.types as types
from loguru import logger
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from config import settings
from config.logging_config import configure_logging
from services.react_video import ToolRegistry, create_default_registry


def build_mcp_server(registry: ToolRegistry) -> Server:
    """Expose every registry tool over MCP, schemas published as-is."""
    server = Server(settings.SERVICE_NAME, version=settings.SERVICE_VERSION)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["inputSchema"],
            )
            for tool in registry.list_tools()
        ]

    # Arguments reach the validator untouched; it alone reports type errors
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        response = await registry.call_tool(name, arguments)
        return [types.TextContent(type="text", text=json.dumps(response))]

    return server


async def serve(server: Server) -> None:
    """Run ``server`` over stdio until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    logger.info(f"Starting {settings.SERVICE_NAME} {settings.SERVICE_VERSION} (stdio)")
    asyncio.run(serve(build_mcp_server(create_default_registry())))


if __name__ == "__main__":
    main()
