"""MCP Protocol Server for the Render tools.

Exposes every registered Render tool to MCP clients over stdio, using
the official MCP Python SDK.

IMPORTANT: All logging MUST go to stderr, not stdout!
The MCP protocol uses stdout for JSON-RPC communication.
"""

import asyncio
import json
from typing import Any

from config import get_settings
from logging_config import get_logger, setup_logging

# Set up logging before the tool modules are imported
setup_logging("WARNING", use_stderr=True)

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

import render_tools  # noqa: F401  (registers tools)
from render_tools.client import RenderClient
from tool_registry import get_registry

# Reconfigure logging with actual settings
settings = get_settings()
setup_logging(settings.log_level, use_stderr=True)
logger = get_logger(__name__)

# Create the MCP server instance
mcp = Server("render-tools")


def get_tool_definitions() -> list[Tool]:
    """Build MCP tool definitions from the tool registry."""
    return [
        Tool(
            name=definition.name,
            description=definition.description,
            inputSchema=definition.json_schema(),
        )
        for definition in get_registry().list_tools()
    ]


async def execute_tool(name: str, arguments: dict[str, Any]) -> Any:
    """Execute the specified tool with the given arguments."""
    async with RenderClient() as client:
        return await get_registry().execute(name, arguments, client)


# -----------------------------------------------------------------------------
# MCP Protocol Handlers
# -----------------------------------------------------------------------------

@mcp.list_tools()
async def list_tools() -> list[Tool]:
    """Return the list of available tools."""
    return get_tool_definitions()


@mcp.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Execute a tool and return the result."""
    logger.info(f"Calling tool: {name}")

    try:
        result = await execute_tool(name, arguments or {})
        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]

    except Exception as e:
        logger.error(f"Tool execution failed: {name}", exc_info=True)
        return [TextContent(
            type="text",
            text=json.dumps({
                "success": False,
                "error": str(e)
            }, indent=2)
        )]


# -----------------------------------------------------------------------------
# Main Entry Point
# -----------------------------------------------------------------------------

async def main():
    """Run the MCP server using stdio transport."""
    logger.info("Starting Render tools MCP server (stdio transport)")

    async with stdio_server() as (read_stream, write_stream):
        await mcp.run(
            read_stream,
            write_stream,
            mcp.create_initialization_options()
        )


if __name__ == "__main__":
    asyncio.run(main())
