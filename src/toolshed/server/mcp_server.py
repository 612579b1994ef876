from __future__ import annotations

import logging
from typing import Any

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from .. import __version__
from ..kb.store import KnowledgeStore
from ..tools import ToolRegistry


logger = logging.getLogger(__name__)

SERVER_NAME = "llm-toolshed-mcp-server"


class ToolCallFailed(RuntimeError):
    """Raised inside the MCP tool handler so the SDK marks the result as an error."""


def create_server(registry: ToolRegistry) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return [
            types.Resource(uri=r.uri, name=r.name, description=r.description, mimeType=r.mime_type)
            for r in registry.list_resources()
        ]

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
        kb = await registry.store.aload()
        res = registry.read_resource(str(uri), kb=kb)
        return [ReadResourceContents(content=res.text, mime_type=res.mime_type)]

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=t.name, description=t.description, inputSchema=t.input_schema)
            for t in registry.list_tools()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        kb = await registry.store.aload()
        resp = registry.call_tool(name, arguments or {}, kb=kb)
        if resp.is_error:
            raise ToolCallFailed(resp.text)
        return [types.TextContent(type="text", text=resp.text)]

    return server


async def serve_stdio(registry: ToolRegistry) -> None:
    server = create_server(registry)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("LLM Toolshed MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run(data_path: str) -> None:
    registry = ToolRegistry(KnowledgeStore(data_path))
    anyio.run(serve_stdio, registry)
