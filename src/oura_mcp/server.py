from __future__ import annotations

import asyncio
import logging

from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolRequest, ServerResult, Tool

from oura_config.settings import api_base_url, init_runtime, require_api_key
from oura_mcp.gateway import OuraGateway
from oura_sources.client import OuraClient


logger = logging.getLogger(__name__)

SERVER_NAME = "oura-mcp"
SERVER_VERSION = "0.1.0"


def build_gateway(api_key: str) -> OuraGateway:
    return OuraGateway(OuraClient(api_key, base_url=api_base_url()))


def build_server(gateway: OuraGateway) -> Server:
    """Expose the gateway's catalog and dispatch through an MCP server.

    tools/call is registered as a raw request handler: arguments reach the
    gateway unvalidated, and a GatewayError leaves as a JSON-RPC error
    carrying its code instead of an isError text result.
    """
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def _list_tools() -> list[Tool]:
        return gateway.list_tools()

    async def _call_tool(req: CallToolRequest) -> ServerResult:
        result = await gateway.call_tool(req.params.name, req.params.arguments)
        return ServerResult(result)

    server.request_handlers[CallToolRequest] = _call_tool
    return server


async def serve_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Oura MCP server running")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    # Entry points (console_scripts) call main() directly, so runtime
    # initialization (dotenv + logging) happens here.
    init_runtime()
    api_key = require_api_key()
    server = build_server(build_gateway(api_key))
    try:
        asyncio.run(serve_stdio(server))
    except KeyboardInterrupt:
        logger.info("Oura MCP server stopped")
    except Exception:
        logger.exception("Fatal error")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
