from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from mcp.types import CallToolResult, TextContent, Tool
from pydantic import ValidationError

from oura_common.errors import ErrorKind, gateway_error
from oura_common.tooling import InstrumentConfig, instrument_dispatch
from oura_mcp import formatters
from oura_mcp.schemas import (
    ACTIVITY_TOOL,
    HEART_RATE_TOOL,
    READINESS_TOOL,
    SLEEP_TOOL,
    TOOLS,
    parse_date_range,
    validation_messages,
)
from oura_sources.client import OuraClient


logger = logging.getLogger(__name__)

MCP_CLIENT_ID = os.getenv("MCP_CLIENT_ID", "oura-mcp")

INVALID_API_KEY_MESSAGE = "Invalid Oura API key. Check your OURA_API_KEY environment variable."

Formatter = Callable[[Any, str, Optional[str]], str]


@dataclass(frozen=True)
class ToolRoute:
    client_method: str
    formatter: Formatter


ROUTES: dict[str, ToolRoute] = {
    SLEEP_TOOL: ToolRoute("get_daily_sleep", formatters.format_sleep),
    READINESS_TOOL: ToolRoute("get_daily_readiness", formatters.format_readiness),
    ACTIVITY_TOOL: ToolRoute("get_daily_activity", formatters.format_activity),
    HEART_RATE_TOOL: ToolRoute("get_heart_rate", formatters.format_heart_rate),
}


def _upstream_status(exc: BaseException) -> int | None:
    return getattr(getattr(exc, "response", None), "status_code", None)


def text_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)])


class OuraGateway:
    """
    Tool catalog + dispatch for the Oura tools.

    The gateway keeps no per-request state; the client is shared read-only.
    Every failure leaves as a GatewayError (MethodNotFound, InvalidParams,
    InvalidRequest or InternalError).
    """

    def __init__(self, client: OuraClient) -> None:
        self.client = client

    def list_tools(self) -> list[Tool]:
        return list(TOOLS)

    @instrument_dispatch(InstrumentConfig(kind="tool", client_id=MCP_CLIENT_ID))
    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> CallToolResult:
        route = ROUTES.get(name)
        if route is None:
            raise gateway_error(ErrorKind.METHOD_NOT_FOUND, f"Unknown tool: {name}")

        try:
            args = parse_date_range(arguments)
        except ValidationError as e:
            raise gateway_error(
                ErrorKind.INVALID_PARAMS,
                "Invalid parameters: " + ", ".join(validation_messages(e)),
            ) from e

        fetch = getattr(self.client, route.client_method)
        try:
            payload = await asyncio.to_thread(fetch, args.start_date, args.end_date)
        except Exception as e:
            if _upstream_status(e) == 401:
                raise gateway_error(ErrorKind.INVALID_REQUEST, INVALID_API_KEY_MESSAGE) from e
            raise gateway_error(ErrorKind.INTERNAL_ERROR, str(e)) from e

        try:
            text = route.formatter(payload, args.start_date, args.end_date)
        except Exception as e:
            logger.exception("Formatting %s response failed", name)
            raise gateway_error(ErrorKind.INTERNAL_ERROR, str(e)) from e

        return text_result(text)
