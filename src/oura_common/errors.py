from __future__ import annotations

from enum import Enum

from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    ErrorData,
)

REDACT_TOKEN = "***redacted***"

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class ErrorKind(str, Enum):
    METHOD_NOT_FOUND = "MethodNotFound"
    INVALID_PARAMS = "InvalidParams"
    INVALID_REQUEST = "InvalidRequest"
    INTERNAL_ERROR = "InternalError"

    @property
    def code(self) -> int:
        return _JSONRPC_CODES[self]


_JSONRPC_CODES = {
    ErrorKind.METHOD_NOT_FOUND: METHOD_NOT_FOUND,
    ErrorKind.INVALID_PARAMS: INVALID_PARAMS,
    ErrorKind.INVALID_REQUEST: INVALID_REQUEST,
    ErrorKind.INTERNAL_ERROR: INTERNAL_ERROR,
}


class GatewayError(McpError):
    """
    Structured tool failure: {"code": <JSON-RPC code>, "message": ...} plus the taxonomy kind.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(ErrorData(code=kind.code, message=message))
        self.kind = kind

    @property
    def message(self) -> str:
        return self.error.message


def gateway_error(kind: ErrorKind, message: str | None) -> GatewayError:
    return GatewayError(kind, message or GENERIC_ERROR_MESSAGE)
