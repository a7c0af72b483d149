"""MCP (Model Context Protocol) implementation with JSON-RPC 2.0."""

from streamnest_mcp.mcp.models import (
    JsonRpcRequest,
    JsonRpcResponse,
    JsonRpcError,
    Tool,
    TextContent,
    ToolCallResult,
)
from streamnest_mcp.mcp.registry import ToolRegistry
from streamnest_mcp.mcp.errors import (
    PARSE_ERROR,
    METHOD_NOT_FOUND,
    INTERNAL_ERROR,
)

__all__ = [
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcError",
    "Tool",
    "TextContent",
    "ToolCallResult",
    "ToolRegistry",
    "PARSE_ERROR",
    "METHOD_NOT_FOUND",
    "INTERNAL_ERROR",
]
