"""MCP method handlers for JSON-RPC requests."""

import logging
from typing import Any

from pydantic import ValidationError

from streamnest_mcp.config.loader import Settings
from streamnest_mcp.exceptions import GatewayError
from streamnest_mcp.mcp.models import (
    InitializeResult,
    ServerInfo,
    Capabilities,
    ToolsListResult,
    ToolCallParams,
    ToolCallResult,
)
from streamnest_mcp.mcp.registry import ToolRegistry
from streamnest_mcp.mcp.errors import METHOD_NOT_FOUND, INTERNAL_ERROR, make_error_data

logger = logging.getLogger(__name__)

# MCP protocol version we support
PROTOCOL_VERSION = "2024-11-05"


class MCPHandlers:
    """Handlers for MCP protocol methods."""

    def __init__(self, registry: ToolRegistry, settings: Settings):
        self.registry = registry
        self.settings = settings

    async def handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle the initialize request."""
        result = InitializeResult(
            protocolVersion=PROTOCOL_VERSION,
            capabilities=Capabilities(tools={}),
            serverInfo=ServerInfo(
                name=self.settings.server_name,
                version=self.settings.server_version,
            ),
        )
        return result.model_dump()

    async def handle_tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle the tools/list request."""
        tools = self.registry.list_tools()
        result = ToolsListResult(tools=tools)
        return result.model_dump()

    async def handle_tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        """
        Handle the tools/call request.

        Raises:
            ValidationError: If params do not carry a tool name.
            GatewayError: If the tool is unknown or fails.
        """
        call_params = ToolCallParams(**params)
        logger.info(f"Calling tool: {call_params.name}")
        value = await self.registry.call_tool(call_params.name, call_params.arguments)
        return ToolCallResult.from_value(value).model_dump()

    async def dispatch(
        self, method: str, params: dict[str, Any]
    ) -> tuple[Any | None, dict[str, Any] | None]:
        """
        Dispatch a method call to the appropriate handler.

        Returns (result, error) tuple. One will be None.
        """
        handlers = {
            "initialize": self.handle_initialize,
            "tools/list": self.handle_tools_list,
            "tools/call": self.handle_tools_call,
        }

        handler = handlers.get(method)
        if handler is None:
            return None, make_error_data(
                METHOD_NOT_FOUND, f"Method not found: {method}"
            )

        try:
            result = await handler(params)
            return result, None
        except GatewayError as e:
            logger.warning(f"Tool call failed ({type(e).__name__}): {e}")
            return None, make_error_data(INTERNAL_ERROR, data=str(e))
        except ValidationError as e:
            logger.warning(f"Invalid params for {method}: {e}")
            return None, make_error_data(
                INTERNAL_ERROR, data=f"Invalid parameters: {e.errors(include_url=False)}"
            )
        except Exception as e:
            logger.exception(f"Error handling method {method}")
            return None, make_error_data(INTERNAL_ERROR, data=str(e) or type(e).__name__)
