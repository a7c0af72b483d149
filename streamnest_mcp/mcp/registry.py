"""Tool registry for managing MCP tools."""

import logging
from typing import Any, Callable, Awaitable

from streamnest_mcp.exceptions import UnknownToolError
from streamnest_mcp.mcp.models import Tool

logger = logging.getLogger(__name__)

# Type alias for tool handlers: arguments in, JSON value out
ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]


class ToolDefinition:
    """A registered tool with its metadata and handler."""

    def __init__(
        self,
        name: str,
        description: str,
        input_schema: dict[str, Any],
        handler: ToolHandler,
    ):
        self.name = name
        self.description = description
        self.input_schema = input_schema
        self.handler = handler

    def to_mcp_tool(self) -> Tool:
        """Convert to MCP Tool model for protocol responses."""
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


class ToolRegistry:
    """Registry of the tools exposed over tools/list and tools/call."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}

    def register(
        self,
        name: str,
        description: str,
        input_schema: dict[str, Any],
        handler: ToolHandler,
    ) -> None:
        """Register a tool with the registry."""
        if name in self._tools:
            logger.warning(f"Tool '{name}' already registered, overwriting")
        self._tools[name] = ToolDefinition(
            name=name,
            description=description,
            input_schema=input_schema,
            handler=handler,
        )
        logger.debug(f"Registered tool: {name}")

    def get(self, name: str) -> ToolDefinition | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        """List all registered tools as MCP Tool models."""
        return [tool.to_mcp_tool() for tool in self._tools.values()]

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """
        Call a tool by name with the given arguments.

        Raises:
            UnknownToolError: If no tool is registered under name.
            GatewayError: Whatever the tool itself raises.
        """
        tool = self.get(name)
        if tool is None:
            raise UnknownToolError(name)
        return await tool.handler(arguments)

    @property
    def tool_count(self) -> int:
        """Return the number of registered tools."""
        return len(self._tools)
