"""
Tool registry errors.

All of these signal caller misuse (bad registration, unknown tool,
malformed context, invalid parameters) and are raised before any handler
runs. Runtime failures of a handler never surface as exceptions.
"""

from __future__ import annotations


class ToolRegistryError(Exception):
    """Error in tool registry operations."""

    pass


class ToolDefinitionError(ToolRegistryError):
    """Raised when a tool is rejected at registration or build time."""

    pass


class ToolNotFoundError(ToolRegistryError):
    def __init__(self, tool_name: str, available: list[str] | None = None):
        super().__init__(f"Tool '{tool_name}' not found in registry")
        self.tool_name = tool_name
        self.available = available or []


class InvalidExecutionContextError(ToolRegistryError):
    pass


class ToolParameterError(ToolRegistryError):
    """Raised when parameters fail the tool's schema."""

    def __init__(self, tool_name: str, errors: list[str] | tuple[str, ...]):
        super().__init__(f"Invalid parameters for tool '{tool_name}': {', '.join(errors)}")
        self.tool_name = tool_name
        self.errors = list(errors)


class NoHandlerError(ToolRegistryError):
    def __init__(self, tool_name: str, channel: str):
        super().__init__(
            f"No handler available for tool '{tool_name}' on channel '{channel}'"
        )
        self.tool_name = tool_name
        self.channel = channel
