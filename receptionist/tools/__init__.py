"""
Receptionist Tools.

Tools are named capabilities the agent can invoke from any channel.
Each tool has a mandatory default handler and optional per-channel
handlers; the registry validates, runs, times out and audits them.

Usage:
    tool = (
        ToolBuilder()
        .with_name("get_weather")
        .with_description("Current weather for a city")
        .with_parameters({
            "type": "object",
            "properties": {"location": {"type": "string"}},
            "required": ["location"],
        })
        .default(get_weather)
        .build()
    )

    registry = ToolRegistry(tool_store=ToolStore(InMemoryAuditBackend()))
    registry.register(tool)

    result = await registry.execute(
        "get_weather", {"location": "Boston"}, ExecutionContext(channel=Channel.SMS)
    )
"""

from .base import (
    DEFAULT_HANDLER,
    Channel,
    ChannelResponse,
    ExecutionContext,
    ToolDefinition,
    ToolHandler,
    ToolResult,
    channel_key,
)
from .builder import ToolBuilder
from .errors import (
    InvalidExecutionContextError,
    NoHandlerError,
    ToolDefinitionError,
    ToolNotFoundError,
    ToolParameterError,
    ToolRegistryError,
)
from .registry import APOLOGY_TEXT, ToolRegistry, ToolTimeoutError
from .schema import (
    ParameterSchema,
    PropertySchema,
    SchemaValidationResult,
    validate_parameters,
)
from .standard import (
    build_calendar_tool,
    build_send_sms_tool,
    create_calendar_tools,
    create_messaging_tools,
    create_standard_tools,
    find_open_slots,
)
from .store import (
    AuditBackend,
    AuditEvent,
    AuditRecord,
    AuditSink,
    InMemoryAuditBackend,
    ToolStore,
)

__all__ = [
    # Model
    "DEFAULT_HANDLER",
    "Channel",
    "ChannelResponse",
    "ExecutionContext",
    "ToolDefinition",
    "ToolHandler",
    "ToolResult",
    "channel_key",
    # Schema
    "ParameterSchema",
    "PropertySchema",
    "SchemaValidationResult",
    "validate_parameters",
    # Registry
    "APOLOGY_TEXT",
    "ToolRegistry",
    "ToolTimeoutError",
    "ToolBuilder",
    # Errors
    "ToolRegistryError",
    "ToolDefinitionError",
    "ToolNotFoundError",
    "InvalidExecutionContextError",
    "ToolParameterError",
    "NoHandlerError",
    # Audit
    "AuditEvent",
    "AuditRecord",
    "AuditSink",
    "AuditBackend",
    "InMemoryAuditBackend",
    "ToolStore",
    # Standard tools
    "build_send_sms_tool",
    "create_messaging_tools",
    "build_calendar_tool",
    "create_calendar_tools",
    "create_standard_tools",
    "find_open_slots",
]
