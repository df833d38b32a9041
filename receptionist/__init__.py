"""
Receptionist - core of an AI receptionist SDK.

Receptionist gives an agent safe access to external services and to the
tools built on top of them:

- **Provider Registry**: Lazily constructed service clients with
  single-flight initialization and fail-fast credential validation
- **Tool Registry**: Channel-aware tools with parameter validation,
  per-call deadlines, auditing and sanitized failures

Quick Start:
    >>> from receptionist import load_settings, initialize_providers, create_tool_registry
    >>>
    >>> settings = load_settings()
    >>> providers = await initialize_providers(settings)
    >>> tools = create_tool_registry(settings, providers=providers)
    >>> result = await tools.execute(
    ...     "send_sms",
    ...     {"to": "+15551234567", "body": "Your appointment is confirmed."},
    ...     ExecutionContext(channel=Channel.CALL, conversation_id="conv-1"),
    ... )
"""

__version__ = "0.1.0"
__license__ = "MIT"

from receptionist.bootstrap import (
    create_provider_registry,
    create_tool_registry,
    initialize_providers,
)
from receptionist.config import ReceptionistSettings, ToolRegistryConfig, load_settings
from receptionist.providers import ProviderRegistry
from receptionist.tools import (
    Channel,
    ChannelResponse,
    ExecutionContext,
    ToolBuilder,
    ToolDefinition,
    ToolRegistry,
    ToolResult,
)

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Composition
    "create_provider_registry",
    "create_tool_registry",
    "initialize_providers",
    # Config
    "ReceptionistSettings",
    "ToolRegistryConfig",
    "load_settings",
    # Providers
    "ProviderRegistry",
    # Tools
    "Channel",
    "ChannelResponse",
    "ExecutionContext",
    "ToolBuilder",
    "ToolDefinition",
    "ToolRegistry",
    "ToolResult",
]
