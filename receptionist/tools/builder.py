"""
Fluent builder for ToolDefinitions.

Example:
    tool = (
        ToolBuilder()
        .with_name("book_appointment")
        .with_description("Book an appointment on the calendar")
        .with_parameters({
            "type": "object",
            "properties": {"time": {"type": "string"}},
            "required": ["time"],
        })
        .on_call(speak_confirmation)
        .on_sms(text_confirmation)
        .default(plain_confirmation)
        .build()
    )
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .base import DEFAULT_HANDLER, Channel, ToolDefinition, ToolHandler, channel_key
from .errors import ToolDefinitionError
from .schema import ParameterSchema


class ToolBuilder:
    """Builder for ToolDefinition with per-channel handlers."""

    def __init__(self) -> None:
        self._name: str | None = None
        self._description: str | None = None
        self._parameters: ParameterSchema | None = None
        self._handlers: dict[str, ToolHandler] = {}

    def with_name(self, name: str) -> ToolBuilder:
        self._name = name
        return self

    def with_description(self, description: str) -> ToolBuilder:
        self._description = description
        return self

    def with_parameters(self, parameters: ParameterSchema | Mapping[str, Any]) -> ToolBuilder:
        self._parameters = ParameterSchema.coerce(parameters)
        return self

    def on_channel(self, channel: Channel | str, handler: ToolHandler) -> ToolBuilder:
        """Set the handler for a channel. A later call for the same channel replaces it."""
        self._handlers[channel_key(channel)] = handler
        return self

    def on_call(self, handler: ToolHandler) -> ToolBuilder:
        return self.on_channel(Channel.CALL, handler)

    def on_sms(self, handler: ToolHandler) -> ToolBuilder:
        return self.on_channel(Channel.SMS, handler)

    def on_email(self, handler: ToolHandler) -> ToolBuilder:
        return self.on_channel(Channel.EMAIL, handler)

    def on_text(self, handler: ToolHandler) -> ToolBuilder:
        return self.on_channel(Channel.TEXT, handler)

    def default(self, handler: ToolHandler) -> ToolBuilder:
        return self.on_channel(DEFAULT_HANDLER, handler)

    def build(self) -> ToolDefinition:
        """
        Build the ToolDefinition.

        Raises:
            ToolDefinitionError: If name, description or default handler is missing
        """
        if not self._name:
            raise ToolDefinitionError("Tool name is required")
        if not self._description:
            raise ToolDefinitionError(f"Tool '{self._name}' requires a description")
        if DEFAULT_HANDLER not in self._handlers:
            raise ToolDefinitionError(f"Tool '{self._name}' requires a default handler")

        return ToolDefinition(
            name=self._name,
            description=self._description,
            handlers=dict(self._handlers),
            parameters=self._parameters,
        )
