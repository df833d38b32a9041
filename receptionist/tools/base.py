"""
Tool data model.

- Channel: communication surface a tool is invoked from
- ChannelResponse: what a caller renders back on that channel
- ToolResult: uniform outcome of a tool handler
- ExecutionContext: per-invocation context handed to the handler
- ToolDefinition: name, description, parameter schema and handlers

A ToolDefinition carries one handler per channel it specializes plus a
mandatory "default" handler used for every other channel.

Usage:
    async def get_weather(params, ctx):
        return ToolResult.ok(
            {"temp_f": 54},
            ChannelResponse.for_channel(ctx.channel, "It's 54 degrees."),
        )

    tool = ToolDefinition(
        name="get_weather",
        description="Current weather for a city",
        parameters={
            "type": "object",
            "properties": {"location": {"type": "string"}},
            "required": ["location"],
        },
        handlers={"default": get_weather},
    )
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from .schema import ParameterSchema

DEFAULT_HANDLER = "default"


class Channel(str, Enum):
    """Communication surface."""

    CALL = "call"
    SMS = "sms"
    EMAIL = "email"
    TEXT = "text"


def channel_key(channel: Channel | str) -> str:
    """Normalize a channel to the string used as a handler key."""
    if isinstance(channel, Channel):
        return channel.value
    return str(channel)


@dataclass(frozen=True, slots=True)
class ChannelResponse:
    """
    Channel-renderable payload.

    Attributes:
        speak: Text for speech synthesis (voice calls)
        message: Short text (SMS)
        html: Rich body (email)
        text: Plain-text fallback for any channel
        attachments: Email attachments
    """

    speak: str | None = None
    message: str | None = None
    html: str | None = None
    text: str | None = None
    attachments: tuple[Any, ...] = ()

    @classmethod
    def for_channel(cls, channel: Channel | str, content: str) -> ChannelResponse:
        """Build the natural response shape for a channel."""
        key = channel_key(channel)
        if key == Channel.CALL.value:
            return cls(speak=content, text=content)
        if key == Channel.SMS.value:
            return cls(message=content, text=content)
        if key == Channel.EMAIL.value:
            return cls(html=f"<p>{content}</p>", text=content)
        return cls(text=content)

    @property
    def is_empty(self) -> bool:
        return not (self.speak or self.message or self.html or self.text or self.attachments)

    def render(self, channel: Channel | str) -> str:
        """Best plain string for a channel, falling back to text."""
        key = channel_key(channel)
        preferred = {
            Channel.CALL.value: self.speak,
            Channel.SMS.value: self.message,
            Channel.EMAIL.value: self.html,
        }.get(key)
        return preferred or self.text or self.speak or self.message or self.html or ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key in ("speak", "message", "html", "text"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.attachments:
            result["attachments"] = list(self.attachments)
        return result


@dataclass(frozen=True, slots=True)
class ToolResult:
    """
    Outcome of a tool handler.

    The response is always present, even on failure, so a caller can
    always render something.
    """

    success: bool
    response: ChannelResponse = field(default_factory=ChannelResponse)
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any = None, response: ChannelResponse | None = None) -> ToolResult:
        return cls(success=True, data=data, response=response or ChannelResponse())

    @classmethod
    def failure(cls, error: str, response: ChannelResponse | None = None) -> ToolResult:
        return cls(success=False, error=error, response=response or ChannelResponse())

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "success": self.success,
            "response": self.response.to_dict(),
        }
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass(frozen=True, slots=True)
class ExecutionContext:
    """
    Per-invocation context. Built fresh by the caller for every execution.

    Attributes:
        channel: Channel the tool is invoked from (required)
        conversation_id: Conversation the call belongs to
        call_sid: Voice call correlation ID
        message_sid: SMS correlation ID
        agent_id: Owning agent, set by the host application
        metadata: Free-form caller data
    """

    channel: Channel | str
    conversation_id: str = ""
    call_sid: str | None = None
    message_sid: str | None = None
    agent_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def channel_key(self) -> str:
        return channel_key(self.channel) if self.channel else ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel": self.channel_key,
            "conversation_id": self.conversation_id,
            "call_sid": self.call_sid,
            "message_sid": self.message_sid,
            "agent_id": self.agent_id,
            "metadata": self.metadata,
        }


ToolHandler = Callable[[dict[str, Any], ExecutionContext], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolDefinition:
    """
    A named capability.

    Attributes:
        name: Unique identifier (snake_case recommended)
        description: What the tool does, for the model
        handlers: Channel key -> handler, plus DEFAULT_HANDLER
        parameters: Parameter schema (dict or ParameterSchema), optional
    """

    name: str
    description: str
    handlers: Mapping[str, ToolHandler]
    parameters: ParameterSchema | None = None

    def __post_init__(self) -> None:
        handlers = {channel_key(k): v for k, v in (self.handlers or {}).items()}
        object.__setattr__(self, "handlers", MappingProxyType(handlers))
        if self.parameters is not None and not isinstance(self.parameters, ParameterSchema):
            object.__setattr__(self, "parameters", ParameterSchema.from_dict(self.parameters))

    @property
    def default_handler(self) -> ToolHandler | None:
        return self.handlers.get(DEFAULT_HANDLER)

    def resolve_handler(self, channel: Channel | str) -> ToolHandler | None:
        """Channel-specific handler if present, else the default."""
        return self.handlers.get(channel_key(channel)) or self.default_handler

    def supports_channel(self, channel: Channel | str) -> bool:
        return self.resolve_handler(channel) is not None

    def to_llm_schema(self) -> dict[str, Any]:
        """Schema for Claude/OpenAI-style tool calling."""
        parameters = self.parameters or ParameterSchema()
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": parameters.to_dict(),
        }

    def __repr__(self) -> str:
        return f"<ToolDefinition {self.name} handlers={sorted(self.handlers)}>"
