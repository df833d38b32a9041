"""
Tool Registry and execution engine.

The single point through which the agent's chosen tool name and
parameters become a validated, time-bounded, audited side effect.

execute() pipeline:
    1. look up the tool                      -> ToolNotFoundError
    2. require context.channel               -> InvalidExecutionContextError
    3. validate parameters against schema    -> ToolParameterError
    4. resolve channel handler or default    -> NoHandlerError
    5. run handler against a deadline
    6. audit success, return handler result
    7. on raise/timeout: audit error, return sanitized failure result

Steps 1-4 raise because they are caller bugs. From step 5 on, execute()
always returns a ToolResult so the conversation can carry on.

Usage:
    registry = ToolRegistry(ToolRegistryConfig(default_timeout_ms=10_000))
    registry.register(weather_tool)

    result = await registry.execute(
        "get_weather",
        {"location": "Boston"},
        ExecutionContext(channel=Channel.SMS, conversation_id="conv-1"),
    )
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import TYPE_CHECKING, Any

from receptionist.config.schemas import ToolRegistryConfig
from receptionist.utils.sanitize import sanitize_error_message

from .base import DEFAULT_HANDLER, ChannelResponse, ExecutionContext, ToolDefinition, ToolResult
from .errors import (
    InvalidExecutionContextError,
    NoHandlerError,
    ToolDefinitionError,
    ToolNotFoundError,
    ToolParameterError,
)
from .schema import validate_parameters

if TYPE_CHECKING:
    from .base import Channel, ToolHandler
    from .store import AuditSink

logger = logging.getLogger(__name__)

APOLOGY_TEXT = "Sorry, I encountered an error while performing that action. Please try again."


class ToolTimeoutError(TimeoutError):
    """A handler missed its deadline."""

    def __init__(self, tool_name: str, timeout_ms: float):
        super().__init__(f"Tool execution timeout after {timeout_ms:g}ms")
        self.tool_name = tool_name
        self.timeout_ms = timeout_ms


class ToolRegistry:
    """
    Named collection of ToolDefinitions with guarded execution.

    Registration is expected during setup. Executions may overlap freely;
    the registry adds no ordering or locking between them.
    """

    def __init__(
        self,
        config: ToolRegistryConfig | None = None,
        *,
        tool_store: AuditSink | None = None,
    ) -> None:
        self._config = config or ToolRegistryConfig()
        self._tools: dict[str, ToolDefinition] = {}
        self._tool_store = tool_store
        self._background: set[asyncio.Future[ToolResult]] = set()

    @property
    def config(self) -> ToolRegistryConfig:
        return self._config

    def set_tool_store(self, store: AuditSink | None) -> None:
        """Attach (or detach with None) the audit sink."""
        self._tool_store = store

    # ==================== Registration ====================

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a tool.

        A name, a description and a default handler are required. An
        existing tool with the same name is replaced (last write wins).

        Raises:
            ToolDefinitionError: If the tool is structurally invalid
        """
        self._validate_tool(tool)

        if tool.name in self._tools:
            logger.warning(f"[tool_registry] Tool '{tool.name}' already registered, overwriting")

        self._tools[tool.name] = tool
        logger.info(f"[tool_registry] Registered tool: {tool.name}")

    def _validate_tool(self, tool: ToolDefinition) -> None:
        name = getattr(tool, "name", None)
        if not name or not isinstance(name, str):
            raise ToolDefinitionError(f"Tool must have a name: {tool!r}")

        if not getattr(tool, "description", None):
            raise ToolDefinitionError(f"Tool '{name}' must have a description")

        handlers = getattr(tool, "handlers", None) or {}
        if not callable(handlers.get(DEFAULT_HANDLER)):
            raise ToolDefinitionError(f"Tool '{name}' must have a default handler")

    def unregister(self, name: str) -> bool:
        """
        Remove a tool.

        Returns:
            True if a tool was removed, False if the name was unknown
        """
        if name not in self._tools:
            return False

        del self._tools[name]
        logger.info(f"[tool_registry] Unregistered tool: {name}")
        return True

    def clear(self) -> None:
        """Discard every registration."""
        logger.info(f"[tool_registry] Clearing {len(self._tools)} tools")
        self._tools.clear()

    # ==================== Lookup ====================

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def list_available(self, channel: Channel | str | None = None) -> list[ToolDefinition]:
        """
        List tools, optionally only those usable on a channel.

        A tool is usable on a channel if it has a handler for that channel
        or a default handler.
        """
        tools = list(self._tools.values())
        if not channel:
            return tools
        return [tool for tool in tools if tool.supports_channel(channel)]

    def to_llm_schemas(self, channel: Channel | str | None = None) -> list[dict[str, Any]]:
        """Tool schemas for Claude/OpenAI tool use."""
        return [tool.to_llm_schema() for tool in self.list_available(channel)]

    def count(self) -> int:
        return len(self._tools)

    @property
    def background_task_count(self) -> int:
        """Timed-out handlers still running."""
        return len(self._background)

    # ==================== Execution ====================

    async def execute(
        self,
        name: str,
        parameters: dict[str, Any] | None,
        context: ExecutionContext,
        timeout_ms: float | None = None,
    ) -> ToolResult:
        """
        Execute a tool with validation, a deadline and auditing.

        Args:
            name: Tool name
            parameters: Tool parameters (None is treated as {})
            context: Execution context; channel is required
            timeout_ms: Deadline override for this call

        Returns:
            The handler's ToolResult, or a failure ToolResult with a
            sanitized error and an apology response

        Raises:
            ToolNotFoundError: Unknown tool
            InvalidExecutionContextError: Context without a channel
            ToolParameterError: Parameters violate the tool's schema
            NoHandlerError: No handler for the channel and no default
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.error(f"[tool_registry] Tool '{name}' not found in registry")
            raise ToolNotFoundError(name, self.list_names())

        if context is None or not getattr(context, "channel", None):
            logger.error("[tool_registry] Execution context must have a channel")
            raise InvalidExecutionContextError("Execution context must have a channel property")

        if parameters is None:
            parameters = {}

        if self._config.validate_parameters and tool.parameters is not None:
            validation = validate_parameters(tool.parameters, parameters)
            if not validation.valid:
                error = ToolParameterError(name, validation.errors)
                logger.error(f"[tool_registry] {error}")
                raise error

        handler = tool.resolve_handler(context.channel)
        if handler is None:
            error = NoHandlerError(name, context.channel_key)
            logger.error(f"[tool_registry] {error}")
            raise error

        timeout = timeout_ms if timeout_ms is not None else self._config.default_timeout_ms
        logger.info(
            f"[tool_registry] Executing tool '{name}' on channel '{context.channel_key}'"
        )
        start_time = time.perf_counter()

        try:
            result = await self._run_with_deadline(name, handler, parameters, context, timeout)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            sanitized = sanitize_error_message(e)
            logger.error(
                f"[tool_registry] Tool '{name}' execution failed after "
                f"{duration_ms:.0f}ms: {sanitized}",
                exc_info=not isinstance(e, ToolTimeoutError),
            )
            await self._audit_error(name, parameters, e, context, duration_ms)
            return ToolResult.failure(
                sanitized,
                ChannelResponse.for_channel(context.channel, APOLOGY_TEXT),
            )

        duration_ms = (time.perf_counter() - start_time) * 1000
        await self._audit_execution(name, parameters, result, context, duration_ms)
        logger.info(f"[tool_registry] Tool '{name}' executed in {duration_ms:.0f}ms")
        return result

    async def _run_with_deadline(
        self,
        name: str,
        handler: ToolHandler,
        parameters: dict[str, Any],
        context: ExecutionContext,
        timeout_ms: float,
    ) -> ToolResult:
        task = asyncio.ensure_future(_invoke(name, handler, parameters, context))

        try:
            done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task in done:
            return task.result()

        if self._config.cancel_on_timeout:
            task.cancel()
        else:
            # The handler keeps running; its late outcome is only logged
            self._background.add(task)
            task.add_done_callback(lambda t: self._on_late_completion(name, t))

        raise ToolTimeoutError(name, timeout_ms)

    def _on_late_completion(self, name: str, task: asyncio.Future[ToolResult]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(
                f"[tool_registry] Timed-out tool '{name}' later failed: "
                f"{sanitize_error_message(error)}"
            )
        else:
            logger.info(f"[tool_registry] Timed-out tool '{name}' finished after its deadline")

    # ==================== Auditing ====================

    async def _audit_execution(
        self,
        name: str,
        parameters: dict[str, Any],
        result: ToolResult,
        context: ExecutionContext,
        duration_ms: float,
    ) -> None:
        if self._tool_store is None:
            return
        try:
            await self._tool_store.log_execution(name, parameters, result, context, duration_ms)
        except Exception as e:
            logger.warning(f"[tool_registry] Audit sink failed to log execution of '{name}': {e}")

    async def _audit_error(
        self,
        name: str,
        parameters: dict[str, Any],
        error: BaseException,
        context: ExecutionContext,
        duration_ms: float,
    ) -> None:
        if self._tool_store is None:
            return
        try:
            await self._tool_store.log_error(name, parameters, error, context, duration_ms)
        except Exception as e:
            logger.warning(f"[tool_registry] Audit sink failed to log error of '{name}': {e}")

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __repr__(self) -> str:
        return f"<ToolRegistry tools={list(self._tools.keys())}>"


async def _invoke(
    name: str,
    handler: ToolHandler,
    parameters: dict[str, Any],
    context: ExecutionContext,
) -> ToolResult:
    result = handler(parameters, context)
    if inspect.isawaitable(result):
        result = await result
    if not isinstance(result, ToolResult):
        raise TypeError(
            f"Handler for tool '{name}' returned {type(result).__name__}, expected ToolResult"
        )
    return result
