"""
Tool execution audit trail.

The ToolRegistry reports every execution to an AuditSink. ToolStore is
the standard sink: it turns calls into append-only AuditRecords written to
a pluggable AuditBackend, and offers simple query helpers on top.

Design:
    - AuditSink Protocol is what the registry depends on
    - AuditBackend Protocol is where records end up (agent memory,
      database, ...); InMemoryAuditBackend ships for tests and local use
    - Backend failures are logged and swallowed; auditing never breaks
      tool execution

Usage:
    store = ToolStore(InMemoryAuditBackend())
    registry = ToolRegistry(tool_store=store)

    await registry.execute("send_sms", params, ctx)

    recent = await store.find_executions(tool_name="send_sms", limit=10)
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable
from uuid import uuid4

from .base import ExecutionContext, ToolResult

logger = logging.getLogger(__name__)


class AuditEvent(str, Enum):
    EXECUTION = "tool_execution"
    ERROR = "tool_error"


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """One append-only audit entry."""

    event: AuditEvent
    tool_name: str
    parameters: dict[str, Any]
    context: ExecutionContext
    duration_ms: float | None = None
    result: ToolResult | None = None
    error: str | None = None
    error_type: str | None = None
    id: str = field(default_factory=lambda: f"audit-{uuid4()}")
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def success(self) -> bool:
        return self.event is AuditEvent.EXECUTION and self.result is not None and self.result.success

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "event": self.event.value,
            "tool_name": self.tool_name,
            "parameters": self.parameters,
            "context": self.context.to_dict(),
            "duration_ms": self.duration_ms,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error,
            "error_type": self.error_type,
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
        }


@runtime_checkable
class AuditSink(Protocol):
    """Consumer of tool execution records."""

    async def log_execution(
        self,
        tool_name: str,
        parameters: dict[str, Any],
        result: ToolResult,
        context: ExecutionContext,
        duration_ms: float | None = None,
    ) -> None:
        ...

    async def log_error(
        self,
        tool_name: str,
        parameters: dict[str, Any],
        error: BaseException | str,
        context: ExecutionContext,
        duration_ms: float | None = None,
    ) -> None:
        ...


class AuditBackend(Protocol):
    """Storage for audit records."""

    async def append(self, record: AuditRecord) -> None:
        ...

    async def query(
        self,
        *,
        conversation_id: str | None = None,
        tool_name: str | None = None,
        success: bool | None = None,
        limit: int = 20,
    ) -> list[AuditRecord]:
        """Matching records, newest first."""
        ...


class InMemoryAuditBackend:
    """
    Bounded in-process backend.

    Oldest records are dropped once max_records is reached.
    """

    def __init__(self, max_records: int = 1000):
        self._records: deque[AuditRecord] = deque(maxlen=max_records)

    async def append(self, record: AuditRecord) -> None:
        self._records.append(record)

    async def query(
        self,
        *,
        conversation_id: str | None = None,
        tool_name: str | None = None,
        success: bool | None = None,
        limit: int = 20,
    ) -> list[AuditRecord]:
        if limit <= 0:
            return []

        matches: list[AuditRecord] = []
        for record in reversed(self._records):
            if conversation_id is not None and record.context.conversation_id != conversation_id:
                continue
            if tool_name is not None and record.tool_name != tool_name:
                continue
            if success is not None and record.success != success:
                continue
            matches.append(record)
            if len(matches) >= limit:
                break
        return matches

    def __len__(self) -> int:
        return len(self._records)


class ToolStore:
    """
    Standard AuditSink backed by an AuditBackend.

    Without a backend every call is a no-op, so a store can be attached
    before storage is ready and wired up later with set_backend().
    """

    def __init__(self, backend: AuditBackend | None = None):
        self._backend = backend

    def set_backend(self, backend: AuditBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> AuditBackend | None:
        return self._backend

    async def log_execution(
        self,
        tool_name: str,
        parameters: dict[str, Any],
        result: ToolResult,
        context: ExecutionContext,
        duration_ms: float | None = None,
    ) -> None:
        """Persist a completed tool execution."""
        await self._append(
            AuditRecord(
                event=AuditEvent.EXECUTION,
                tool_name=tool_name,
                parameters=dict(parameters),
                context=context,
                duration_ms=duration_ms,
                result=result,
                error=result.error,
            ),
            "execution",
        )

    async def log_error(
        self,
        tool_name: str,
        parameters: dict[str, Any],
        error: BaseException | str,
        context: ExecutionContext,
        duration_ms: float | None = None,
    ) -> None:
        """Persist a failed (raised or timed out) tool execution."""
        await self._append(
            AuditRecord(
                event=AuditEvent.ERROR,
                tool_name=tool_name,
                parameters=dict(parameters),
                context=context,
                duration_ms=duration_ms,
                error=str(error),
                error_type=type(error).__name__ if isinstance(error, BaseException) else None,
            ),
            "error",
        )

    async def _append(self, record: AuditRecord, kind: str) -> None:
        if self._backend is None:
            return
        try:
            await self._backend.append(record)
        except Exception as e:
            logger.warning(f"[tool_store] Failed to log {kind} for {record.tool_name}: {e}")

    async def find_executions(
        self,
        *,
        conversation_id: str | None = None,
        tool_name: str | None = None,
        success: bool | None = None,
        limit: int = 20,
    ) -> list[AuditRecord]:
        """
        Query recent executions, newest first.

        Args:
            conversation_id: Only records from this conversation
            tool_name: Only records for this tool
            success: True for successes only, False for failures only
            limit: Maximum number of records
        """
        if self._backend is None:
            return []
        try:
            return await self._backend.query(
                conversation_id=conversation_id,
                tool_name=tool_name,
                success=success,
                limit=limit,
            )
        except Exception as e:
            logger.warning(f"[tool_store] Failed to query executions: {e}")
            return []

    async def get_last_execution(
        self,
        tool_name: str,
        conversation_id: str | None = None,
    ) -> AuditRecord | None:
        """Most recent successful execution of a tool, if any."""
        records = await self.find_executions(
            conversation_id=conversation_id,
            tool_name=tool_name,
            success=True,
            limit=1,
        )
        return records[0] if records else None
