"""
Standard tools over the provider registry.

Handlers close over the provider registry and obtain providers lazily,
so registering these tools never constructs a provider. Provider errors
propagate to ToolRegistry.execute(), which turns them into a sanitized
failure result.

Usage:
    for tool in create_standard_tools(providers):
        tools.register(tool)
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, time, timedelta
from typing import TYPE_CHECKING, Any

from .base import ChannelResponse, ExecutionContext, ToolDefinition, ToolResult
from .builder import ToolBuilder

if TYPE_CHECKING:
    from receptionist.providers.google_calendar import GoogleCalendarProvider
    from receptionist.providers.registry import ProviderRegistry
    from receptionist.providers.twilio import TwilioProvider

logger = logging.getLogger(__name__)

# Bookable window, UTC
BUSINESS_START_HOUR = 9
BUSINESS_END_HOUR = 17
SLOT_STEP_MINUTES = 60
DEFAULT_DURATION_MINUTES = 60


# =============================================================================
# Messaging
# =============================================================================

SEND_SMS_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "to": {
            "type": "string",
            "description": "Phone number in E.164 format (e.g., +1234567890)",
        },
        "body": {
            "type": "string",
            "description": "Message content (max 160 chars for standard SMS)",
        },
    },
    "required": ["to", "body"],
}


def build_send_sms_tool(providers: ProviderRegistry) -> ToolDefinition:
    """Tool that sends an SMS through the "twilio" provider."""

    async def send_sms(params: dict[str, Any], ctx: ExecutionContext) -> ToolResult:
        to = params["to"]
        body = params["body"]
        logger.info(f"[send_sms] Sending SMS ({len(body)} chars)")

        twilio: TwilioProvider = await providers.get("twilio")
        message = await twilio.send_sms(to, body)

        return ToolResult.ok(
            {"message_sid": message.get("sid"), "status": message.get("status")},
            ChannelResponse.for_channel(ctx.channel, f"I've sent the text message to {to}."),
        )

    return (
        ToolBuilder()
        .with_name("send_sms")
        .with_description("Send an SMS message to a phone number")
        .with_parameters(SEND_SMS_PARAMETERS)
        .default(send_sms)
        .build()
    )


def create_messaging_tools(providers: ProviderRegistry) -> list[ToolDefinition]:
    """All standard messaging tools."""
    return [build_send_sms_tool(providers)]


# =============================================================================
# Calendar
# =============================================================================

CALENDAR_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "action": {"type": "string", "enum": ["check_availability"]},
        "date": {"type": "string", "description": "Day to check, YYYY-MM-DD"},
        "duration": {
            "type": "integer",
            "description": "Appointment length in minutes",
            "default": DEFAULT_DURATION_MINUTES,
        },
        "calendar_id": {
            "type": "string",
            "description": "Calendar ID (defaults to the configured calendar)",
        },
    },
    "required": ["action", "date"],
}


def _event_bounds(event: dict[str, Any], day: date) -> tuple[datetime, datetime] | None:
    start = event.get("start") or {}
    end = event.get("end") or {}

    if "dateTime" in start and "dateTime" in end:
        return datetime.fromisoformat(start["dateTime"]), datetime.fromisoformat(end["dateTime"])

    if "date" in start:
        # All-day event
        day_start = datetime.combine(day, time(0), UTC)
        return day_start, day_start + timedelta(days=1)

    return None


def find_open_slots(
    day: date,
    events: list[dict[str, Any]],
    duration_minutes: int = DEFAULT_DURATION_MINUTES,
) -> list[str]:
    """
    Start times ("HH:MM", UTC) within business hours not overlapping any event.

    Cancelled events and events marked transparent (free) do not block.
    """
    busy = []
    for event in events:
        if event.get("status") == "cancelled" or event.get("transparency") == "transparent":
            continue
        bounds = _event_bounds(event, day)
        if bounds is not None:
            busy.append(bounds)

    duration = timedelta(minutes=duration_minutes)
    window_end = datetime.combine(day, time(BUSINESS_END_HOUR), UTC)
    slot = datetime.combine(day, time(BUSINESS_START_HOUR), UTC)

    slots: list[str] = []
    while slot + duration <= window_end:
        slot_end = slot + duration
        if not any(start < slot_end and slot < end for start, end in busy):
            slots.append(slot.strftime("%H:%M"))
        slot += timedelta(minutes=SLOT_STEP_MINUTES)
    return slots


def build_calendar_tool(providers: ProviderRegistry) -> ToolDefinition:
    """Tool that checks availability on the "google_calendar" provider."""

    async def calendar(params: dict[str, Any], ctx: ExecutionContext) -> ToolResult:
        day = date.fromisoformat(params["date"])
        duration = params.get("duration") or DEFAULT_DURATION_MINUTES
        if duration <= 0:
            raise ValueError(f"Duration must be positive, got {duration}")
        logger.info(f"[calendar] Checking availability on {day.isoformat()}")

        provider: GoogleCalendarProvider = await providers.get("google_calendar")
        day_start = datetime.combine(day, time(0), UTC)
        events = await provider.list_events(
            day_start,
            day_start + timedelta(days=1),
            calendar_id=params.get("calendar_id"),
        )
        slots = find_open_slots(day, events, duration)

        if slots:
            text = f"I have openings on {day.isoformat()} at {', '.join(slots)}."
        else:
            text = f"I'm sorry, there are no openings on {day.isoformat()}."

        return ToolResult.ok(
            {"date": day.isoformat(), "slots": slots, "busy_events": len(events)},
            ChannelResponse.for_channel(ctx.channel, text),
        )

    return (
        ToolBuilder()
        .with_name("calendar")
        .with_description("Check calendar availability for an appointment")
        .with_parameters(CALENDAR_PARAMETERS)
        .default(calendar)
        .build()
    )


def create_calendar_tools(providers: ProviderRegistry) -> list[ToolDefinition]:
    """All standard calendar tools."""
    return [build_calendar_tool(providers)]


def create_standard_tools(providers: ProviderRegistry) -> list[ToolDefinition]:
    """Standard tools for every provider registered in providers."""
    tools: list[ToolDefinition] = []
    if providers.has("twilio"):
        tools.extend(create_messaging_tools(providers))
    if providers.has("google_calendar"):
        tools.extend(create_calendar_tools(providers))
    return tools
