"""
Composition root for Receptionist.

Wires settings into a ProviderRegistry and a ToolRegistry. Registries
are plain instances returned to the caller; nothing here is global.

Usage:
    settings = load_settings()
    providers = await initialize_providers(settings)   # fail fast
    tools = create_tool_registry(settings, providers=providers)

    ...

    await providers.dispose_all()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from receptionist.config.schemas import ReceptionistSettings, ToolRegistryConfig
from receptionist.providers import (
    GoogleCalendarProvider,
    OpenAIProvider,
    ProviderNotConfiguredError,
    ProviderRegistry,
    TwilioProvider,
)
from receptionist.tools import (
    InMemoryAuditBackend,
    ToolRegistry,
    ToolStore,
    create_standard_tools,
)
from receptionist.validation import GoogleCalendarValidator, OpenAIValidator, TwilioValidator

if TYPE_CHECKING:
    from receptionist.tools import AuditSink

logger = logging.getLogger(__name__)

OPENAI_COMPATIBLE = frozenset({"openai", "openrouter"})


def create_provider_registry(settings: ReceptionistSettings) -> ProviderRegistry:
    """
    Register a lazy proxy for every configured provider.

    No provider is constructed here; call validate_all() (or use
    initialize_providers) to construct and verify them.
    """
    registry = ProviderRegistry()

    if settings.twilio is not None:
        twilio = settings.twilio
        registry.register_if_configured(
            "twilio",
            lambda: TwilioProvider(
                twilio.account_sid,
                twilio.auth_token.get_secret_value(),
                twilio.phone_number,
            ),
            TwilioValidator(),
            twilio,
        )

    if settings.ai is not None:
        ai = settings.ai
        if ai.provider in OPENAI_COMPATIBLE or ai.base_url:
            registry.register_if_configured(
                ai.provider,
                lambda: OpenAIProvider(
                    ai.api_key.get_secret_value(),
                    ai.model,
                    provider_name=ai.provider,
                    base_url=ai.base_url,
                ),
                OpenAIValidator(),
                ai,
            )
        else:
            logger.warning(
                f"[bootstrap] AI provider '{ai.provider}' needs an OpenAI-compatible "
                "base_url, skipping registration"
            )

    if settings.google_calendar is not None:
        calendar = settings.google_calendar
        registry.register_if_configured(
            "google_calendar",
            lambda: GoogleCalendarProvider(
                calendar.calendar_id,
                calendar.api_key.get_secret_value() if calendar.api_key else "",
            ),
            GoogleCalendarValidator(),
            calendar,
        )

    logger.info(f"[bootstrap] Registered providers: {registry.list()}")
    return registry


async def initialize_providers(settings: ReceptionistSettings) -> ProviderRegistry:
    """
    Build the provider registry and validate every provider.

    On failure every provider constructed so far is disposed before the
    error propagates.

    Raises:
        CredentialValidationError: If any provider's credentials are rejected
    """
    registry = create_provider_registry(settings)
    try:
        await registry.validate_all()
    except Exception:
        await registry.dispose_all()
        raise
    return registry


def create_tool_registry(
    settings: ReceptionistSettings | ToolRegistryConfig | None = None,
    *,
    providers: ProviderRegistry | None = None,
    tool_store: AuditSink | None = None,
) -> ToolRegistry:
    """
    Build a ToolRegistry with an audit store attached.

    Without an explicit tool_store, executions are audited to a bounded
    in-memory ToolStore. Standard tools are registered for the providers
    in the supplied provider registry: send_sms for "twilio" and calendar
    for "google_calendar".
    """
    if isinstance(settings, ReceptionistSettings):
        config = settings.tools
    else:
        config = settings

    if tool_store is None:
        tool_store = ToolStore(InMemoryAuditBackend())

    registry = ToolRegistry(config, tool_store=tool_store)

    if providers is not None:
        for tool in create_standard_tools(providers):
            registry.register(tool)

    return registry


async def get_twilio_provider(registry: ProviderRegistry) -> TwilioProvider | None:
    """Twilio provider, or None if it is not configured."""
    try:
        return await registry.get_typed("twilio", TwilioProvider)
    except ProviderNotConfiguredError:
        return None


async def get_calendar_provider(registry: ProviderRegistry) -> GoogleCalendarProvider | None:
    """Google Calendar provider, or None if it is not configured."""
    try:
        return await registry.get_typed("google_calendar", GoogleCalendarProvider)
    except ProviderNotConfiguredError:
        return None
