"""
Receptionist Providers

Lazily constructed, credential-validated external-service clients.

Components:
- ProviderProxy: single-flight lazy construction + two-phase validation
- ProviderRegistry: named proxies, fail-fast validate_all(), disposal
- Health checks over loaded providers

Provider Implementations:
- TwilioProvider (telephony, SMS)
- OpenAIProvider (OpenAI / OpenRouter model completion)
- GoogleCalendarProvider
"""

from .base import BaseProvider, Provider, ProviderType
from .errors import (
    CredentialValidationError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderInitializationError,
    ProviderNotConfiguredError,
    ProviderRequestError,
)
from .google_calendar import GoogleCalendarProvider
from .health import HealthCheckResult, HealthStatus, ProviderHealthChecker
from .openai import OpenAIProvider
from .proxy import ProviderFactory, ProviderProxy, ProviderState
from .registry import ProviderRegistry
from .rest import HttpProvider
from .twilio import TwilioProvider

__all__ = [
    # Protocol and Base
    "Provider",
    "BaseProvider",
    "ProviderType",
    "HttpProvider",
    # Errors
    "ProviderError",
    "ProviderNotConfiguredError",
    "CredentialValidationError",
    "ProviderInitializationError",
    "ProviderRequestError",
    "ProviderAuthenticationError",
    # Proxy and Registry
    "ProviderFactory",
    "ProviderProxy",
    "ProviderState",
    "ProviderRegistry",
    # Health
    "HealthStatus",
    "HealthCheckResult",
    "ProviderHealthChecker",
    # Implementations
    "TwilioProvider",
    "OpenAIProvider",
    "GoogleCalendarProvider",
]
