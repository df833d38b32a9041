"""
Credential validation strategy.

Each provider ships a validator with two phases:
- validate_format(config): synchronous, no network, rejects malformed
  credentials immediately
- validate_connection(provider): asynchronous live check against the
  initialized provider instance

Usage:
    class TwilioValidator(BaseCredentialValidator):
        def validate_format(self, config):
            if not config.account_sid.startswith("AC"):
                return ValidationResult.fail("Invalid Account SID")
            return ValidationResult.ok()
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from receptionist.providers.base import Provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of one validation phase."""

    valid: bool
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str, **details: Any) -> ValidationResult:
        return cls(valid=False, error=error, details=details)


@runtime_checkable
class CredentialValidator(Protocol):
    """Protocol consumed by ProviderProxy."""

    def validate_format(self, config: Any) -> ValidationResult:
        ...

    async def validate_connection(self, provider: Provider) -> ValidationResult:
        ...


class BaseCredentialValidator(ABC):
    """
    Base class for validators.

    Connection validation defaults to the provider's own health_check();
    subclasses override explain_error() to turn raw exceptions into
    actionable messages.
    """

    service_name: str = "provider"

    @abstractmethod
    def validate_format(self, config: Any) -> ValidationResult:
        ...

    async def validate_connection(self, provider: Provider) -> ValidationResult:
        name = getattr(provider, "name", self.service_name)
        try:
            logger.info(f"[{type(self).__name__}] Testing {name} API connection")
            healthy = await provider.health_check()
        except Exception as e:
            logger.error(
                f"[{type(self).__name__}] Connection validation failed for {name}: {e}"
            )
            return ValidationResult.fail(
                self.explain_error(name, e),
                original_error=str(e),
                error_type=type(e).__name__,
            )

        if not healthy:
            return ValidationResult.fail(
                self.unhealthy_message(name),
                provider_name=name,
                health_check_failed=True,
            )

        logger.info(f"[{type(self).__name__}] Connection validation passed for {name}")
        return ValidationResult.ok()

    def unhealthy_message(self, provider_name: str) -> str:
        return f"{provider_name} credentials are invalid or the account is not accessible."

    def explain_error(self, provider_name: str, error: Exception) -> str:
        message = str(error).lower()
        if "unauthorized" in message or "401" in message or "authenticat" in message:
            return f"{provider_name} authentication failed. Please verify your credentials."
        if "network" in message or "enotfound" in message or "connect" in message:
            return (
                f"Network error connecting to {provider_name} API. "
                "Please check your internet connection."
            )
        if "timeout" in message or "timed out" in message:
            return f"{provider_name} API request timed out. Please try again."
        return str(error) or f"Unknown error validating {provider_name} credentials"


class NoopValidator(BaseCredentialValidator):
    """Validator for providers without credentials: formats always pass."""

    def validate_format(self, config: Any) -> ValidationResult:
        return ValidationResult.ok()
