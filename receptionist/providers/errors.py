"""
Provider error hierarchy.

Configuration, credential and initialization failures all surface during
startup. They are meant for the integrating application, not end users.
"""

from __future__ import annotations

from typing import Any


class ProviderError(Exception):
    """Base exception for provider failures."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.context = context or {}

    @property
    def message(self) -> str:
        return self.args[0]


class ProviderNotConfiguredError(ProviderError):
    """Raised when looking up a provider that was never registered."""

    def __init__(self, provider_name: str):
        super().__init__(
            f"Provider '{provider_name}' is not configured. "
            "Please provide credentials in the SDK configuration.",
            code="PROVIDER_NOT_CONFIGURED",
            status_code=400,
            context={"provider_name": provider_name},
        )
        self.provider_name = provider_name


class CredentialValidationError(ProviderError):
    """
    Raised when format or connection validation rejects a provider.

    Example:
        raise CredentialValidationError(
            "twilio",
            "Invalid Twilio Account SID format",
            {"account_sid": "XX12..."},
        )
    """

    def __init__(
        self,
        provider_name: str,
        details: str,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            f"Invalid credentials for {provider_name}: {details}",
            code="CREDENTIAL_VALIDATION_ERROR",
            status_code=401,
            context={"provider_name": provider_name, "details": details, **(context or {})},
        )
        self.provider_name = provider_name
        self.details = details


class ProviderInitializationError(ProviderError):
    """Raised when a provider factory or its initialize() fails."""

    def __init__(
        self,
        provider_name: str,
        details: str,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            f"Failed to initialize {provider_name}: {details}",
            code="PROVIDER_INITIALIZATION_ERROR",
            status_code=500,
            context={"provider_name": provider_name, "details": details, **(context or {})},
        )
        self.provider_name = provider_name
        self.details = details


class ProviderRequestError(ProviderError):
    """Raised by HTTP-backed providers when the remote API rejects a call."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        *,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(
            message,
            code="PROVIDER_REQUEST_ERROR",
            status_code=status_code,
            context={"provider_name": provider_name},
        )
        self.provider_name = provider_name
        self.response_body = response_body

    def __str__(self) -> str:
        parts = [f"[{self.provider_name}] {self.args[0]}"]
        if self.status_code:
            parts.append(f"(status={self.status_code})")
        return " ".join(parts)


class ProviderAuthenticationError(ProviderRequestError):
    """Raised when the remote API rejects the credentials (401/403)."""


__all__ = [
    "ProviderError",
    "ProviderNotConfiguredError",
    "CredentialValidationError",
    "ProviderInitializationError",
    "ProviderRequestError",
    "ProviderAuthenticationError",
]
