"""
Configuration Schemas for Receptionist.

Pydantic models for provider credentials and registry settings.

Security:
    Sensitive fields use SecretStr to prevent accidental logging
    of credentials. Access the value with `.get_secret_value()`.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr

AIProviderName = Literal["openai", "openrouter", "anthropic", "google"]


class TwilioConfig(BaseModel):
    """Twilio telephony/SMS credentials."""

    account_sid: str = Field("", description="Twilio Account SID (AC...)")
    auth_token: SecretStr = Field(default=SecretStr(""), description="Twilio auth token")
    phone_number: str = Field("", description="Sending number in E.164 format")


class AIModelConfig(BaseModel):
    """Model-completion provider credentials."""

    provider: AIProviderName = "openai"
    api_key: SecretStr = Field(default=SecretStr(""), description="Provider API key")
    model: str = Field("gpt-4o-mini", description="Default model name")
    base_url: str | None = Field(None, description="Override API base URL")


class GoogleCalendarConfig(BaseModel):
    """Google Calendar credentials (API key or service account)."""

    calendar_id: str = Field("primary", description="'primary' or an email-like calendar ID")
    api_key: SecretStr | None = None
    credentials: dict[str, Any] | None = Field(
        None, description="Service account JSON (client_email, private_key, ...)"
    )


class ToolRegistryConfig(BaseModel):
    """Tool execution settings."""

    model_config = ConfigDict(frozen=True)

    default_timeout_ms: int = Field(30000, gt=0, description="Per-call handler deadline")
    validate_parameters: bool = Field(True, description="Check parameters against tool schemas")
    cancel_on_timeout: bool = Field(
        False, description="Cancel handlers that miss their deadline instead of letting them finish"
    )


class ReceptionistSettings(BaseModel):
    """
    Application settings.

    A provider section is None when that integration is not configured.
    """

    service_name: str = "receptionist"
    environment: str = "development"

    twilio: TwilioConfig | None = None
    ai: AIModelConfig | None = None
    google_calendar: GoogleCalendarConfig | None = None

    tools: ToolRegistryConfig = Field(default_factory=ToolRegistryConfig)
