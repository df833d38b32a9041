"""
Credential Validators.

Two-phase validation strategies consumed by ProviderProxy: a synchronous
format check and an asynchronous live connection check.
"""

from .base import (
    BaseCredentialValidator,
    CredentialValidator,
    NoopValidator,
    ValidationResult,
)
from .google_calendar import GoogleCalendarValidator
from .openai import OpenAIValidator
from .twilio import TwilioValidator

__all__ = [
    "ValidationResult",
    "CredentialValidator",
    "BaseCredentialValidator",
    "NoopValidator",
    "TwilioValidator",
    "OpenAIValidator",
    "GoogleCalendarValidator",
]
