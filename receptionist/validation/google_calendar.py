"""
Google Calendar credential validator.

Accepts either an API key or a service-account credentials object; the
calendar ID must be "primary" or email-like.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from .base import BaseCredentialValidator, ValidationResult

if TYPE_CHECKING:
    from receptionist.config.schemas import GoogleCalendarConfig

logger = logging.getLogger(__name__)

CALENDAR_ID_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SERVICE_ACCOUNT_FIELDS = ("client_email", "private_key")


class GoogleCalendarValidator(BaseCredentialValidator):
    service_name = "google_calendar"

    def validate_format(self, config: GoogleCalendarConfig) -> ValidationResult:
        api_key = config.api_key.get_secret_value() if config.api_key else ""

        if not api_key and not config.credentials:
            return ValidationResult.fail(
                "Missing Google Calendar credentials (api_key or credentials required)",
                has_api_key=False,
                has_credentials=False,
            )

        if not config.calendar_id:
            return ValidationResult.fail(
                "Missing Google Calendar ID",
                has_api_key=bool(api_key),
                has_credentials=bool(config.credentials),
            )

        if config.calendar_id != "primary" and not CALENDAR_ID_PATTERN.match(config.calendar_id):
            return ValidationResult.fail(
                'Invalid Google Calendar ID format (should be email-like format or "primary")',
                calendar_id=config.calendar_id,
            )

        if config.credentials:
            return self._validate_credentials(config.credentials)

        logger.info("[GoogleCalendarValidator] Format validation passed")
        return ValidationResult.ok()

    def _validate_credentials(self, credentials: dict[str, Any]) -> ValidationResult:
        missing = [f for f in SERVICE_ACCOUNT_FIELDS if not credentials.get(f)]
        if missing:
            return ValidationResult.fail(
                f"Invalid service account credentials (missing: {', '.join(missing)})",
                missing_fields=missing,
            )

        if not CALENDAR_ID_PATTERN.match(credentials["client_email"]):
            return ValidationResult.fail(
                "Invalid service account client_email",
                client_email=credentials["client_email"],
            )

        if "PRIVATE KEY" not in credentials["private_key"]:
            return ValidationResult.fail("Invalid service account private_key format")

        return ValidationResult.ok()

    def unhealthy_message(self, provider_name: str) -> str:
        return (
            "Google Calendar credentials are invalid or the calendar is not accessible. "
            "Please verify your API key and calendar ID."
        )
