"""
Twilio credential validator.

Format checks:
- account_sid, auth_token and phone_number present
- Account SID starts with "AC" and is 34 characters long
- phone number in E.164 form
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from .base import BaseCredentialValidator, ValidationResult

if TYPE_CHECKING:
    from receptionist.config.schemas import TwilioConfig

logger = logging.getLogger(__name__)

E164_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
ACCOUNT_SID_LENGTH = 34


class TwilioValidator(BaseCredentialValidator):
    service_name = "twilio"

    def validate_format(self, config: TwilioConfig) -> ValidationResult:
        auth_token = config.auth_token.get_secret_value()

        if not config.account_sid or not auth_token or not config.phone_number:
            return ValidationResult.fail(
                "Missing required Twilio credentials (account_sid, auth_token, phone_number)",
                has_account_sid=bool(config.account_sid),
                has_auth_token=bool(auth_token),
                has_phone_number=bool(config.phone_number),
            )

        if not config.account_sid.startswith("AC"):
            return ValidationResult.fail(
                'Invalid Twilio Account SID format (should start with "AC")',
                account_sid=config.account_sid[:5] + "...",
            )

        if len(config.account_sid) != ACCOUNT_SID_LENGTH:
            return ValidationResult.fail(
                f"Invalid Twilio Account SID length (should be {ACCOUNT_SID_LENGTH} characters)",
                length=len(config.account_sid),
            )

        if not E164_PATTERN.match(config.phone_number):
            return ValidationResult.fail(
                "Invalid phone number format (use E.164 format: +1234567890)",
                phone_number=config.phone_number,
            )

        logger.info("[TwilioValidator] Format validation passed")
        return ValidationResult.ok()

    def unhealthy_message(self, provider_name: str) -> str:
        return (
            "Twilio credentials are invalid or account is not accessible. "
            "Please verify your Account SID and Auth Token."
        )

    def explain_error(self, provider_name: str, error: Exception) -> str:
        if "20003" in str(error):
            return "Twilio authentication failed (Error 20003). Invalid credentials."
        return super().explain_error("Twilio", error)
