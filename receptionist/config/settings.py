"""
Environment-backed settings loader.

All variables use the RECEPTIONIST_ prefix. A provider section is only
populated when its primary credential variable is set.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping

from .schemas import (
    AIModelConfig,
    GoogleCalendarConfig,
    ReceptionistSettings,
    ToolRegistryConfig,
    TwilioConfig,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "RECEPTIONIST_"


def load_settings(environ: Mapping[str, str] | None = None) -> ReceptionistSettings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)
    """
    env = os.environ if environ is None else environ

    def get(key: str, default: str | None = None) -> str | None:
        return env.get(f"{ENV_PREFIX}{key}", default)

    twilio = None
    if get("TWILIO_ACCOUNT_SID"):
        twilio = TwilioConfig(
            account_sid=get("TWILIO_ACCOUNT_SID", ""),
            auth_token=get("TWILIO_AUTH_TOKEN", ""),
            phone_number=get("TWILIO_PHONE_NUMBER", ""),
        )

    ai = None
    if get("AI_API_KEY"):
        ai = AIModelConfig(
            provider=get("AI_PROVIDER", "openai"),
            api_key=get("AI_API_KEY", ""),
            model=get("AI_MODEL", "gpt-4o-mini"),
            base_url=get("AI_BASE_URL"),
        )

    google_calendar = None
    credentials_json = get("GOOGLE_CREDENTIALS")
    if get("GOOGLE_API_KEY") or credentials_json:
        google_calendar = GoogleCalendarConfig(
            calendar_id=get("GOOGLE_CALENDAR_ID", "primary"),
            api_key=get("GOOGLE_API_KEY"),
            credentials=json.loads(credentials_json) if credentials_json else None,
        )

    tools = ToolRegistryConfig(
        default_timeout_ms=int(get("TOOL_TIMEOUT_MS", "30000")),
        validate_parameters=get("TOOL_VALIDATE_PARAMETERS", "true").lower() == "true",
        cancel_on_timeout=get("TOOL_CANCEL_ON_TIMEOUT", "false").lower() == "true",
    )

    settings = ReceptionistSettings(
        service_name=get("SERVICE_NAME", "receptionist"),
        environment=get("ENVIRONMENT", "development"),
        twilio=twilio,
        ai=ai,
        google_calendar=google_calendar,
        tools=tools,
    )
    logger.debug(
        f"[settings] Loaded settings: twilio={twilio is not None} "
        f"ai={ai is not None} google_calendar={google_calendar is not None}"
    )
    return settings
