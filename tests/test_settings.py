"""
Tests for configuration schemas and the environment loader.
"""

import pytest
from pydantic import ValidationError

from receptionist.config import ToolRegistryConfig, load_settings


class TestToolRegistryConfig:
    def test_defaults(self):
        config = ToolRegistryConfig()

        assert config.default_timeout_ms == 30000
        assert config.validate_parameters is True
        assert config.cancel_on_timeout is False

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ToolRegistryConfig(default_timeout_ms=0)

    def test_frozen(self):
        config = ToolRegistryConfig()

        with pytest.raises(ValidationError):
            config.default_timeout_ms = 5


class TestLoadSettings:
    def test_empty_environment(self):
        settings = load_settings({})

        assert settings.twilio is None
        assert settings.ai is None
        assert settings.google_calendar is None
        assert settings.tools.default_timeout_ms == 30000

    def test_twilio_section(self):
        settings = load_settings(
            {
                "RECEPTIONIST_TWILIO_ACCOUNT_SID": "AC123",
                "RECEPTIONIST_TWILIO_AUTH_TOKEN": "secret",
                "RECEPTIONIST_TWILIO_PHONE_NUMBER": "+15551234567",
            }
        )

        assert settings.twilio.account_sid == "AC123"
        assert settings.twilio.auth_token.get_secret_value() == "secret"
        assert "secret" not in repr(settings.twilio)

    def test_ai_section(self):
        settings = load_settings(
            {
                "RECEPTIONIST_AI_API_KEY": "sk-or-abc",
                "RECEPTIONIST_AI_PROVIDER": "openrouter",
                "RECEPTIONIST_AI_MODEL": "anthropic/claude-3-haiku",
            }
        )

        assert settings.ai.provider == "openrouter"
        assert settings.ai.model == "anthropic/claude-3-haiku"

    def test_google_credentials_json(self):
        settings = load_settings(
            {
                "RECEPTIONIST_GOOGLE_CREDENTIALS": '{"client_email": "svc@x.iam.gserviceaccount.com"}',
                "RECEPTIONIST_GOOGLE_CALENDAR_ID": "team@example.com",
            }
        )

        assert settings.google_calendar.calendar_id == "team@example.com"
        assert settings.google_calendar.credentials["client_email"].startswith("svc@")
        assert settings.google_calendar.api_key is None

    def test_tool_settings(self):
        settings = load_settings(
            {
                "RECEPTIONIST_TOOL_TIMEOUT_MS": "5000",
                "RECEPTIONIST_TOOL_VALIDATE_PARAMETERS": "false",
                "RECEPTIONIST_TOOL_CANCEL_ON_TIMEOUT": "TRUE",
            }
        )

        assert settings.tools.default_timeout_ms == 5000
        assert settings.tools.validate_parameters is False
        assert settings.tools.cancel_on_timeout is True
