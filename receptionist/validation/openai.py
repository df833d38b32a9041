"""
Model-provider credential validator (OpenAI, OpenRouter, Anthropic, Google).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .base import BaseCredentialValidator, ValidationResult

if TYPE_CHECKING:
    from receptionist.config.schemas import AIModelConfig

logger = logging.getLogger(__name__)

# provider -> (required key prefix, minimum key length)
API_KEY_RULES: dict[str, tuple[str, int]] = {
    "openai": ("sk-", 20),
    "openrouter": ("sk-or-", 0),
    "anthropic": ("sk-ant-", 0),
    "google": ("", 10),
}


class OpenAIValidator(BaseCredentialValidator):
    service_name = "openai"

    def validate_format(self, config: AIModelConfig) -> ValidationResult:
        api_key = config.api_key.get_secret_value()

        if not api_key:
            return ValidationResult.fail(
                "Missing API key for AI provider", provider=config.provider
            )

        if not config.model or not config.model.strip():
            return ValidationResult.fail(
                "Missing model name for AI provider", provider=config.provider
            )

        rule = API_KEY_RULES.get(config.provider)
        if rule is None:
            logger.warning(
                f"[OpenAIValidator] Unknown provider type: {config.provider}, "
                "skipping key format validation"
            )
            return ValidationResult.ok()

        prefix, min_length = rule
        if prefix and not api_key.startswith(prefix):
            return ValidationResult.fail(
                f'Invalid {config.provider} API key format (should start with "{prefix}")',
                key_prefix=api_key[: len(prefix)],
            )
        if len(api_key) < min_length:
            return ValidationResult.fail(
                f"{config.provider} API key appears too short",
                length=len(api_key),
            )

        logger.info(f"[OpenAIValidator] Format validation passed for {config.provider}")
        return ValidationResult.ok()

    def unhealthy_message(self, provider_name: str) -> str:
        return (
            f"{provider_name} credentials are invalid or API quota exceeded. "
            "Please verify your API key."
        )

    def explain_error(self, provider_name: str, error: Exception) -> str:
        message = str(error).lower()
        if "rate limit" in message or "429" in message:
            return (
                f"{provider_name} rate limit exceeded. "
                "Please try again later or upgrade your plan."
            )
        if "quota" in message or "insufficient" in message:
            return (
                f"{provider_name} quota exceeded. "
                "Please check your billing and usage limits."
            )
        if "503" in message or "service unavailable" in message:
            return (
                f"{provider_name} service is temporarily unavailable. "
                "Please try again later."
            )
        return super().explain_error(provider_name, error)
