"""
OpenAI-compatible model provider.

Covers OpenAI and OpenRouter (same REST surface, different base URL).
Only the lifecycle and a model-listing health check live here.
"""

from __future__ import annotations

import httpx

from .base import ProviderType
from .errors import ProviderAuthenticationError
from .rest import HttpProvider

OPENAI_API_URL = "https://api.openai.com/v1"
OPENROUTER_API_URL = "https://openrouter.ai/api/v1"


class OpenAIProvider(HttpProvider):
    """Model-completion provider speaking the OpenAI REST dialect."""

    provider_type = ProviderType.AI

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        *,
        provider_name: str = "openai",
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self._api_key = api_key
        self._provider_name = provider_name
        self._base_url = base_url or (
            OPENROUTER_API_URL if provider_name == "openrouter" else OPENAI_API_URL
        )
        self.model = model

    @property
    def name(self) -> str:
        return self._provider_name

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    async def health_check(self) -> bool:
        try:
            await self._request("GET", "/models")
        except ProviderAuthenticationError:
            return False
        return True
