"""
Base class for HTTP-backed providers.

Owns one httpx.AsyncClient per provider instance: opened in initialize(),
closed in dispose(). Responses are checked and mapped onto the provider
error hierarchy. No retries happen here.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any

import httpx

from .base import BaseProvider
from .errors import ProviderAuthenticationError, ProviderRequestError

logger = logging.getLogger(__name__)


class HttpProvider(BaseProvider):
    """
    Provider talking to a REST API through httpx.

    Subclasses must implement:
    - name
    - base_url
    - _get_auth(): httpx auth (or None)
    - health_check()
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__()
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    @abstractmethod
    def base_url(self) -> str:
        ...

    def _get_auth(self) -> httpx.Auth | None:
        return None

    def _get_headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    async def initialize(self) -> None:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                auth=self._get_auth(),
                headers=self._get_headers(),
                transport=self._transport,
            )
        self._initialized = True
        logger.debug(f"[{self.name}] HTTP client opened for {self.base_url}")

    async def dispose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
        self._initialized = False
        logger.debug(f"[{self.name}] HTTP client closed")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        self.ensure_initialized()
        if self._client is None:
            raise RuntimeError(f"{self.name} provider has no open HTTP client")

        try:
            response = await self._client.request(
                method,
                path,
                params=params,
                data=data,
                json=json,
            )
        except httpx.TimeoutException as e:
            raise ProviderRequestError(f"Request timeout: {e}", self.name) from e
        except httpx.NetworkError as e:
            raise ProviderRequestError(f"Network error: {e}", self.name) from e

        self._check_response(response)
        return response

    def _check_response(self, response: httpx.Response) -> None:
        if response.is_success:
            return

        status = response.status_code
        body = response.text

        if status in (401, 403):
            raise ProviderAuthenticationError(
                "Authentication failed",
                self.name,
                status_code=status,
                response_body=body,
            )

        raise ProviderRequestError(
            f"Request failed: {body[:200]}",
            self.name,
            status_code=status,
            response_body=body,
        )
