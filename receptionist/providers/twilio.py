"""
Twilio Provider for Receptionist.

Telephony and SMS client over the Twilio REST API.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .base import ProviderType
from .errors import ProviderAuthenticationError
from .rest import HttpProvider

logger = logging.getLogger(__name__)

TWILIO_API_URL = "https://api.twilio.com/2010-04-01"


class TwilioProvider(HttpProvider):
    """
    Twilio provider.

    Health check fetches the account resource, which fails fast on bad
    credentials and has no side effects.
    """

    provider_type = ProviderType.COMMUNICATION

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        phone_number: str,
        *,
        base_url: str = TWILIO_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._phone_number = phone_number
        self._base_url = base_url

    @property
    def name(self) -> str:
        return "twilio"

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def phone_number(self) -> str:
        return self._phone_number

    def _get_auth(self) -> httpx.Auth:
        return httpx.BasicAuth(self._account_sid, self._auth_token)

    async def health_check(self) -> bool:
        try:
            await self._request("GET", f"/Accounts/{self._account_sid}.json")
        except ProviderAuthenticationError:
            return False
        return True

    async def send_sms(self, to: str, body: str) -> dict[str, Any]:
        """
        Send an SMS from the configured number.

        Returns:
            Twilio message resource (sid, status, ...)
        """
        response = await self._request(
            "POST",
            f"/Accounts/{self._account_sid}/Messages.json",
            data={"From": self._phone_number, "To": to, "Body": body},
        )
        message = response.json()
        logger.info(f"[twilio] Sent SMS {message.get('sid')} (status={message.get('status')})")
        return message
