"""
Pytest configuration and fixtures for Receptionist tests.
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from receptionist.providers import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from receptionist.config.schemas import TwilioConfig  # noqa: E402
from receptionist.providers.base import BaseProvider  # noqa: E402
from receptionist.tools.base import Channel, ExecutionContext  # noqa: E402
from receptionist.validation.base import BaseCredentialValidator, ValidationResult  # noqa: E402


class FakeProvider(BaseProvider):
    """In-memory provider recording its lifecycle calls."""

    def __init__(
        self,
        name: str = "fake",
        *,
        healthy: bool = True,
        fail_initialize: bool = False,
        fail_dispose: bool = False,
        init_delay: float = 0.0,
    ):
        super().__init__()
        self._name = name
        self.healthy = healthy
        self.fail_initialize = fail_initialize
        self.fail_dispose = fail_dispose
        self.init_delay = init_delay
        self.initialize_calls = 0
        self.dispose_calls = 0
        self.health_calls = 0

    @property
    def name(self) -> str:
        return self._name

    async def initialize(self) -> None:
        self.initialize_calls += 1
        await asyncio.sleep(self.init_delay)
        if self.fail_initialize:
            raise RuntimeError(f"{self._name} failed to start")
        self._initialized = True

    async def dispose(self) -> None:
        self.dispose_calls += 1
        if self.fail_dispose:
            raise RuntimeError(f"{self._name} failed to stop")
        self._initialized = False

    async def health_check(self) -> bool:
        self.health_calls += 1
        return self.healthy


class FakeValidator(BaseCredentialValidator):
    """Validator whose format check result is fixed up front."""

    service_name = "fake"

    def __init__(self, format_result: ValidationResult | None = None):
        self.format_result = format_result or ValidationResult.ok()
        self.format_calls = 0

    def validate_format(self, config):
        self.format_calls += 1
        return self.format_result


@pytest.fixture
def sms_context():
    """Execution context for an SMS conversation."""
    return ExecutionContext(channel=Channel.SMS, conversation_id="conv-sms-1")


@pytest.fixture
def call_context():
    """Execution context for a voice call."""
    return ExecutionContext(channel=Channel.CALL, conversation_id="conv-call-1", call_sid="CA123")


@pytest.fixture
def twilio_config():
    """Well-formed Twilio credentials."""
    return TwilioConfig(
        account_sid="AC" + "0" * 32,
        auth_token="secret-token",
        phone_number="+15551234567",
    )
