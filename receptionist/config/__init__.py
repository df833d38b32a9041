"""
Receptionist Configuration.

Pydantic schemas for provider credentials and tool execution settings,
plus an environment loader.
"""

from .schemas import (
    AIModelConfig,
    GoogleCalendarConfig,
    ReceptionistSettings,
    ToolRegistryConfig,
    TwilioConfig,
)
from .settings import load_settings

__all__ = [
    "AIModelConfig",
    "GoogleCalendarConfig",
    "ReceptionistSettings",
    "ToolRegistryConfig",
    "TwilioConfig",
    "load_settings",
]
