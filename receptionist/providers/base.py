"""
Provider Protocol for Receptionist.

A provider is a wrapped external-service client (model completion,
telephony, calendar, email). The registry only relies on its lifecycle:
initialize, dispose and a boolean health check.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Protocol, runtime_checkable


class ProviderType(str, Enum):
    """Broad category of an external service."""

    AI = "ai"
    COMMUNICATION = "communication"
    CALENDAR = "calendar"
    EMAIL = "email"
    CUSTOM = "custom"


@runtime_checkable
class Provider(Protocol):
    """
    Protocol for providers managed by the ProviderRegistry.

    Implementations must provide:
    - name: Provider identifier
    - initialize(): Bring the client up (open connections, etc.)
    - dispose(): Release resources
    - health_check(): Cheap live check, True when usable
    """

    @property
    def name(self) -> str:
        """Provider name for logging and lookup."""
        ...

    async def initialize(self) -> None:
        ...

    async def dispose(self) -> None:
        ...

    async def health_check(self) -> bool:
        ...


class BaseProvider(ABC):
    """
    Base class for provider implementations.

    Tracks the initialized flag and offers ensure_initialized() for
    operations that must not run before initialize().
    """

    provider_type: ProviderType = ProviderType.CUSTOM

    def __init__(self) -> None:
        self._initialized = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass

    @property
    def initialized(self) -> bool:
        return self._initialized

    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def dispose(self) -> None:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    def ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                f"{self.name} provider not initialized. Call initialize() first."
            )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
