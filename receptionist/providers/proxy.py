"""
Provider Proxy - lazy, single-flight provider construction.

A proxy makes an external-service client safe to declare eagerly while
constructing it lazily, exactly once, with credential validation before
first real use.

State machine:
    UNLOADED --get_instance()--> INITIALIZING --success--> LOADED
    INITIALIZING --factory/initialize() raises--> UNLOADED (retry allowed)
    LOADED --dispose()--> UNLOADED

Concurrent get_instance() calls made while INITIALIZING all await the same
construction task, so the factory runs at most once per load and every
caller observes the same outcome. validate() is single-flight in the same way.

Usage:
    proxy = ProviderProxy(
        "twilio",
        lambda: TwilioProvider(config),
        TwilioValidator(),
        config,
    )

    await proxy.validate()          # format check, then live check
    twilio = await proxy.get_instance()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .errors import CredentialValidationError, ProviderInitializationError

if TYPE_CHECKING:
    from receptionist.validation.base import CredentialValidator

    from .base import Provider

logger = logging.getLogger(__name__)

P = TypeVar("P", bound="Provider")

ProviderFactory = Callable[[], "Provider | Awaitable[Provider]"]


class ProviderState(str, Enum):
    """Lifecycle state of a proxied provider."""

    UNLOADED = "unloaded"
    INITIALIZING = "initializing"
    LOADED = "loaded"


class ProviderProxy(Generic[P]):
    """
    Lazy-loading wrapper around one provider.

    Owns the provider's factory, validator and (opaque) config. The config
    is only ever passed to the validator's format check.
    """

    def __init__(
        self,
        name: str,
        factory: ProviderFactory,
        validator: CredentialValidator,
        config: Any = None,
    ):
        self._name = name
        self._factory = factory
        self._validator = validator
        self._config = config

        self._state = ProviderState.UNLOADED
        self._instance: P | None = None
        self._init_task: asyncio.Future[P] | None = None
        self._validate_task: asyncio.Future[None] | None = None
        self._validated = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> ProviderState:
        return self._state

    def is_loaded(self) -> bool:
        return self._state is ProviderState.LOADED

    def is_validated(self) -> bool:
        return self._validated

    async def get_instance(self) -> P:
        """
        Return the provider instance, constructing it on first call.

        Raises:
            ProviderInitializationError: If the factory or the instance's
                initialize() fails. State is rolled back so a later call
                retries from scratch.
        """
        if self._state is ProviderState.LOADED and self._instance is not None:
            return self._instance

        if self._init_task is None:
            self._state = ProviderState.INITIALIZING
            self._init_task = asyncio.ensure_future(self._initialize())

        # Shielded so one cancelled caller cannot abort the shared construction
        return await asyncio.shield(self._init_task)

    async def _initialize(self) -> P:
        logger.info(f"[provider_proxy] Lazy loading {self._name} provider")
        try:
            instance = self._factory()
            if inspect.isawaitable(instance):
                instance = await instance
            await instance.initialize()
        except Exception as e:
            logger.error(
                f"[provider_proxy] Failed to initialize {self._name}: {e}",
                exc_info=True,
            )
            self._instance = None
            self._init_task = None
            self._state = ProviderState.UNLOADED
            raise ProviderInitializationError(
                self._name,
                str(e) or "Unknown initialization error",
                {"original_error": repr(e)},
            ) from e

        self._instance = instance
        self._init_task = None
        self._state = ProviderState.LOADED
        logger.info(f"[provider_proxy] {self._name} provider loaded successfully")
        return instance

    async def validate(self) -> None:
        """
        Run format validation, then connection validation.

        A no-op once validated. Concurrent calls share one in-flight
        validation. On success the instance stays loaded.

        Raises:
            CredentialValidationError: If either phase reports invalid, or
                anything else goes wrong while validating.
        """
        if self._validated:
            return

        if self._validate_task is None:
            self._validate_task = asyncio.ensure_future(self._validate())

        await asyncio.shield(self._validate_task)

    async def _validate(self) -> None:
        try:
            if self._config is not None:
                logger.info(f"[provider_proxy] Validating {self._name} credential format")
                format_result = self._validator.validate_format(self._config)
                if not format_result.valid:
                    raise CredentialValidationError(
                        self._name,
                        format_result.error or "Invalid credential format",
                        dict(format_result.details),
                    )

            logger.info(f"[provider_proxy] Validating {self._name} connection")
            instance = await self.get_instance()
            connection_result = await self._validator.validate_connection(instance)
            if not connection_result.valid:
                raise CredentialValidationError(
                    self._name,
                    connection_result.error or "Connection validation failed",
                    dict(connection_result.details),
                )
        except CredentialValidationError:
            raise
        except Exception as e:
            logger.error(f"[provider_proxy] Validation failed for {self._name}: {e}")
            raise CredentialValidationError(
                self._name,
                str(e) or "Unknown validation error",
                {"original_error": repr(e)},
            ) from e
        finally:
            self._validate_task = None

        self._validated = True
        logger.info(f"[provider_proxy] {self._name} credentials validated successfully")

    async def dispose(self) -> None:
        """Shut the instance down and return to UNLOADED. No-op unless loaded."""
        if self._state is not ProviderState.LOADED or self._instance is None:
            return

        logger.info(f"[provider_proxy] Disposing {self._name} provider")
        instance = self._instance
        try:
            await instance.dispose()
        finally:
            self._instance = None
            self._init_task = None
            self._state = ProviderState.UNLOADED
            self._validated = False

    def __repr__(self) -> str:
        return (
            f"<ProviderProxy {self._name} state={self._state.value} "
            f"validated={self._validated}>"
        )
