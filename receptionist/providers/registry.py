"""
Provider Registry for Receptionist.

The single place providers are looked up by name. Providers are
registered as lazy proxies; nothing is constructed until first use or
until validate_all() runs at startup.

Usage:
    registry = ProviderRegistry()
    registry.register(
        "twilio",
        lambda: TwilioProvider(config),
        TwilioValidator(),
        config,
    )

    await registry.validate_all()      # fail fast on bad credentials

    twilio = await registry.get("twilio")
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from .errors import ProviderNotConfiguredError
from .health import HealthCheckResult, HealthStatus, ProviderHealthChecker
from .proxy import ProviderProxy

if TYPE_CHECKING:
    from receptionist.validation.base import CredentialValidator

    from .proxy import ProviderFactory

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderRegistry:
    """
    Named collection of ProviderProxies.

    Registries are plain instances owned by the application's composition
    root (see receptionist.bootstrap); there is no process-wide registry.
    """

    def __init__(self, health_checker: ProviderHealthChecker | None = None):
        self._providers: dict[str, ProviderProxy[Any]] = {}
        self._validated = False
        self._health_checker = health_checker or ProviderHealthChecker()

    # ==================== Registration ====================

    def register(
        self,
        name: str,
        factory: ProviderFactory,
        validator: CredentialValidator,
        config: Any = None,
    ) -> None:
        """
        Register a provider without constructing it.

        Re-registering an existing name replaces the previous proxy (last
        write wins) so configuration can be reloaded.

        Args:
            name: Unique provider name
            factory: Zero-argument callable returning the provider (or an
                awaitable of it)
            validator: Credential validator for this provider
            config: Provider configuration, used only for format validation
        """
        if name in self._providers:
            logger.warning(f"[provider_registry] Provider '{name}' already registered, replacing")

        self._providers[name] = ProviderProxy(name, factory, validator, config)
        logger.info(f"[provider_registry] Registered provider: {name}")

    register_if_configured = register

    async def unregister(self, name: str) -> None:
        """Dispose and remove a single provider. Unknown names are ignored."""
        proxy = self._providers.get(name)
        if proxy is None:
            return

        await proxy.dispose()
        del self._providers[name]
        self._health_checker.forget(name)
        logger.info(f"[provider_registry] Unregistered provider: {name}")

    # ==================== Lookup ====================

    async def get(self, name: str) -> Any:
        """
        Get a provider instance, constructing it on first access.

        Raises:
            ProviderNotConfiguredError: If name was never registered
            ProviderInitializationError: If construction fails
        """
        proxy = self._providers.get(name)
        if proxy is None:
            raise ProviderNotConfiguredError(name)
        return await proxy.get_instance()

    async def get_typed(self, name: str, provider_type: type[T]) -> T:
        """Like get(), but checks the instance type."""
        instance = await self.get(name)
        if not isinstance(instance, provider_type):
            raise TypeError(
                f"Provider '{name}' is {type(instance).__name__}, "
                f"expected {provider_type.__name__}"
            )
        return instance

    def has(self, name: str) -> bool:
        return name in self._providers

    def list(self) -> list[str]:
        return list(self._providers.keys())

    def count(self) -> int:
        return len(self._providers)

    def is_loaded(self, name: str) -> bool:
        proxy = self._providers.get(name)
        return proxy.is_loaded() if proxy else False

    def is_validated(self, name: str) -> bool:
        proxy = self._providers.get(name)
        return proxy.is_validated() if proxy else False

    @property
    def validated(self) -> bool:
        """Whether validate_all() has completed successfully."""
        return self._validated

    # ==================== Validation ====================

    async def validate_all(self) -> None:
        """
        Validate every registered provider concurrently.

        Idempotent: after one successful run, later calls return at once.
        Validations already in flight are never cancelled; the call
        settles only after all of them have finished, then re-raises the
        first failure in registration order.

        Raises:
            CredentialValidationError: If any provider fails validation
        """
        if self._validated:
            logger.warning("[provider_registry] Providers already validated")
            return

        proxies = list(self._providers.values())
        logger.info(f"[provider_registry] Validating {len(proxies)} provider(s)")

        results = await asyncio.gather(
            *(proxy.validate() for proxy in proxies),
            return_exceptions=True,
        )

        first_error: BaseException | None = None
        for proxy, result in zip(proxies, results):
            if isinstance(result, BaseException):
                logger.error(
                    f"[provider_registry] Validation failed for {proxy.name}: {result}"
                )
                if first_error is None:
                    first_error = result

        if first_error is not None:
            raise first_error

        self._validated = True
        logger.info("[provider_registry] All providers validated successfully")

    # ==================== Health ====================

    async def check_health(self) -> list[HealthCheckResult]:
        """
        Check health of loaded providers concurrently.

        Unloaded providers are skipped, never constructed.
        """
        loaded = [
            (name, proxy)
            for name, proxy in self._providers.items()
            if proxy.is_loaded()
        ]
        if not loaded:
            return []

        instances = [(name, await proxy.get_instance()) for name, proxy in loaded]
        return list(
            await asyncio.gather(
                *(self._health_checker.check(name, instance) for name, instance in instances)
            )
        )

    def get_health_summary(self) -> dict[str, Any]:
        """Summarize the last health check of each provider."""
        checks = self._health_checker.get_all_checks()
        unhealthy = sum(1 for c in checks if c.status == HealthStatus.UNHEALTHY)
        degraded = sum(1 for c in checks if c.status == HealthStatus.DEGRADED)

        if unhealthy:
            overall = HealthStatus.UNHEALTHY
        elif degraded:
            overall = HealthStatus.DEGRADED
        elif checks:
            overall = HealthStatus.HEALTHY
        else:
            overall = HealthStatus.UNKNOWN

        return {
            "total_providers": self.count(),
            "checked": len(checks),
            "healthy": sum(1 for c in checks if c.status == HealthStatus.HEALTHY),
            "degraded": degraded,
            "unhealthy": unhealthy,
            "overall_status": overall.value,
            "providers": [c.to_dict() for c in checks],
        }

    # ==================== Lifecycle ====================

    async def dispose_all(self) -> None:
        """
        Dispose every loaded provider, best-effort.

        A failure disposing one provider is logged and does not stop the
        others. Clears the registry and its validated flag.
        """
        proxies = list(self._providers.values())
        logger.info(f"[provider_registry] Disposing {len(proxies)} provider(s)")

        results = await asyncio.gather(
            *(proxy.dispose() for proxy in proxies),
            return_exceptions=True,
        )
        for proxy, result in zip(proxies, results):
            if isinstance(result, Exception):
                logger.error(f"[provider_registry] Error disposing {proxy.name}: {result}")

        self._providers.clear()
        self._health_checker.clear()
        self._validated = False
        logger.info("[provider_registry] All providers disposed")

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, name: str) -> bool:
        return name in self._providers

    def __repr__(self) -> str:
        return f"<ProviderRegistry providers={list(self._providers.keys())}>"
