"""
Tests for ProviderProxy: lazy single-flight construction and validation.
"""

import asyncio

import pytest

from conftest import FakeProvider, FakeValidator
from receptionist.providers import (
    CredentialValidationError,
    ProviderInitializationError,
    ProviderProxy,
    ProviderState,
)
from receptionist.validation import ValidationResult


def counting_factory(provider):
    """Factory that records how often it was called."""
    calls = {"count": 0}

    def factory():
        calls["count"] += 1
        return provider

    return factory, calls


# =============================================================================
# Lazy Loading
# =============================================================================


class TestLazyLoading:
    """Tests for deferred construction."""

    def test_starts_unloaded(self):
        factory, calls = counting_factory(FakeProvider())
        proxy = ProviderProxy("fake", factory, FakeValidator())

        assert proxy.state == ProviderState.UNLOADED
        assert proxy.is_loaded() is False
        assert proxy.is_validated() is False
        assert calls["count"] == 0

    @pytest.mark.asyncio
    async def test_get_instance_constructs_and_initializes(self):
        provider = FakeProvider()
        factory, calls = counting_factory(provider)
        proxy = ProviderProxy("fake", factory, FakeValidator())

        instance = await proxy.get_instance()

        assert instance is provider
        assert provider.initialized is True
        assert proxy.state == ProviderState.LOADED
        assert calls["count"] == 1

    @pytest.mark.asyncio
    async def test_second_call_returns_same_instance(self):
        factory, calls = counting_factory(FakeProvider())
        proxy = ProviderProxy("fake", factory, FakeValidator())

        first = await proxy.get_instance()
        second = await proxy.get_instance()

        assert first is second
        assert calls["count"] == 1

    @pytest.mark.asyncio
    async def test_async_factory_is_awaited(self):
        provider = FakeProvider()

        async def factory():
            return provider

        proxy = ProviderProxy("fake", factory, FakeValidator())

        assert await proxy.get_instance() is provider


# =============================================================================
# Single-Flight Construction
# =============================================================================


class TestSingleFlight:
    """Concurrent callers share one construction."""

    @pytest.mark.asyncio
    async def test_concurrent_calls_construct_once(self):
        provider = FakeProvider(init_delay=0.01)
        factory, calls = counting_factory(provider)
        proxy = ProviderProxy("fake", factory, FakeValidator())

        instances = await asyncio.gather(*(proxy.get_instance() for _ in range(10)))

        assert calls["count"] == 1
        assert provider.initialize_calls == 1
        assert all(instance is provider for instance in instances)

    @pytest.mark.asyncio
    async def test_state_is_initializing_while_in_flight(self):
        proxy = ProviderProxy(
            "fake", lambda: FakeProvider(init_delay=0.01), FakeValidator()
        )

        task = asyncio.create_task(proxy.get_instance())
        await asyncio.sleep(0)

        assert proxy.state == ProviderState.INITIALIZING
        await task
        assert proxy.state == ProviderState.LOADED

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_failure(self):
        provider = FakeProvider(fail_initialize=True, init_delay=0.01)
        factory, calls = counting_factory(provider)
        proxy = ProviderProxy("fake", factory, FakeValidator())

        results = await asyncio.gather(
            *(proxy.get_instance() for _ in range(5)),
            return_exceptions=True,
        )

        assert calls["count"] == 1
        assert all(isinstance(r, ProviderInitializationError) for r in results)

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_abort_construction(self):
        provider = FakeProvider(init_delay=0.05)
        proxy = ProviderProxy("fake", lambda: provider, FakeValidator())

        impatient = asyncio.create_task(proxy.get_instance())
        patient = asyncio.create_task(proxy.get_instance())
        await asyncio.sleep(0.01)
        impatient.cancel()

        assert await patient is provider
        assert proxy.is_loaded() is True


# =============================================================================
# Initialization Failure
# =============================================================================


class TestInitializationFailure:
    """Failures roll back and allow retry."""

    @pytest.mark.asyncio
    async def test_factory_error_is_wrapped(self):
        def factory():
            raise ValueError("bad config")

        proxy = ProviderProxy("fake", factory, FakeValidator())

        with pytest.raises(ProviderInitializationError) as exc_info:
            await proxy.get_instance()

        assert "Failed to initialize fake" in str(exc_info.value)
        assert "bad config" in str(exc_info.value)
        assert exc_info.value.code == "PROVIDER_INITIALIZATION_ERROR"
        assert exc_info.value.status_code == 500
        assert proxy.state == ProviderState.UNLOADED

    @pytest.mark.asyncio
    async def test_retry_after_failure(self):
        provider = FakeProvider(fail_initialize=True)
        factory, calls = counting_factory(provider)
        proxy = ProviderProxy("fake", factory, FakeValidator())

        with pytest.raises(ProviderInitializationError):
            await proxy.get_instance()

        provider.fail_initialize = False
        instance = await proxy.get_instance()

        assert instance is provider
        assert calls["count"] == 2
        assert proxy.is_loaded() is True


# =============================================================================
# Validation
# =============================================================================


class TestValidation:
    """Two-phase credential validation."""

    @pytest.mark.asyncio
    async def test_validate_success_loads_instance(self):
        provider = FakeProvider()
        proxy = ProviderProxy("fake", lambda: provider, FakeValidator(), config={"key": "x"})

        await proxy.validate()

        assert proxy.is_validated() is True
        assert proxy.is_loaded() is True
        assert provider.health_calls == 1

    @pytest.mark.asyncio
    async def test_format_failure_never_constructs(self):
        factory, calls = counting_factory(FakeProvider())
        validator = FakeValidator(ValidationResult.fail("Missing key", has_key=False))
        proxy = ProviderProxy("fake", factory, validator, config={})

        with pytest.raises(CredentialValidationError) as exc_info:
            await proxy.validate()

        assert exc_info.value.provider_name == "fake"
        assert exc_info.value.details == "Missing key"
        assert exc_info.value.context["has_key"] is False
        assert exc_info.value.status_code == 401
        assert calls["count"] == 0
        assert proxy.is_validated() is False

    @pytest.mark.asyncio
    async def test_no_config_skips_format_check(self):
        validator = FakeValidator(ValidationResult.fail("would fail"))
        proxy = ProviderProxy("fake", FakeProvider, validator)

        await proxy.validate()

        assert validator.format_calls == 0
        assert proxy.is_validated() is True

    @pytest.mark.asyncio
    async def test_unhealthy_connection_fails(self):
        proxy = ProviderProxy(
            "fake", lambda: FakeProvider(healthy=False), FakeValidator(), config={}
        )

        with pytest.raises(CredentialValidationError) as exc_info:
            await proxy.validate()

        assert exc_info.value.context["health_check_failed"] is True
        assert proxy.is_validated() is False

    @pytest.mark.asyncio
    async def test_initialization_error_becomes_credential_error(self):
        proxy = ProviderProxy(
            "fake", lambda: FakeProvider(fail_initialize=True), FakeValidator(), config={}
        )

        with pytest.raises(CredentialValidationError) as exc_info:
            await proxy.validate()

        assert "original_error" in exc_info.value.context

    @pytest.mark.asyncio
    async def test_validate_is_idempotent(self):
        provider = FakeProvider()
        validator = FakeValidator()
        proxy = ProviderProxy("fake", lambda: provider, validator, config={})

        await proxy.validate()
        await proxy.validate()

        assert validator.format_calls == 1
        assert provider.health_calls == 1

    @pytest.mark.asyncio
    async def test_concurrent_validations_run_once(self):
        provider = FakeProvider(init_delay=0.01)
        validator = FakeValidator()
        proxy = ProviderProxy("fake", lambda: provider, validator, config={})

        await asyncio.gather(proxy.validate(), proxy.validate(), proxy.validate())

        assert validator.format_calls == 1
        assert provider.health_calls == 1
        assert proxy.is_validated() is True

    @pytest.mark.asyncio
    async def test_concurrent_validations_share_failure(self):
        provider = FakeProvider(healthy=False, init_delay=0.01)
        proxy = ProviderProxy("fake", lambda: provider, FakeValidator(), config={})

        results = await asyncio.gather(
            proxy.validate(), proxy.validate(), return_exceptions=True
        )

        assert all(isinstance(r, CredentialValidationError) for r in results)
        assert provider.health_calls == 1

    @pytest.mark.asyncio
    async def test_validate_retries_after_failure(self):
        provider = FakeProvider(healthy=False)
        proxy = ProviderProxy("fake", lambda: provider, FakeValidator(), config={})

        with pytest.raises(CredentialValidationError):
            await proxy.validate()

        provider.healthy = True
        await proxy.validate()

        assert proxy.is_validated() is True
        assert provider.health_calls == 2


# =============================================================================
# Disposal
# =============================================================================


class TestDispose:
    """Tests for dispose()."""

    @pytest.mark.asyncio
    async def test_dispose_unloaded_is_noop(self):
        factory, calls = counting_factory(FakeProvider())
        proxy = ProviderProxy("fake", factory, FakeValidator())

        await proxy.dispose()

        assert calls["count"] == 0
        assert proxy.state == ProviderState.UNLOADED

    @pytest.mark.asyncio
    async def test_dispose_resets_state_and_validation(self):
        provider = FakeProvider()
        proxy = ProviderProxy("fake", lambda: provider, FakeValidator(), config={})
        await proxy.validate()

        await proxy.dispose()

        assert provider.dispose_calls == 1
        assert proxy.state == ProviderState.UNLOADED
        assert proxy.is_validated() is False

    @pytest.mark.asyncio
    async def test_dispose_failure_still_resets_state(self):
        provider = FakeProvider(fail_dispose=True)
        proxy = ProviderProxy("fake", lambda: provider, FakeValidator())
        await proxy.get_instance()

        with pytest.raises(RuntimeError):
            await proxy.dispose()

        assert proxy.state == ProviderState.UNLOADED

    @pytest.mark.asyncio
    async def test_reload_after_dispose_constructs_again(self):
        factory, calls = counting_factory(FakeProvider())
        proxy = ProviderProxy("fake", factory, FakeValidator())

        await proxy.get_instance()
        await proxy.dispose()
        await proxy.get_instance()

        assert calls["count"] == 2
