"""
Process-wide service instances shared by the scheduler and the endpoints
"""

from functools import lru_cache

from parcelsync.core.config import settings
from parcelsync.api.clients import (
    AirtableStore,
    BuildingRegistryClient,
    CodeResolverClient,
    EmailNotifier,
    LandRegistryClient,
)
from parcelsync.api.extraction import JobOrchestrator, RetryLedger


@lru_cache()
def get_store() -> AirtableStore:
    return AirtableStore()


@lru_cache()
def get_retry_ledger() -> RetryLedger:
    """The single in-memory ledger for this process"""
    return RetryLedger(
        max_attempts=settings.MAX_RETRY_ATTEMPTS,
        reset_days=settings.RETRY_RESET_DAYS
    )


@lru_cache()
def get_code_resolver() -> CodeResolverClient:
    return CodeResolverClient()


@lru_cache()
def get_building_registry() -> BuildingRegistryClient:
    return BuildingRegistryClient()


@lru_cache()
def get_land_registry() -> LandRegistryClient:
    return LandRegistryClient()


@lru_cache()
def get_notifier() -> EmailNotifier:
    return EmailNotifier(settings)


@lru_cache()
def get_orchestrator() -> JobOrchestrator:
    return JobOrchestrator(
        store=get_store(),
        code_resolver=get_code_resolver(),
        building_registry=get_building_registry(),
        land_registry=get_land_registry(),
        notifier=get_notifier(),
        ledger=get_retry_ledger(),
        settings=settings,
    )


async def close_clients():
    """Close every HTTP client created so far"""
    for factory in (get_store, get_code_resolver, get_building_registry, get_land_registry):
        if factory.cache_info().currsize:
            await factory().close()
