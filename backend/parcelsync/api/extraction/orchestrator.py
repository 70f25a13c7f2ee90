"""
Job Orchestrator - One sequential enrichment pass over a record set
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

import structlog

from parcelsync.core.config import Settings, settings as default_settings
from parcelsync.core.exceptions import (
    NoDataFound,
    NoMeaningfulData,
    ParcelIdentifierError,
    ParcelSyncException,
    PermanentUpstreamError,
)
from parcelsync.models import (
    AllJobsOutcome,
    Domain,
    JobOutcome,
    Record,
    RetryEntry,
    build_parcel_identifier,
)
from parcelsync.api.standardization import (
    BUILDING_FIELD_MAP,
    build_building_update,
    build_land_update,
    extract_building_items,
    has_building_items,
    has_meaningful_building_data,
    has_meaningful_land_data,
    map_field_names,
    resolve,
    select_latest_field,
    transform_building_item,
    transform_land_item,
)
from .error_classifier import classify_error
from .retry_ledger import RetryLedger

logger = structlog.get_logger(__name__)


class JobOrchestrator:
    """
    Drives enrichment passes for the building and land record sets.

    Records are processed strictly one after another with a fixed pause
    between attempts, and every attempt is reported to the RetryLedger.
    Passes on the same domain are serialized by a per-domain run lock.
    """

    def __init__(
        self,
        store,
        code_resolver,
        building_registry,
        land_registry,
        notifier,
        ledger: RetryLedger,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        self.store = store
        self.code_resolver = code_resolver
        self.building_registry = building_registry
        self.land_registry = land_registry
        self.notifier = notifier
        self.ledger = ledger
        self.settings = settings or default_settings
        self._sleep = sleep
        self._locks: Dict[Domain, asyncio.Lock] = {domain: asyncio.Lock() for domain in Domain}

    def is_running(self, domain: Domain) -> bool:
        """Whether a pass for ``domain`` currently holds the run lock"""
        return self._locks[domain].locked()

    async def run_building_pass(self) -> JobOutcome:
        return await self.run_pass(Domain.BUILDING)

    async def run_land_pass(self) -> JobOutcome:
        return await self.run_pass(Domain.LAND)

    async def run_all_passes(self) -> AllJobsOutcome:
        """Building pass, then land pass"""
        logger.info("Starting all passes")
        building = await self.run_building_pass()
        land = await self.run_land_pass()
        logger.info("All passes completed",
                    building=building.model_dump(exclude={"newly_failed"}),
                    land=land.model_dump(exclude={"newly_failed"}))
        return AllJobsOutcome(building=building, land=land, timestamp=datetime.now(timezone.utc))

    async def run_pass(self, domain: Domain) -> JobOutcome:
        """
        Run one pass over the domain's current view.

        Never raises: a failure to list candidates yields a zero outcome
        carrying the error message.
        """
        async with self._locks[domain]:
            return await self._run_pass(domain)

    async def _run_pass(self, domain: Domain) -> JobOutcome:
        logger.info("Pass started", domain=domain.value)

        try:
            records = await self.store.select_candidates(domain)
        except Exception as e:
            logger.error("Pass aborted, candidates could not be listed", domain=domain.value, error=str(e))
            return JobOutcome(domain=domain, error=str(e))

        outcome = JobOutcome(domain=domain, total=len(records))
        if not records:
            logger.info("No candidate records", domain=domain.value)
            return outcome

        eligible: List[Record] = []
        for record in records:
            if self.ledger.can_retry(record.id):
                eligible.append(record)
            else:
                outcome.skipped += 1
                logger.info("Record skipped, retry budget exhausted", domain=domain.value, record_id=record.id)

        for index, record in enumerate(eligible):
            if index > 0:
                await self._sleep(self.settings.PACING_SECONDS)

            logger.info("Processing record",
                        domain=domain.value,
                        record_id=record.id,
                        position=f"{index + 1}/{len(eligible)}")

            was_exhausted = self._is_exhausted(self.ledger.get(record.id))
            if await self.process_record(record):
                outcome.success += 1
                continue

            outcome.failed += 1
            if not was_exhausted and self._is_exhausted(self.ledger.get(record.id)):
                outcome.newly_failed.append(record)

        if outcome.newly_failed:
            await self._notify(domain, outcome.newly_failed)

        logger.info("Pass completed",
                    domain=domain.value,
                    total=outcome.total,
                    success=outcome.success,
                    failed=outcome.failed,
                    skipped=outcome.skipped,
                    newly_failed=len(outcome.newly_failed),
                    success_rate=outcome.success_rate)
        return outcome

    @staticmethod
    def _is_exhausted(entry: Optional[RetryEntry]) -> bool:
        return entry is not None and entry.failed

    async def process_record(self, record: Record) -> bool:
        """
        Resolve, fetch, transform and write back one record.

        Every outcome is reported to the ledger. Returns True on success.
        """
        logger.info("Record attempt started",
                    domain=record.domain.value,
                    record_id=record.id,
                    attempt=self.ledger.attempts_for(record.id) + 1,
                    max_attempts=self.ledger.max_attempts,
                    address=record.address)
        try:
            if record.domain is Domain.BUILDING:
                fields = await self._building_fields(record)
            else:
                fields = await self._land_fields(record)
            await self.store.update_record(record.domain, record.id, fields)
        except Exception as e:
            self._record_failure(record, e)
            return False

        self.ledger.record_attempt(record.id, True)
        logger.info("Record processed", domain=record.domain.value, record_id=record.id)
        return True

    def _record_failure(self, record: Record, error: Exception) -> Optional[RetryEntry]:
        permanent_no_data = record.domain.value in self.settings.PERMANENT_NO_DATA_DOMAINS
        cause = classify_error(error, permanent_no_data=permanent_no_data)

        if cause is not None and not isinstance(error, ParcelSyncException):
            error = PermanentUpstreamError(str(error), cause=cause.value)

        permanent = cause is not None or (isinstance(error, ParcelSyncException) and error.permanent)
        logger.error("Record attempt failed",
                     domain=record.domain.value,
                     record_id=record.id,
                     error=str(error),
                     error_code=getattr(error, "error_code", type(error).__name__),
                     permanent=permanent,
                     cause=cause.value if cause else None)
        return self.ledger.record_attempt(record.id, False, permanent=permanent)

    async def _building_fields(self, record: Record) -> Dict[str, Any]:
        address = resolve(record.address)
        codes = await self.code_resolver.resolve_codes(address, record.id)
        payload = await self.building_registry.fetch(codes)

        if not has_building_items(payload):
            raise NoDataFound("Building registry returned no items", details={"record_id": record.id})
        items = extract_building_items(payload)
        if not items:
            raise NoDataFound("Building registry returned an empty item list", details={"record_id": record.id})

        data = map_field_names(transform_building_item(items[0]), BUILDING_FIELD_MAP)
        if not has_meaningful_building_data(data):
            raise NoMeaningfulData("No meaningful building data", details={"record_id": record.id})

        update = build_building_update(data)
        if not update:
            raise NoMeaningfulData("Nothing left to write for building record", details={"record_id": record.id})
        return update

    async def _land_fields(self, record: Record) -> Dict[str, Any]:
        address = resolve(record.address)
        codes = await self.code_resolver.resolve_codes(address, record.id)

        pnu = build_parcel_identifier(codes)
        if not pnu:
            raise ParcelIdentifierError(details={"record_id": record.id})

        payload = await self.land_registry.fetch(pnu)
        item = select_latest_field(payload.get("fields") or [])
        if item is None:
            raise NoDataFound("Land registry returned no field entries", details={"record_id": record.id, "pnu": pnu})

        data = transform_land_item(item)
        if not has_meaningful_land_data(data):
            raise NoMeaningfulData("No meaningful land data", details={"record_id": record.id, "pnu": pnu})

        update = build_land_update(data)
        if not update:
            raise NoMeaningfulData("Nothing left to write for land record", details={"record_id": record.id, "pnu": pnu})
        return update

    async def _notify(self, domain: Domain, records: List[Record]):
        try:
            await self.notifier.notify(domain, records)
        except Exception as e:
            logger.error("Notifier raised, notification dropped", domain=domain.value, error=str(e))
