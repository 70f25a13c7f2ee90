"""
Recurring trigger for enrichment passes
"""

import asyncio
import threading
from concurrent.futures import Future
from typing import Dict, List, Optional

import schedule
import structlog

from parcelsync.core.config import Settings, settings as default_settings
from parcelsync.models import Domain, JobOutcome, Record

logger = structlog.get_logger(__name__)


class SchedulerGate:
    """
    Cheap per-cycle check deciding which passes to run.

    Only a prefix of each view is sampled, so an open gate does not
    promise eligible records; the orchestrator filters the full set.
    """

    def __init__(self, store, ledger, orchestrator, settings: Optional[Settings] = None):
        self.store = store
        self.ledger = ledger
        self.orchestrator = orchestrator
        self.settings = settings or default_settings

    def _has_eligible(self, samples: List[Record]) -> bool:
        return any(self.ledger.can_retry(record.id) for record in samples)

    async def eligible_domains(self) -> List[Domain]:
        """Domains whose sampled prefix holds at least one eligible record"""
        eligible = []
        for domain in Domain:
            samples = await self.store.select_candidates(domain, max_records=self.settings.SCHEDULER_SAMPLE_SIZE)
            if samples and self._has_eligible(samples):
                eligible.append(domain)
        return eligible

    async def run_cycle(self) -> Dict[Domain, JobOutcome]:
        """
        Sample, then run a pass for each domain that needs one.

        Errors are logged and end the cycle; they never reach the timer.
        """
        logger.debug("Checking for pending records")
        try:
            domains = await self.eligible_domains()
        except Exception as e:
            logger.error("Sampling failed, cycle skipped", error=str(e))
            return {}

        if not domains:
            logger.debug("No eligible records sampled, cycle skipped")
            return {}

        logger.info("Eligible records found, running passes", domains=[domain.value for domain in domains])
        outcomes: Dict[Domain, JobOutcome] = {}
        for domain in domains:
            if self.orchestrator.is_running(domain):
                logger.info("Pass already running, domain skipped this cycle", domain=domain.value)
                continue
            try:
                outcomes[domain] = await self.orchestrator.run_pass(domain)
            except Exception as e:
                logger.error("Scheduled pass failed", domain=domain.value, error=str(e))
        return outcomes


class JobScheduler:
    """
    Fires the gate every SCHEDULER_INTERVAL_SECONDS from a daemon thread.

    The thread never touches the retry ledger itself: each cycle is handed
    to the application event loop and awaited before the next one starts.
    """

    def __init__(
        self,
        gate: SchedulerGate,
        loop: asyncio.AbstractEventLoop,
        settings: Optional[Settings] = None,
        poll_seconds: float = 1.0,
        join_timeout: float = 10.0
    ):
        self.gate = gate
        self.loop = loop
        self.settings = settings or default_settings
        self.poll_seconds = poll_seconds
        self.join_timeout = join_timeout
        self.scheduler = schedule.Scheduler()
        self.stop_flag = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._pending: Optional[Future] = None

    def start(self):
        """Start the scheduler"""
        interval = self.settings.SCHEDULER_INTERVAL_SECONDS
        self.scheduler.every(interval).seconds.do(self._run_cycle)
        logger.info("Scheduled enrichment cycle", interval_seconds=interval)

        # Start the scheduler in a separate thread
        self._thread = threading.Thread(target=self._run_scheduler, name="parcelsync-scheduler")
        self._thread.daemon = True
        self._thread.start()
        logger.info("Job scheduler started")

    def stop(self):
        """
        Stop the scheduler.

        A cycle still running on the event loop is cancelled, and the
        thread is joined so no pass outlives the HTTP clients.
        """
        self.stop_flag.set()
        self.scheduler.clear()

        pending = self._pending
        if pending is not None and pending.cancel():
            logger.info("In-flight cycle cancelled")

        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(self.join_timeout)
            if self._thread.is_alive():
                logger.warning("Scheduler thread did not exit in time", timeout=self.join_timeout)
        logger.info("Job scheduler stopped")

    def _run_scheduler(self):
        """Run the scheduler loop"""
        while not self.stop_flag.is_set():
            self.scheduler.run_pending()
            self.stop_flag.wait(self.poll_seconds)

    def _run_cycle(self):
        """Run one gate cycle on the event loop and wait for it"""
        if self.stop_flag.is_set() or self.loop.is_closed():
            return
        try:
            future = asyncio.run_coroutine_threadsafe(self.gate.run_cycle(), self.loop)
            self._pending = future
            future.result()
        except Exception as e:
            logger.error("Error during scheduled cycle", error=str(e))
        finally:
            self._pending = None
