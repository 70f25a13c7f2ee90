"""
Retry Ledger - Per-record retry budget and terminal-failure tracking
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

import structlog

from parcelsync.models import RetryEntry, RetryStatus, RetrySummary

logger = structlog.get_logger(__name__)

MAX_RETRY_ATTEMPTS = 5
RETRY_RESET_DAYS = 7


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RetryLedger:
    """
    In-memory retry state keyed by record id.

    A record with no entry is Fresh. Failures create an entry and count
    attempts (Retrying) until the budget is spent (Exhausted). Success at
    any point deletes the entry, and an Exhausted entry older than the
    reset window is deleted the next time it is checked.

    Nothing is persisted; a restart forgets every entry. All methods must
    be called from the same thread (the application event loop).
    """

    def __init__(
        self,
        max_attempts: int = MAX_RETRY_ATTEMPTS,
        reset_days: int = RETRY_RESET_DAYS,
        clock: Callable[[], datetime] = utc_now
    ):
        self.max_attempts = max_attempts
        self.reset_days = reset_days
        self._clock = clock
        self._entries: Dict[str, RetryEntry] = {}

        logger.info("Retry ledger initialized",
                    max_attempts=max_attempts,
                    reset_days=reset_days)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._entries

    def get(self, record_id: str) -> Optional[RetryEntry]:
        """Copy of the current entry, or None for a Fresh record"""
        entry = self._entries.get(record_id)
        return entry.model_copy() if entry else None

    def attempts_for(self, record_id: str) -> int:
        entry = self._entries.get(record_id)
        return entry.attempts if entry else 0

    def can_retry(self, record_id: str) -> bool:
        """
        Whether the record may be processed now.

        An Exhausted entry whose reset window has elapsed is removed here,
        so this read can re-admit a record.
        """
        entry = self._entries.get(record_id)
        if entry is None:
            return True

        if entry.failed:
            if self._clock() - entry.last_attempt >= timedelta(days=self.reset_days):
                del self._entries[record_id]
                logger.info("Retry counter reset after reset window",
                            record_id=record_id,
                            reset_days=self.reset_days)
                return True
            return False

        return entry.attempts < self.max_attempts

    def record_attempt(
        self,
        record_id: str,
        success: bool,
        permanent: bool = False
    ) -> Optional[RetryEntry]:
        """
        Record the outcome of one processing attempt.

        Args:
            record_id: Store record id
            success: Whether the record was written back
            permanent: The failure cannot be fixed by retrying; exhausts
                the budget immediately

        Returns:
            Copy of the resulting entry, None after a success
        """
        if success:
            if self._entries.pop(record_id, None) is not None:
                logger.info("Record succeeded, retry history cleared", record_id=record_id)
            return None

        now = self._clock()
        entry = self._entries.get(record_id)
        if entry is None:
            entry = RetryEntry(record_id=record_id, attempts=0, last_attempt=now)
            self._entries[record_id] = entry

        entry.last_attempt = now
        if permanent:
            entry.attempts = self.max_attempts
            entry.failed = True
            logger.warning("Permanent failure, record exhausted", record_id=record_id)
        else:
            entry.attempts += 1
            if entry.attempts >= self.max_attempts:
                entry.failed = True
                logger.warning("Record reached max retry attempts",
                               record_id=record_id,
                               attempts=entry.attempts)

        logger.info("Retry attempt recorded",
                    record_id=record_id,
                    attempts=entry.attempts,
                    max_attempts=self.max_attempts,
                    failed=entry.failed)
        return entry.model_copy()

    def reset(self, record_id: str) -> bool:
        """Operator reset for one record; False when nothing was tracked"""
        if self._entries.pop(record_id, None) is None:
            return False
        logger.info("Retry history reset manually", record_id=record_id)
        return True

    def reset_all(self) -> int:
        """Operator reset for every record; returns how many were cleared"""
        count = len(self._entries)
        self._entries.clear()
        logger.info("All retry history reset manually", count=count)
        return count

    def status(self) -> RetryStatus:
        """Snapshot of waiting and exhausted entries"""
        waiting = [entry.model_copy() for entry in self._entries.values() if not entry.failed]
        max_reached = [entry.model_copy() for entry in self._entries.values() if entry.failed]
        return RetryStatus(
            summary=RetrySummary(
                total_tracked=len(self._entries),
                waiting=len(waiting),
                max_reached=len(max_reached),
                max_retry_attempts=self.max_attempts,
                retry_reset_days=self.reset_days,
            ),
            waiting=waiting,
            max_reached=max_reached,
        )
