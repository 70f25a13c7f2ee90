"""
Record Extraction Package

Retry bookkeeping, failure classification and the sequential pass
orchestrator that enriches store records from the public registries.
"""

from .retry_ledger import RetryLedger, MAX_RETRY_ATTEMPTS, RETRY_RESET_DAYS
from .error_classifier import (
    PermanentErrorCause,
    PERMANENT_ERROR_PATTERNS,
    classify_error,
    is_permanent,
    match_permanent_pattern,
)
from .orchestrator import JobOrchestrator

__all__ = [
    "RetryLedger",
    "MAX_RETRY_ATTEMPTS",
    "RETRY_RESET_DAYS",
    "PermanentErrorCause",
    "PERMANENT_ERROR_PATTERNS",
    "classify_error",
    "is_permanent",
    "match_permanent_pattern",
    "JobOrchestrator",
]
