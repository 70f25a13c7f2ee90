"""
Data models for the parcel sync service
"""

from .records import (
    AdministrativeCodes,
    AllJobsOutcome,
    Domain,
    JobOutcome,
    NormalizedAddress,
    Record,
    RetryEntry,
    RetryStatus,
    RetrySummary,
    build_parcel_identifier,
)

__all__ = [
    'AdministrativeCodes',
    'AllJobsOutcome',
    'Domain',
    'JobOutcome',
    'NormalizedAddress',
    'Record',
    'RetryEntry',
    'RetryStatus',
    'RetrySummary',
    'build_parcel_identifier',
]
