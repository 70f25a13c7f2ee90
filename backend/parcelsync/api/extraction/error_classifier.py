"""
Error Classifier - Decide whether a per-record failure is permanent
"""

from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

import structlog

from parcelsync.core.exceptions import (
    AddressError,
    NoDataFound,
    ParcelIdentifierError,
    ParcelSyncException,
    PermanentUpstreamError,
)

logger = structlog.get_logger(__name__)


class PermanentErrorCause(str, Enum):
    """Closed set of reasons a record will not succeed on retry"""
    ADDRESS = "address"
    PARCEL_IDENTIFIER = "parcel_identifier"
    CERTIFICATE = "certificate"
    SSL = "ssl"
    HOSTNAME_MISMATCH = "hostname_mismatch"
    MISSING_FIELD = "missing_field"
    PERMISSION_DENIED = "permission_denied"
    EXECUTION_TIME_LIMIT = "execution_time_limit"
    NO_DATA = "no_data"


# Message substrings per cause, matched case-insensitively. This is a
# best-effort heuristic over upstream error text, not a guarantee.
PERMANENT_ERROR_PATTERNS: Dict[PermanentErrorCause, Tuple[str, ...]] = {
    PermanentErrorCause.CERTIFICATE: (
        "certificate verify failed",
        "certificate has expired",
        "self signed certificate",
        "self-signed certificate",
        "unable to get local issuer certificate",
        "cert_",
    ),
    PermanentErrorCause.SSL: (
        "sslerror",
        "ssl:",
        "[ssl",
        "wrong version number",
    ),
    PermanentErrorCause.HOSTNAME_MISMATCH: (
        "hostname mismatch",
        "hostname/ip does not match",
        "altnames",
    ),
    PermanentErrorCause.MISSING_FIELD: (
        "unknown field",
        "field not found",
        "no such field",
        "필드를 찾을 수 없",
    ),
    PermanentErrorCause.PERMISSION_DENIED: (
        "permission denied",
        "do not have permission",
        "insufficient permission",
        "권한이 없",
    ),
    PermanentErrorCause.EXECUTION_TIME_LIMIT: (
        "exceeded maximum execution time",
        "execution time limit",
        "최대 실행 시간",
    ),
}


def match_permanent_pattern(
    message: str,
    patterns: Dict[PermanentErrorCause, Iterable[str]] = PERMANENT_ERROR_PATTERNS
) -> Optional[PermanentErrorCause]:
    """First cause whose substring occurs in ``message``"""
    lowered = (message or "").lower()
    for cause, needles in patterns.items():
        if any(needle.lower() in lowered for needle in needles):
            return cause
    return None


def classify_error(
    error: BaseException,
    permanent_no_data: bool = False
) -> Optional[PermanentErrorCause]:
    """
    Classify a per-record failure.

    Args:
        error: The exception raised while processing a record
        permanent_no_data: Treat NoDataFound as permanent for this domain

    Returns:
        The permanent cause, or None for a transient failure
    """
    if isinstance(error, AddressError):
        return PermanentErrorCause.ADDRESS
    if isinstance(error, ParcelIdentifierError):
        return PermanentErrorCause.PARCEL_IDENTIFIER
    if isinstance(error, NoDataFound) and permanent_no_data:
        return PermanentErrorCause.NO_DATA

    if isinstance(error, PermanentUpstreamError):
        try:
            return PermanentErrorCause(error.cause)
        except ValueError:
            pass

    cause = match_permanent_pattern(str(error))
    if cause is not None:
        logger.debug("Error classified as permanent", cause=cause.value, error=str(error))
    return cause


def is_permanent(error: BaseException, permanent_no_data: bool = False) -> bool:
    if isinstance(error, ParcelSyncException) and error.permanent:
        return True
    return classify_error(error, permanent_no_data) is not None
