from enum import Enum
from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class ParcelSyncException(Exception):
    """Base exception for the parcel sync service."""

    # Permanent failures exhaust a record's retry budget immediately
    permanent: bool = False

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class AddressErrorReason(str, Enum):
    """Why a lot address could not be resolved"""
    EMPTY_ADDRESS = "EmptyAddress"
    MALFORMED_ADDRESS = "MalformedAddress"


class AddressError(ParcelSyncException):
    """The free-text lot address is empty or does not match the lot pattern."""
    permanent = True

    def __init__(self, reason: AddressErrorReason, original_text: Any):
        self.reason = reason
        self.original_text = original_text
        super().__init__(
            f"{reason.value}: {original_text!r}",
            error_code="ADDRESS_ERROR",
            details={"reason": reason.value, "original_text": original_text}
        )


class ParcelIdentifierError(ParcelSyncException):
    """A parcel identifier (PNU) could not be built from the resolved codes."""
    permanent = True

    def __init__(self, message: str = "Parcel identifier could not be built", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="PNU_ERROR", details=details)


class CodeResolutionError(ParcelSyncException):
    """The code-resolution service failed or returned no codes."""

    def __init__(self, message: str, error_code: str = "CODE_RESOLUTION_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code=error_code, details=details)


class RegistryUnavailable(ParcelSyncException):
    """A public registry could not be reached or answered with an error status."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="REGISTRY_UNAVAILABLE", details=details)


class NoDataFound(ParcelSyncException):
    """The registry answered, but without any data for the parcel."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="NO_DATA_FOUND", details=details)


class NoMeaningfulData(ParcelSyncException):
    """The transformed result carries none of the fields worth writing back."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="NO_MEANINGFUL_DATA", details=details)


class StoreError(ParcelSyncException):
    """Reading from or writing to the tabular store failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="STORE_ERROR", details=details)


class PermanentUpstreamError(ParcelSyncException):
    """An upstream failure whose message matched the permanent-error denylist."""
    permanent = True

    def __init__(self, message: str, cause: Optional[str] = None):
        self.cause = cause
        super().__init__(message, error_code="PERMANENT_UPSTREAM_ERROR", details={"cause": cause})


# HTTP Exception handlers
def create_http_exception(
    status_code: int,
    message: str,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> HTTPException:
    """Create an HTTP exception with structured error response."""

    error_detail = {
        "message": message,
        "error_code": error_code,
        "details": details or {}
    }

    return HTTPException(
        status_code=status_code,
        detail=error_detail
    )


def internal_server_exception(message: str = "Internal server error", details: Optional[Dict[str, Any]] = None) -> HTTPException:
    return create_http_exception(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=message,
        error_code="INTERNAL_SERVER_ERROR",
        details=details
    )
