import ssl

import httpx
import pytest

from parcelsync.api.extraction import (
    PermanentErrorCause,
    classify_error,
    is_permanent,
    match_permanent_pattern,
)
from parcelsync.core.exceptions import (
    AddressError,
    AddressErrorReason,
    CodeResolutionError,
    NoDataFound,
    ParcelIdentifierError,
    PermanentUpstreamError,
    RegistryUnavailable,
    StoreError,
)


def test_address_error_is_permanent():
    error = AddressError(AddressErrorReason.MALFORMED_ADDRESS, "역삼동")
    assert classify_error(error) == PermanentErrorCause.ADDRESS
    assert is_permanent(error) is True


def test_parcel_identifier_error_is_permanent():
    assert classify_error(ParcelIdentifierError()) == PermanentErrorCause.PARCEL_IDENTIFIER


def test_no_data_is_transient_by_default():
    error = NoDataFound("No land data for 2024")
    assert classify_error(error) is None
    assert is_permanent(error) is False


def test_no_data_can_be_made_permanent():
    error = NoDataFound("No land data for 2024")
    assert classify_error(error, permanent_no_data=True) == PermanentErrorCause.NO_DATA


@pytest.mark.parametrize("error", [
    RegistryUnavailable("Land registry request failed: ConnectTimeout: timed out"),
    CodeResolutionError("Code resolution failed: HTTP 503: Service Unavailable"),
    StoreError("Failed to update record rec1: HTTP 429: rate limited"),
    httpx.ReadTimeout("read timed out"),
    ValueError("unexpected"),
])
def test_transient_errors(error):
    assert classify_error(error) is None


@pytest.mark.parametrize("message,cause", [
    ("[SSL: CERTIFICATE_VERIFY_FAILED] certificate verify failed: unable to get local issuer certificate",
     PermanentErrorCause.CERTIFICATE),
    ("certificate has expired", PermanentErrorCause.CERTIFICATE),
    ("[SSL: WRONG_VERSION_NUMBER] wrong version number", PermanentErrorCause.SSL),
    ("Hostname mismatch, certificate is not valid for 'api.example.com'", PermanentErrorCause.HOSTNAME_MISMATCH),
    ("HTTP 422: Unknown field name: \"층수\"", PermanentErrorCause.MISSING_FIELD),
    ("HTTP 403: You do not have permission to perform this operation", PermanentErrorCause.PERMISSION_DENIED),
    ("Exception: Exceeded maximum execution time", PermanentErrorCause.EXECUTION_TIME_LIMIT),
    ("스크립트 최대 실행 시간을 초과했습니다", PermanentErrorCause.EXECUTION_TIME_LIMIT),
])
def test_permanent_message_patterns(message, cause):
    assert match_permanent_pattern(message) == cause
    assert classify_error(RuntimeError(message)) == cause


def test_pattern_inside_domain_error_message():
    error = CodeResolutionError("Code resolution failed: ConnectError: [SSL: CERTIFICATE_VERIFY_FAILED] certificate verify failed")
    assert classify_error(error) == PermanentErrorCause.CERTIFICATE


def test_ssl_exception_type():
    error = ssl.SSLCertVerificationError(1, "[SSL: CERTIFICATE_VERIFY_FAILED] certificate verify failed")
    assert is_permanent(error) is True


def test_permanent_upstream_error_keeps_cause():
    error = PermanentUpstreamError("boom", cause=PermanentErrorCause.PERMISSION_DENIED.value)
    assert classify_error(error) == PermanentErrorCause.PERMISSION_DENIED
    assert is_permanent(PermanentUpstreamError("boom")) is True


def test_custom_pattern_table():
    patterns = {PermanentErrorCause.MISSING_FIELD: ("column gone",)}
    assert match_permanent_pattern("Column gone from table", patterns) == PermanentErrorCause.MISSING_FIELD
    assert match_permanent_pattern("permission denied", patterns) is None
