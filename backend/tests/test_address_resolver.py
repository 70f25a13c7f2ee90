import pytest

from parcelsync.api.standardization import format_address, resolve
from parcelsync.core.exceptions import AddressError, AddressErrorReason


def test_resolve_main_and_sub_lot():
    address = resolve("강남구 역삼동 123-4")
    assert address.district == "강남구"
    assert address.legal_dong == "역삼동"
    assert address.lot_main == "0123"
    assert address.lot_sub == "0004"


def test_resolve_without_sub_lot():
    address = resolve("강남구 역삼동 123")
    assert address.model_dump() == {
        "district": "강남구",
        "legal_dong": "역삼동",
        "lot_main": "0123",
        "lot_sub": "0000",
    }


def test_resolve_main_lot_only_defaults_sub():
    address = resolve("수원시 팔달구 1")
    assert address.district == "수원시"
    assert address.legal_dong == "팔달구"
    assert address.lot_main == "0001"
    assert address.lot_sub == "0000"


def test_resolve_county_district():
    address = resolve("양평군 양평읍 5-12")
    assert address.district == "양평군"
    assert address.lot_main == "0005"
    assert address.lot_sub == "0012"


def test_resolve_collapses_whitespace():
    address = resolve("  강남구   역삼동\t123-4 ")
    assert address.district == "강남구"
    assert address.legal_dong == "역삼동"
    assert address.lot_main == "0123"


def test_resolve_four_digit_lot_is_unchanged():
    address = resolve("강남구 역삼동 1234-5678")
    assert address.lot_main == "1234"
    assert address.lot_sub == "5678"


@pytest.mark.parametrize("text", ["", "   ", None, 123])
def test_resolve_empty_or_non_string(text):
    with pytest.raises(AddressError) as exc_info:
        resolve(text)
    assert exc_info.value.reason == AddressErrorReason.EMPTY_ADDRESS
    assert exc_info.value.permanent is True


@pytest.mark.parametrize("text", [
    "서울시청",
    "역삼동 123",
    "강남구 역삼동",
    "강남구 역삼동 12a",
    "강남구 역삼동 12345",
    "강남구 역삼동 123-45678",
    "서울특별시 강남구 역삼동 123",
])
def test_resolve_malformed(text):
    with pytest.raises(AddressError) as exc_info:
        resolve(text)
    assert exc_info.value.reason == AddressErrorReason.MALFORMED_ADDRESS
    assert exc_info.value.error_code == "ADDRESS_ERROR"


def test_format_then_resolve_is_identity():
    address = resolve("강남구 역삼동 123-4")
    assert format_address(address) == "강남구 역삼동 0123-0004"
    assert resolve(format_address(address)) == address
