"""
Address Resolver - Split a free-text lot address into its administrative parts
"""

import re
from typing import Any

from parcelsync.core.exceptions import AddressError, AddressErrorReason
from parcelsync.models import NormalizedAddress

# "<구|시|군> <법정동> <번>[-<지>]", lot numbers are at most 4 digits
LOT_ADDRESS_PATTERN = re.compile(r"^(\S+구|\S+시|\S+군) (\S+) (\d{1,4})(?:-(\d{1,4}))?$")
_WHITESPACE = re.compile(r"\s+")


def resolve(address: Any) -> NormalizedAddress:
    """
    Resolve a lot address such as ``"강남구 역삼동 123-4"``.

    Args:
        address: Free-text address from the store

    Returns:
        Fully populated NormalizedAddress

    Raises:
        AddressError: EmptyAddress for blank or non-string input,
            MalformedAddress when the text does not match the lot pattern
    """
    if not isinstance(address, str) or not address.strip():
        raise AddressError(AddressErrorReason.EMPTY_ADDRESS, address if address else "")

    text = _WHITESPACE.sub(" ", address.strip())
    match = LOT_ADDRESS_PATTERN.match(text)
    if not match:
        raise AddressError(AddressErrorReason.MALFORMED_ADDRESS, text)

    district, legal_dong, lot_main, lot_sub = match.groups()
    return NormalizedAddress(
        district=district,
        legal_dong=legal_dong,
        lot_main=_pad_lot(lot_main),
        lot_sub=_pad_lot(lot_sub) if lot_sub else "0000",
    )


def format_address(address: NormalizedAddress) -> str:
    """Canonical text form; resolving it yields the same address"""
    return f"{address.district} {address.legal_dong} {address.lot_main}-{address.lot_sub}"


def _pad_lot(value: str) -> str:
    return value.zfill(4)
