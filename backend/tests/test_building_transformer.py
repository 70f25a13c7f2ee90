import pytest

from parcelsync.api.standardization import (
    extract_building_items,
    format_date_iso,
    has_building_items,
    to_count,
    transform_building_item,
)
from conftest import building_item, building_payload


def test_has_building_items():
    assert has_building_items(building_payload()) is True
    assert has_building_items({"body": {}}) is False
    assert has_building_items({"response": {"body": {"items": ""}}}) is False
    assert has_building_items(None) is False


def test_extract_wraps_single_item_and_cleans_lot_address():
    payload = {"response": {"body": {"items": {"item": building_item()}}}}
    items = extract_building_items(payload)
    assert len(items) == 1
    assert items[0]["platPlc"] == "강남구 역삼동 123"


def test_extract_keeps_list_order():
    payload = building_payload(building_item(rnum=1), building_item(rnum=2))
    assert [item["rnum"] for item in extract_building_items(payload)] == [1, 2]


def test_extract_empty_item_list():
    assert extract_building_items({"response": {"body": {"items": {"item": []}}}}) == []


def test_extract_does_not_mutate_payload():
    payload = building_payload()
    extract_building_items(payload)
    assert payload["response"]["body"]["items"]["item"][0]["platPlc"].endswith("번지")


@pytest.mark.parametrize("value,expected", [
    ("20010315", "2001-03-15T00:00:00.000Z"),
    ("00000000", "00000000"),
    ("2001031", "2001031"),
    ("2001-03-15", "2001-03-15"),
    ("20011345", "20011345"),
    ("", ""),
])
def test_format_date_iso(value, expected):
    assert format_date_iso(value) == expected


@pytest.mark.parametrize("value,expected", [
    ("3", 3),
    ("12abc", 12),
    ("", 0),
    (None, 0),
    ("abc", 0),
    (4, 4),
    (2.9, 2),
    (float("nan"), 0),
    (float("inf"), 0),
    (float("-inf"), 0),
])
def test_to_count(value, expected):
    assert to_count(value) == expected


def test_transform_building_item_derived_fields():
    data = transform_building_item(building_item())
    assert data["useAprDay"] == "2001-03-15T00:00:00.000Z"
    assert data["crtnDay"] == "2024-01-02T00:00:00.000Z"
    assert data["승강기수"] == 3
    assert data["주차대수"] == 13
    assert data["세대/가구/호"] == "0/0/12"
    assert data["층수"] == "-2/10"


def test_transform_building_item_missing_counts_default_to_zero():
    item = {"platPlc": "강남구 역삼동 1", "useAprDay": ""}
    data = transform_building_item(item)
    assert data["승강기수"] == 0
    assert data["주차대수"] == 0
    assert data["세대/가구/호"] == "0/0/0"
    assert data["층수"] == "-0/0"
    assert data["useAprDay"] == ""
