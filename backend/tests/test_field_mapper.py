from parcelsync.api.standardization import (
    BUILDING_FIELD_MAP,
    BUILDING_UPDATE_FIELDS,
    build_building_update,
    build_land_update,
    has_meaningful_building_data,
    has_meaningful_land_data,
    map_field_names,
    transform_building_item,
)
from conftest import building_item


def test_map_field_names_renames_known_keys():
    mapped = map_field_names({"platArea": 10, "custom": "x"}, BUILDING_FIELD_MAP)
    assert mapped == {"대지면적(㎡)": 10, "custom": "x"}


def test_building_item_maps_to_full_update():
    data = map_field_names(transform_building_item(building_item()), BUILDING_FIELD_MAP)
    update = build_building_update(data)

    assert set(update) == set(BUILDING_UPDATE_FIELDS)
    assert update["대지면적(㎡)"] == 330.5
    assert update["도로명주소"] == "서울특별시 강남구 테헤란로 101"
    assert update["사용승인일"] == "2001-03-15T00:00:00.000Z"
    assert update["층수"] == "-2/10"


def test_building_update_omits_blank_approval_date():
    update = build_building_update({"연면적(㎡)": 100.0, "사용승인일": "", "건물명": None})
    assert update == {"연면적(㎡)": 100.0}


def test_meaningful_building_data():
    assert has_meaningful_building_data({"주용도": "업무시설"}) is True
    assert has_meaningful_building_data({"건물명": "역삼빌딩", "대지면적(㎡)": 0}) is False
    assert has_meaningful_building_data({}) is False


def test_meaningful_land_data():
    assert has_meaningful_land_data({"용도지역": "일반상업지역"}) is True
    assert has_meaningful_land_data({"토지면적(㎡)": None, "공시지가(원/㎡)": None, "용도지역": None}) is False


def test_land_update_skips_nulls():
    update = build_land_update({
        "지번 주소": "강남구 역삼동 123",
        "토지면적(㎡)": 330.5,
        "공시지가(원/㎡)": None,
        "용도지역": "",
    })
    assert update == {"토지면적(㎡)": 330.5}


def test_whitespace_only_values_are_not_meaningful():
    assert has_meaningful_land_data({"토지면적(㎡)": None, "공시지가(원/㎡)": None, "용도지역": " "}) is False
    assert has_meaningful_building_data({"주용도": "  ", "도로명주소": ""}) is False
