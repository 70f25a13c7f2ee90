"""
Field Mapper - Static upstream-to-store field mapping and write-back field sets
"""

from typing import Any, Dict, Mapping

import structlog

logger = structlog.get_logger(__name__)

# Building-register short codes -> store field names
BUILDING_FIELD_MAP: Dict[str, str] = {
    "rnum": "순번",
    "platPlc": "지번 주소",
    "sigunguCd": "시군구코드",
    "bjdongCd": "법정동코드",
    "bun": "번",
    "ji": "지",
    "mainPurpsCdNm": "주용도",
    "etcPurps": "기타용도",
    "roofCdNm": "지붕",
    "heit": "높이(m)",
    "useAprDay": "사용승인일",
    "crtnDay": "생성일자",
    "newPlatPlc": "도로명주소",
    "platGbCd": "대지",
    "bldNm": "건물명",
    "platArea": "대지면적(㎡)",
    "archArea": "건축면적(㎡)",
    "bcRat": "건폐율(%)",
    "totArea": "연면적(㎡)",
    "vlRatEstmTotArea": "용적률산정용연면적(㎡)",
    "vlRat": "용적률(%)",
    "strctCdNm": "주구조",
}

# Fields written back to a building record
BUILDING_UPDATE_FIELDS = (
    "대지면적(㎡)",
    "연면적(㎡)",
    "용적률산정용연면적(㎡)",
    "건축면적(㎡)",
    "건폐율(%)",
    "용적률(%)",
    "높이(m)",
    "주차대수",
    "승강기수",
    "도로명주소",
    "생성일자",
    "사용승인일",
    "층수",
    "기타용도",
    "주용도",
    "지붕",
    "주구조",
    "건물명",
    "세대/가구/호",
)

# Any one of these populated makes a building result worth writing
BUILDING_MEANINGFUL_FIELDS = ("대지면적(㎡)", "연면적(㎡)", "주용도", "도로명주소")

LAND_UPDATE_FIELDS = ("토지면적(㎡)", "공시지가(원/㎡)", "용도지역")
LAND_MEANINGFUL_FIELDS = LAND_UPDATE_FIELDS


def map_field_names(item: Mapping[str, Any], field_map: Mapping[str, str]) -> Dict[str, Any]:
    """Rename keys through ``field_map``; unmapped keys keep their name"""
    return {field_map.get(key, key): value for key, value in item.items()}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def has_meaningful_data(data: Mapping[str, Any], fields) -> bool:
    """Truthy and not whitespace-only in at least one of ``fields``"""
    return any(data.get(field) and not _is_blank(data.get(field)) for field in fields)


def has_meaningful_building_data(data: Mapping[str, Any]) -> bool:
    return has_meaningful_data(data, BUILDING_MEANINGFUL_FIELDS)


def has_meaningful_land_data(data: Mapping[str, Any]) -> bool:
    return has_meaningful_data(data, LAND_MEANINGFUL_FIELDS)


def build_building_update(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Select the building write-back fields.

    Keys without a value are left out instead of being sent empty, so an
    existing approval date in the store is never cleared.
    """
    update = {}
    for field in BUILDING_UPDATE_FIELDS:
        value = data.get(field)
        if value is None:
            continue
        if field == "사용승인일" and _is_blank(value):
            continue
        update[field] = value
    return update


def build_land_update(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Select the land write-back fields, skipping nulls and blank zones"""
    update = {}
    for field in LAND_UPDATE_FIELDS:
        value = data.get(field)
        if _is_blank(value):
            continue
        update[field] = value
    logger.debug("Land update built", fields=list(update))
    return update
