"""
Building Transformer - Normalize building-register title items
"""

import math
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)

DATE_FIELDS = ("crtnDay", "useAprDay")
ELEVATOR_FIELDS = ("rideUseElvtCnt", "emgenUseElvtCnt")
PARKING_FIELDS = ("indrMechUtcnt", "oudrMechUtcnt", "indrAutoUtcnt", "oudrAutoUtcnt")

_LEADING_TOKEN = re.compile(r"^\S+\s")
_TRAILING_BUNJI = re.compile(r"번지$")


def has_building_items(payload: Optional[Dict[str, Any]]) -> bool:
    """True when the payload carries a ``response.body.items`` node"""
    if not isinstance(payload, dict):
        return False
    body = (payload.get("response") or {}).get("body") or {}
    return bool(body.get("items"))


def extract_building_items(payload: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Pull the item list out of a registry page.

    A single item is wrapped into a list. Missing or empty pages give [].
    The lot address loses its leading province token and trailing "번지".
    """
    if not has_building_items(payload):
        return []

    items = payload["response"]["body"]["items"]
    item_list = items.get("item") if isinstance(items, dict) else None
    if isinstance(item_list, dict):
        item_list = [item_list]
    if not isinstance(item_list, list) or not item_list:
        return []

    extracted = []
    for item in item_list:
        item = dict(item)
        if isinstance(item.get("platPlc"), str):
            item["platPlc"] = _TRAILING_BUNJI.sub("", _LEADING_TOKEN.sub("", item["platPlc"], count=1))
        extracted.append(item)
    return extracted


def format_date_iso(value: Any) -> Any:
    """
    Reformat a compact ``YYYYMMDD`` date as a midnight UTC instant.

    All-zero dates, values of the wrong length and non-calendar dates
    are returned unchanged.
    """
    if not isinstance(value, str) or len(value) != 8 or value == "00000000":
        return value
    try:
        parsed = datetime.strptime(value, "%Y%m%d")
    except ValueError:
        return value
    return parsed.strftime("%Y-%m-%dT00:00:00.000Z")


def to_count(value: Any) -> int:
    """Integer sub-count, 0 when absent or unparsable"""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    match = re.match(r"^\s*([+-]?\d+)", str(value))
    return int(match.group(1)) if match else 0


def transform_building_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Apply date normalization and derived counts to one title item"""
    data = dict(item)

    for field in DATE_FIELDS:
        if data.get(field):
            data[field] = format_date_iso(data[field])

    data["승강기수"] = sum(to_count(data.get(field)) for field in ELEVATOR_FIELDS)
    data["주차대수"] = sum(to_count(data.get(field)) for field in PARKING_FIELDS)

    households = to_count(data.get("hhldCnt"))
    families = to_count(data.get("fmlyCnt"))
    units = to_count(data.get("hoCnt"))
    data["세대/가구/호"] = f"{households}/{families}/{units}"

    above_ground = to_count(data.get("grndFlrCnt"))
    below_ground = to_count(data.get("ugrndFlrCnt"))
    data["층수"] = f"-{below_ground}/{above_ground}"

    logger.debug("Building item transformed", plat_plc=data.get("platPlc"))
    return data
