"""
Land Transformer - Normalize land-characteristic entries
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)

METROPOLITAN_MARKERS = ("특별시", "광역시")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an upstream update timestamp, None when unparseable"""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    for fmt in ("%Y%m%d", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def select_latest_field(fields: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Pick the most recently updated entry by ``lastUpdtDt``.

    Only a strictly newer timestamp replaces the current pick, so ties go
    to the entry seen first. Unparseable timestamps never win.
    """
    latest: Optional[Dict[str, Any]] = None
    latest_time: Optional[datetime] = None
    for entry in fields:
        entry_time = parse_timestamp(entry.get("lastUpdtDt"))
        if latest is None:
            latest, latest_time = entry, entry_time
            continue
        if entry_time is not None and (latest_time is None or entry_time > latest_time):
            latest, latest_time = entry, entry_time
    return latest


def derive_region(ld_code_nm: Optional[str]) -> str:
    """
    Build the display region from a legal-dong name.

    ``"서울특별시 강남구 역삼동"`` gives ``"강남구 역삼동"``. Metropolitan
    forms prefer the 구 token, then 군. Ordinary forms prefer 구, then 시,
    then 군. The last token (동/리/로/가) is appended.
    """
    parts = (ld_code_nm or "").split()
    if not parts:
        return ""
    last = parts[-1]

    if any(marker in part for part in parts for marker in METROPOLITAN_MARKERS):
        suffix_order = ("구", "군")
    else:
        suffix_order = ("구", "시", "군")

    for suffix in suffix_order:
        for part in parts:
            if part.endswith(suffix):
                return f"{part} {last}"
    return ""


def parse_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def transform_land_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Map one land-characteristic entry to the record's attribute set"""
    region = derive_region(item.get("ldCodeNm"))
    updated = parse_timestamp(item.get("lastUpdtDt"))

    result = {
        "지번 주소": f"{region} {item.get('mnnmSlno') or ''}".strip(),
        "토지면적(㎡)": parse_number(item.get("lndpclAr")),
        "용도지역": item.get("prposArea1Nm") or None,
        "공시지가(원/㎡)": parse_number(item.get("pblntfPclnd")),
        "토지정보업데이트": updated.isoformat().replace("+00:00", "Z") if updated else item.get("lastUpdtDt"),
    }
    logger.debug("Land item transformed", pnu=item.get("pnu"), region=region)
    return result
