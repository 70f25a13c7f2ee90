"""
Data Standardization Package

Address resolution and the deterministic mapping from registry payloads
to the store's normalized attribute set.
"""

from .address_resolver import resolve, format_address
from .building_transformer import (
    extract_building_items,
    format_date_iso,
    has_building_items,
    to_count,
    transform_building_item,
)
from .land_transformer import derive_region, parse_number, select_latest_field, transform_land_item
from .field_mapper import (
    BUILDING_FIELD_MAP,
    BUILDING_UPDATE_FIELDS,
    LAND_UPDATE_FIELDS,
    build_building_update,
    build_land_update,
    has_meaningful_building_data,
    has_meaningful_land_data,
    map_field_names,
)

__all__ = [
    "resolve",
    "format_address",
    "extract_building_items",
    "format_date_iso",
    "has_building_items",
    "to_count",
    "transform_building_item",
    "derive_region",
    "parse_number",
    "select_latest_field",
    "transform_land_item",
    "BUILDING_FIELD_MAP",
    "BUILDING_UPDATE_FIELDS",
    "LAND_UPDATE_FIELDS",
    "build_building_update",
    "build_land_update",
    "has_meaningful_building_data",
    "has_meaningful_land_data",
    "map_field_names",
]
