"""
Land Registry Client - Land-characteristic lookups by parcel identifier
"""

import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import httpx
import structlog

from parcelsync.core.config import settings
from parcelsync.core.exceptions import NoDataFound, RegistryUnavailable
from .base import BaseClient, describe_http_error

logger = structlog.get_logger(__name__)


def _strip_namespace(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_land_response(xml_text: str) -> Dict[str, Any]:
    """
    Convert the registry's XML answer into a plain mapping::

        {"totalCount": "2", "fields": [{"pnu": "...", "lastUpdtDt": "..."}, ...]}

    Raises:
        ValueError: the text is not well-formed XML
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise ValueError(f"Malformed land registry XML: {e}") from e

    total_count = None
    fields: List[Dict[str, Optional[str]]] = []
    for element in root.iter():
        tag = _strip_namespace(element.tag)
        if tag == "totalCount" and total_count is None:
            total_count = (element.text or "").strip()
        elif tag == "field":
            fields.append({
                _strip_namespace(child.tag): (child.text or "").strip()
                for child in element
            })

    return {"totalCount": total_count or "0", "fields": fields}


def _parse_total(value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


class LandRegistryClient(BaseClient):
    """Fetches land characteristics for the previous calendar year"""

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        domain: Optional[str] = None,
        today: Callable[[], datetime] = datetime.now,
        **kwargs
    ):
        super().__init__("land_registry", **kwargs)
        self.url = url if url is not None else settings.LAND_REGISTRY_URL
        self.api_key = api_key if api_key is not None else settings.VWORLD_API_KEY
        self.domain = domain if domain is not None else settings.VWORLD_DOMAIN
        self._today = today

    def target_year(self) -> str:
        """Only last year's figures are published for the whole country"""
        return str(self._today().year - 1)

    async def fetch(self, pnu: str) -> Dict[str, Any]:
        """
        Fetch land characteristics for a parcel.

        Raises:
            RegistryUnavailable: transport failure, error status or bad XML
            NoDataFound: the registry has no entries for the target year
        """
        year = self.target_year()
        params = {
            "key": self.api_key,
            "domain": self.domain,
            "pnu": pnu,
            "stdrYear": year,
            "format": "xml",
            "numOfRows": "10",
            "pageNo": "1",
        }

        try:
            response = await self._get_client().get(self.url, params=params)
            response.raise_for_status()
            data = parse_land_response(response.text)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Land registry request failed", pnu=pnu, year=year, error=describe_http_error(e))
            raise RegistryUnavailable(
                f"Land registry request failed: {describe_http_error(e)}",
                details={"pnu": pnu, "year": year}
            ) from e

        total = _parse_total(data["totalCount"])
        if total <= 0 or not data["fields"]:
            raise NoDataFound(f"No land data for {year}", details={"pnu": pnu, "year": year})

        logger.info("Land data found", pnu=pnu, year=year, total_count=total)
        return data
