"""
Building Registry Client - Building-register title lookups
"""

from typing import Any, Dict, Optional
import httpx
import structlog

from parcelsync.core.config import settings
from parcelsync.models import AdministrativeCodes
from .base import BaseClient, describe_http_error

logger = structlog.get_logger(__name__)

# Returned when the registry cannot be reached; reads as a page without items
EMPTY_BUILDING_PAYLOAD: Dict[str, Any] = {"body": {}}


class BuildingRegistryClient(BaseClient):
    """Fetches title-register pages keyed by codes and lot numbers"""

    def __init__(self, url: Optional[str] = None, service_key: Optional[str] = None, **kwargs):
        super().__init__("building_registry", **kwargs)
        self.url = url if url is not None else settings.BUILDING_REGISTRY_URL
        self.service_key = service_key if service_key is not None else settings.PUBLIC_API_KEY

    async def fetch(self, codes: AdministrativeCodes) -> Dict[str, Any]:
        """
        Fetch the first title-register page for a lot.

        Transport and status failures never raise; they degrade to
        EMPTY_BUILDING_PAYLOAD so the "no items" path handles them.
        """
        params = {
            "serviceKey": self.service_key,
            "sigunguCd": codes.district_code,
            "bjdongCd": codes.legal_dong_code,
            "bun": codes.lot_main,
            "ji": codes.lot_sub,
            "_type": "json",
            "numOfRows": 10,
            "pageNo": 1,
        }

        try:
            response = await self._get_client().get(self.url, params=params, headers={"accept": "*/*"})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Building registry request failed",
                         district_code=codes.district_code,
                         legal_dong_code=codes.legal_dong_code,
                         error=describe_http_error(e))
            return dict(EMPTY_BUILDING_PAYLOAD)

        logger.debug("Building registry response received",
                     district_code=codes.district_code,
                     legal_dong_code=codes.legal_dong_code)
        return data if isinstance(data, dict) else dict(EMPTY_BUILDING_PAYLOAD)
