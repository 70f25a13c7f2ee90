"""
Code Resolver Client - Administrative code lookup for a normalized address
"""

from typing import Any, Dict, Optional
import httpx
import structlog

from parcelsync.core.config import settings
from parcelsync.core.exceptions import CodeResolutionError
from parcelsync.models import AdministrativeCodes, NormalizedAddress
from .base import BaseClient, describe_http_error

logger = structlog.get_logger(__name__)

DISTRICT_CODE_KEY = "시군구코드"
LEGAL_DONG_CODE_KEY = "법정동코드"


def _extract_codes(data: Any) -> Optional[Dict[str, str]]:
    """Accept either a one-element array or a bare object"""
    if isinstance(data, list):
        data = data[0] if data else None
    if not isinstance(data, dict):
        return None
    if data.get(DISTRICT_CODE_KEY) is None or data.get(LEGAL_DONG_CODE_KEY) is None:
        return None
    return {
        "district_code": str(data[DISTRICT_CODE_KEY]),
        "legal_dong_code": str(data[LEGAL_DONG_CODE_KEY]),
    }


class CodeResolverClient(BaseClient):
    """Posts a single-address batch to the code-resolution script"""

    def __init__(self, url: Optional[str] = None, **kwargs):
        super().__init__("code_resolver", **kwargs)
        self.url = url if url is not None else settings.CODE_RESOLVER_URL

    async def resolve_codes(
        self,
        address: NormalizedAddress,
        record_id: Optional[str] = None
    ) -> AdministrativeCodes:
        """
        Look up district and legal-dong codes.

        Raises:
            CodeResolutionError: transport failure, error status, or a
                response without both code fields (``CODES_NOT_FOUND``)
        """
        payload = [address.to_wire(record_id)]
        logger.debug("Requesting administrative codes", record_id=record_id, address=payload[0])

        try:
            # The resolver is an Apps Script web app that answers via redirect
            response = await self._get_client().post(self.url, json=payload, follow_redirects=True)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Code resolution request failed", record_id=record_id, error=str(e))
            raise CodeResolutionError(
                f"Code resolution failed: {describe_http_error(e)}",
                details={"record_id": record_id}
            ) from e

        codes = _extract_codes(data)
        if codes is None:
            logger.warning("Codes not found in resolver response", record_id=record_id, response=data)
            raise CodeResolutionError(
                "Administrative codes not found in response",
                error_code="CODES_NOT_FOUND",
                details={"record_id": record_id}
            )

        return AdministrativeCodes(**address.model_dump(), **codes)
