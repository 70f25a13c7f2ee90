"""
Airtable Store - Read records by view and write field updates
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote
import httpx
import structlog

from parcelsync.core.config import settings
from parcelsync.core.exceptions import StoreError
from parcelsync.models import Domain, Record
from .base import BaseClient, describe_http_error

logger = structlog.get_logger(__name__)


class AirtableStore(BaseClient):
    """Thin REST wrapper over one Airtable base"""

    def __init__(
        self,
        base_id: Optional[str] = None,
        access_token: Optional[str] = None,
        api_url: Optional[str] = None,
        address_field: Optional[str] = None,
        **kwargs
    ):
        super().__init__("airtable", **kwargs)
        self.base_id = base_id if base_id is not None else settings.AIRTABLE_BASE_ID
        self.access_token = access_token if access_token is not None else settings.AIRTABLE_ACCESS_TOKEN
        self.api_url = (api_url if api_url is not None else settings.AIRTABLE_API_URL).rstrip("/")
        self.address_field = address_field if address_field is not None else settings.ADDRESS_FIELD

        self.tables = {
            Domain.BUILDING: (settings.AIRTABLE_BUILDING_TABLE, settings.AIRTABLE_BUILDING_VIEW),
            Domain.LAND: (settings.AIRTABLE_LAND_TABLE, settings.AIRTABLE_LAND_VIEW),
        }

    def _table_url(self, table: str) -> str:
        return f"{self.api_url}/{self.base_id}/{quote(table, safe='')}"

    def _address_text(self, record_id: str, value: Any) -> str:
        """Lookup, rollup and number cells are not lot addresses; they resolve as empty"""
        if value is None or isinstance(value, str):
            return value or ""
        logger.warning("Non-text address value, treated as empty",
                       record_id=record_id,
                       value_type=type(value).__name__)
        return ""

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def select_by_view(
        self,
        table: str,
        view: str,
        domain: Domain,
        max_records: Optional[int] = None
    ) -> List[Record]:
        """
        List the records currently in a view, following pagination.

        Raises:
            StoreError: any transport or status failure
        """
        params: Dict[str, Any] = {"view": view}
        if max_records is not None:
            params["maxRecords"] = max_records

        records: List[Record] = []
        offset: Optional[str] = None
        while True:
            if offset:
                params["offset"] = offset
            try:
                response = await self._get_client().get(self._table_url(table), params=params, headers=self._headers)
                response.raise_for_status()
                page = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error("Airtable select failed", table=table, view=view, error=describe_http_error(e))
                raise StoreError(
                    f"Failed to read view {view!r} of {table!r}: {describe_http_error(e)}",
                    details={"table": table, "view": view}
                ) from e

            for raw in page.get("records", []):
                fields = raw.get("fields") or {}
                records.append(Record(
                    id=raw["id"],
                    address=self._address_text(raw["id"], fields.get(self.address_field)),
                    domain=domain
                ))

            offset = page.get("offset")
            if not offset or (max_records is not None and len(records) >= max_records):
                break

        if max_records is not None:
            records = records[:max_records]
        return records

    async def select_candidates(self, domain: Domain, max_records: Optional[int] = None) -> List[Record]:
        """Records in the configured view for a domain"""
        table, view = self.tables[domain]
        return await self.select_by_view(table, view, domain, max_records=max_records)

    async def update(self, table: str, record_id: str, fields: Dict[str, Any]) -> None:
        """
        Patch fields on one record. Keys absent from ``fields`` are untouched.

        Raises:
            StoreError: any transport or status failure
        """
        payload = {"fields": {key: value for key, value in fields.items() if value is not None}}
        try:
            response = await self._get_client().patch(
                f"{self._table_url(table)}/{record_id}",
                json=payload,
                headers=self._headers
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Airtable update failed", table=table, record_id=record_id, error=describe_http_error(e))
            raise StoreError(
                f"Failed to update record {record_id}: {describe_http_error(e)}",
                details={"table": table, "record_id": record_id}
            ) from e

        logger.info("Airtable record updated", table=table, record_id=record_id, fields=list(payload["fields"]))

    async def update_record(self, domain: Domain, record_id: str, fields: Dict[str, Any]) -> None:
        table, _ = self.tables[domain]
        await self.update(table, record_id, fields)
