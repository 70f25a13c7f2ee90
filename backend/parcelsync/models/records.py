"""
Record, address and job models shared by the sync pipeline
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, computed_field


class Domain(str, Enum):
    """Which registry a record set is enriched from"""
    BUILDING = "building"
    LAND = "land"

    @property
    def label(self) -> str:
        """Display name used in operator mail"""
        return "건축물" if self is Domain.BUILDING else "토지"


class Record(BaseModel):
    """One unit of work read from the tabular store"""
    id: str
    address: str = ""
    domain: Domain


class NormalizedAddress(BaseModel):
    """Lot address split into its administrative parts"""
    district: str
    legal_dong: str
    lot_main: str = Field(..., pattern=r"^\d{4}$")
    lot_sub: str = Field(default="0000", pattern=r"^\d{4}$")

    def to_wire(self, record_id: Optional[str] = None) -> Dict[str, Any]:
        """Payload shape expected by the code-resolution service"""
        payload: Dict[str, Any] = {
            "시군구": self.district,
            "법정동": self.legal_dong,
            "번": self.lot_main,
            "지": self.lot_sub,
        }
        if record_id is not None:
            payload["id"] = record_id
        return payload


class AdministrativeCodes(NormalizedAddress):
    """Normalized address plus the codes assigned by the resolution service"""
    district_code: str
    legal_dong_code: str


def build_parcel_identifier(codes: AdministrativeCodes) -> Optional[str]:
    """
    Build the parcel identifier (PNU) for a land lookup.

    Layout: district code, legal-dong code, land-type digit ``1``,
    lot main, lot sub. Returns None when any component is missing.
    """
    parts = (codes.district_code, codes.legal_dong_code, codes.lot_main, codes.lot_sub)
    if not all(parts):
        return None
    return f"{codes.district_code}{codes.legal_dong_code}1{codes.lot_main}{codes.lot_sub}"


class RetryEntry(BaseModel):
    """Retry bookkeeping for one record id"""
    record_id: str
    attempts: int = Field(default=0, ge=0)
    last_attempt: datetime
    failed: bool = False


class RetrySummary(BaseModel):
    total_tracked: int
    waiting: int
    max_reached: int
    max_retry_attempts: int
    retry_reset_days: int


class RetryStatus(BaseModel):
    """Snapshot of the retry ledger"""
    summary: RetrySummary
    waiting: List[RetryEntry] = Field(default_factory=list)
    max_reached: List[RetryEntry] = Field(default_factory=list)


class JobOutcome(BaseModel):
    """Aggregate result of one orchestrator pass"""
    domain: Domain
    total: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0
    newly_failed: List[Record] = Field(default_factory=list)
    error: Optional[str] = None

    @computed_field
    @property
    def success_rate(self) -> float:
        if not self.total:
            return 0.0
        return round(self.success / self.total * 100, 1)


class AllJobsOutcome(BaseModel):
    """Result of running every domain pass back to back"""
    building: JobOutcome
    land: JobOutcome
    timestamp: datetime
