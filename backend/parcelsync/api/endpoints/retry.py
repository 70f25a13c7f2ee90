"""
Retry Endpoints - Ledger status and operator resets
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from parcelsync.core.logging import get_logger
from parcelsync.api.dependencies import get_retry_ledger
from parcelsync.api.extraction import RetryLedger
from parcelsync.models import RetryStatus

logger = get_logger(__name__)
router = APIRouter()


class ResetResponse(BaseModel):
    success: bool
    message: str


@router.get("/status", response_model=RetryStatus)
async def retry_status(ledger: RetryLedger = Depends(get_retry_ledger)):
    """Current waiting and exhausted entries"""
    return ledger.status()


@router.post("/reset/{record_id}", response_model=ResetResponse)
async def reset_record(record_id: str, ledger: RetryLedger = Depends(get_retry_ledger)):
    """Forget the retry history of one record"""
    if ledger.reset(record_id):
        return ResetResponse(success=True, message=f"Retry history for record {record_id} was reset.")
    return ResetResponse(success=False, message=f"No retry history for record {record_id}.")


@router.post("/reset", response_model=ResetResponse)
async def reset_all(ledger: RetryLedger = Depends(get_retry_ledger)):
    """Forget every record's retry history"""
    count = ledger.reset_all()
    logger.info("Retry ledger cleared via API", count=count)
    return ResetResponse(success=True, message=f"Retry history for {count} records was reset.")
