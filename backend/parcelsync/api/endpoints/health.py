from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from parcelsync.core.config import settings
from parcelsync.core.logging import get_logger
from parcelsync.api.dependencies import get_orchestrator, get_retry_ledger
from parcelsync.api.extraction import JobOrchestrator, RetryLedger
from parcelsync.models import Domain

logger = get_logger(__name__)
router = APIRouter()


@router.get("/")
async def health_check():
    """Basic health check endpoint."""
    logger.info("Health check requested")
    return {"status": "healthy", "service": settings.PROJECT_NAME}


@router.get("/detailed")
async def detailed_health_check(
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
    ledger: RetryLedger = Depends(get_retry_ledger)
):
    """Health check with pass and ledger state."""
    logger.info("Detailed health check requested")

    summary = ledger.status().summary
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "scheduler": "enabled" if settings.SCHEDULER_ENABLED else "disabled",
            "passes_running": [domain.value for domain in Domain if orchestrator.is_running(domain)],
            "retry_ledger": summary.model_dump(),
        }
    }
