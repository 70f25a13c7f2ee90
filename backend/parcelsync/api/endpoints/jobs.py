"""
Job Endpoints - Manual triggers for enrichment passes
"""

from fastapi import APIRouter, Depends

from parcelsync.core.logging import get_logger
from parcelsync.core.exceptions import internal_server_exception
from parcelsync.api.dependencies import get_orchestrator
from parcelsync.api.extraction import JobOrchestrator

logger = get_logger(__name__)
router = APIRouter()


@router.post("/building")
async def run_building_job(orchestrator: JobOrchestrator = Depends(get_orchestrator)):
    """Run a building pass now"""
    logger.info("Building pass triggered manually")
    try:
        result = await orchestrator.run_building_pass()
    except Exception as e:
        logger.error("Manual building pass failed", error=str(e))
        raise internal_server_exception("Failed to run building job", details={"error": str(e)})
    return {"message": "Building job completed", "result": result}


@router.post("/land")
async def run_land_job(orchestrator: JobOrchestrator = Depends(get_orchestrator)):
    """Run a land pass now"""
    logger.info("Land pass triggered manually")
    try:
        result = await orchestrator.run_land_pass()
    except Exception as e:
        logger.error("Manual land pass failed", error=str(e))
        raise internal_server_exception("Failed to run land job", details={"error": str(e)})
    return {"message": "Land job completed", "result": result}


@router.post("/all")
async def run_all_jobs(orchestrator: JobOrchestrator = Depends(get_orchestrator)):
    """Run the building pass, then the land pass"""
    logger.info("All passes triggered manually")
    try:
        result = await orchestrator.run_all_passes()
    except Exception as e:
        logger.error("Manual run of all passes failed", error=str(e))
        raise internal_server_exception("Failed to run all jobs", details={"error": str(e)})
    return {"message": "All jobs completed", "result": result}
