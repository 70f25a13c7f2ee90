"""
Main application entry point
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import router as api_router
from .api.dependencies import close_clients, get_orchestrator, get_retry_ledger, get_store
from .core.config import settings
from .core.logging import setup_logging, get_logger
from .utils.scheduler import JobScheduler, SchedulerGate

# Set up logging
setup_logging()
logger = get_logger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Enriches store records with building-register and land-characteristic data",
    version=settings.VERSION
)

# Get CORS origins from settings
cors_origins = settings.get_cors_origins()

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_STR)

job_scheduler: Optional[JobScheduler] = None


@app.on_event("startup")
async def startup_event():
    """Start the recurring enrichment trigger"""
    global job_scheduler
    logger.info("Starting application", environment=settings.ENVIRONMENT)

    if not settings.SCHEDULER_ENABLED:
        logger.info("Scheduler disabled, passes run only on manual trigger")
        return

    gate = SchedulerGate(
        store=get_store(),
        ledger=get_retry_ledger(),
        orchestrator=get_orchestrator(),
        settings=settings
    )
    job_scheduler = JobScheduler(gate, asyncio.get_running_loop(), settings=settings)
    job_scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the trigger and close outbound connections"""
    global job_scheduler
    if job_scheduler is not None:
        job_scheduler.stop()
        job_scheduler = None
    await close_clients()
    logger.info("Application stopped")


@app.get("/")
async def root():
    return {"message": "Parcel Registry Sync Service"}


@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION
    }
