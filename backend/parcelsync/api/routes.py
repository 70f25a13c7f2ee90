"""
API Routes Configuration
"""

from fastapi import APIRouter

from parcelsync.api.endpoints import health, jobs, retry

# Create main router
router = APIRouter()

# Include endpoint routers
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
router.include_router(retry.router, prefix="/retry", tags=["retry"])
