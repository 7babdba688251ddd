"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from jobfair.api.routes.auth_routes import router as auth_router
from jobfair.api.routes.booth_assignment_routes import router as booth_assignment_router
from jobfair.api.routes.booth_routes import router as booth_router, admin_router as admin_booth_router
from jobfair.api.routes.employer_routes import router as employer_router
from jobfair.api.routes.event_routes import router as event_router
from jobfair.api.routes.job_seeker_routes import router as job_seeker_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(booth_assignment_router)
api_router.include_router(booth_router)
api_router.include_router(admin_booth_router)
api_router.include_router(employer_router)
api_router.include_router(event_router)
api_router.include_router(job_seeker_router)
