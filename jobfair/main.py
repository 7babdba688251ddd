"""
Job Fair Booth Assignment - Main Application

FastAPI backend with:
- PostgreSQL for job seekers, employers, booths, slots and assignments
- JWT authentication (admin-only assignment endpoints)
- Transactional booth assignment with slot booking

Run: uvicorn jobfair.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobfair.api.routes import api_router
from jobfair.core.config import get_settings
from jobfair.core.errors import register_exception_handlers
from jobfair.core.logging_config import setup_logging
from jobfair.db.postgres import test_postgres_connection
from jobfair.db.schema import init_schema

settings = get_settings()
setup_logging()
logger = logging.getLogger("jobfair.main")

# Create FastAPI app
app = FastAPI(
    title="Job Fair Booth Assignment",
    description="""
    Admin backend for matching job seekers to employer booths at job fair events.

    ## Features
    - **Authentication**: JWT-based auth for admins, employers and job seekers
    - **Booth assignments**: single and bulk assignment, status changes, removal
    - **Interview slots**: per-booth time slots, no overlaps, at most one booking each
    - **Review**: approve/reject job seeker registrations, set priority
    - **Statistics**: status breakdowns and booth utilization
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create tables on startup when AUTO_CREATE_SCHEMA is enabled."""
    if not settings.auto_create_schema:
        return
    try:
        init_schema()
    except Exception:
        logger.exception("Schema initialization failed")


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Job Fair Booth Assignment"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    connected = test_postgres_connection()
    return {
        "status": "healthy" if connected else "degraded",
        "database": "connected" if connected else "disconnected"
    }
