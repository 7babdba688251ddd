"""
Booth Assignment Routes (admin only)

GET /admin/booth-assignments - List assignments with filters
GET /admin/booth-assignments/unassigned - Approved job seekers awaiting assignment
GET /admin/booth-assignments/booths - Active booths with load and capacity
GET /admin/booth-assignments/statistics - Dashboard statistics
POST /admin/booth-assignments/assign - Assign one job seeker to a booth
POST /admin/booth-assignments/bulk-assign - Assign many (best effort)
PUT /admin/booth-assignments/{assignment_id}/status - Change assignment status
DELETE /admin/booth-assignments/{assignment_id} - Remove assignment

Service failures come back as 200 with {"success": false, "error": ...};
only auth and request validation produce HTTP error codes.
"""

from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from jobfair.core.auth import get_current_admin
from jobfair.services.booth_assignment_service import get_booth_assignment_service
from jobfair.schemas.schemas import (
    BoothAssignmentCreate, BulkAssignmentRequest, AssignmentStatusUpdate,
    BoothAssignmentStatus, JobSeekerAssignmentStatus, PriorityLevel,
    UnassignedJobSeekerFilters, BoothAssignmentFilters,
    ActionResult, AssignmentResult, BulkAssignmentResult, JobSeekerListResult,
    BoothListResult, AssignmentListResult, AssignmentStatisticsResult
)

router = APIRouter(prefix="/admin/booth-assignments", tags=["Booth Assignments"])


@router.get("", response_model=AssignmentListResult)
async def list_assignments(
    status: Optional[BoothAssignmentStatus] = Query(None),
    booth_id: Optional[str] = Query(None),
    date_from: Optional[datetime] = Query(None, description="Assigned at or after"),
    date_to: Optional[datetime] = Query(None, description="Assigned at or before"),
    search_term: Optional[str] = Query(None, description="Job seeker name/email, company or booth number"),
    admin: dict = Depends(get_current_admin)
):
    """List booth assignments, newest first."""
    filters = BoothAssignmentFilters(
        status=status, booth_id=booth_id, date_from=date_from, date_to=date_to, search_term=search_term
    )
    return get_booth_assignment_service().get_booth_assignments(filters)


@router.get("/unassigned", response_model=JobSeekerListResult)
async def list_unassigned_job_seekers(
    assignment_status: JobSeekerAssignmentStatus = Query(JobSeekerAssignmentStatus.unassigned),
    skills: Optional[str] = Query(None, description="Comma separated skills"),
    experience: Optional[str] = Query(None),
    education: Optional[str] = Query(None),
    priority_level: Optional[PriorityLevel] = Query(None),
    search_term: Optional[str] = Query(None, description="Name, email or bio"),
    admin: dict = Depends(get_current_admin)
):
    """Approved job seekers in the given assignment status (default: unassigned)."""
    filters = UnassignedJobSeekerFilters(
        assignment_status=assignment_status,
        skills=[s.strip() for s in skills.split(",") if s.strip()] if skills else [],
        experience=experience,
        education=education,
        priority_level=priority_level,
        search_term=search_term
    )
    return get_booth_assignment_service().get_unassigned_job_seekers(filters)


@router.get("/booths", response_model=BoothListResult)
async def list_available_booths(admin: dict = Depends(get_current_admin)):
    """Active booths with assignment load, slot counts and capacity."""
    return get_booth_assignment_service().get_available_booths()


@router.get("/statistics", response_model=AssignmentStatisticsResult)
async def assignment_statistics(admin: dict = Depends(get_current_admin)):
    """Status breakdowns, booth utilization and the most recent assignments."""
    return get_booth_assignment_service().get_assignment_statistics()


@router.post("/assign", response_model=AssignmentResult)
async def assign_job_seeker(data: BoothAssignmentCreate, admin: dict = Depends(get_current_admin)):
    """Assign a job seeker to a booth, optionally booking an interview slot."""
    return get_booth_assignment_service().assign_job_seeker_to_booth(admin, data)


@router.post("/bulk-assign", response_model=BulkAssignmentResult)
def bulk_assign_job_seekers(request: BulkAssignmentRequest, admin: dict = Depends(get_current_admin)):
    """
    Assign many job seekers at once. Each item succeeds or fails on its own.

    Declared sync: FastAPI runs it in the threadpool, so the pauses between
    batches do not block the event loop.
    """
    if not request.assignments:
        raise HTTPException(status_code=400, detail="Assignments array is required and cannot be empty")
    return get_booth_assignment_service().bulk_assign_job_seekers(admin, request.assignments)


@router.put("/{assignment_id}/status", response_model=ActionResult)
async def update_assignment_status(
    assignment_id: str,
    update: AssignmentStatusUpdate,
    admin: dict = Depends(get_current_admin)
):
    """Change assignment status; the job seeker's status follows."""
    return get_booth_assignment_service().update_assignment_status(assignment_id, update.status, update.notes)


@router.delete("/{assignment_id}", response_model=ActionResult)
async def remove_assignment(assignment_id: str, admin: dict = Depends(get_current_admin)):
    """Delete an assignment, reset the job seeker and free the slot."""
    return get_booth_assignment_service().remove_booth_assignment(assignment_id)
