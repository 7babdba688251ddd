"""
Job Seeker Review Routes (admin only)

POST /admin/job-seekers/approve-all - Approve every pending registration
POST /admin/job-seekers/{job_seeker_id}/approve - Approve registration
POST /admin/job-seekers/{job_seeker_id}/reject - Reject registration
PUT /admin/job-seekers/{job_seeker_id}/priority - Set priority level
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from jobfair.db.postgres import get_db_session
from jobfair.core.auth import get_current_admin
from jobfair.schemas.schemas import RegistrationStatus, PriorityUpdate, MessageResponse, BulkApproveResult

router = APIRouter(prefix="/admin/job-seekers", tags=["Job Seekers"])
logger = logging.getLogger(__name__)


def _set_registration_status(job_seeker_id: str, status: RegistrationStatus):
    with get_db_session() as db:
        result = db.execute(
            text("""
                UPDATE job_seekers SET registration_status = :status, updated_at = CURRENT_TIMESTAMP
                WHERE id = :id
            """),
            {"status": status.value, "id": job_seeker_id}
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Job seeker not found")
    logger.info(f"[Review] {job_seeker_id} -> {status.value}")


@router.post("/approve-all", response_model=BulkApproveResult)
async def approve_all_pending(admin: dict = Depends(get_current_admin)):
    """Approve every job seeker whose registration is still pending."""
    with get_db_session() as db:
        result = db.execute(
            text("""
                UPDATE job_seekers SET registration_status = 'approved', updated_at = CURRENT_TIMESTAMP
                WHERE registration_status = 'pending'
            """)
        )
        approved = result.rowcount

    if not approved:
        return BulkApproveResult(success=True, message="No pending job seekers to approve.", approved_count=0)

    logger.info(f"[Review] Bulk approved {approved} job seekers by {admin['user_id']}")
    return BulkApproveResult(
        success=True, message=f"Successfully approved {approved} job seeker(s).", approved_count=approved
    )


@router.post("/{job_seeker_id}/approve", response_model=MessageResponse)
async def approve_job_seeker(job_seeker_id: str, admin: dict = Depends(get_current_admin)):
    """Approve a registration. Only approved job seekers can be assigned to booths."""
    _set_registration_status(job_seeker_id, RegistrationStatus.approved)
    return MessageResponse(message="Job seeker approved")


@router.post("/{job_seeker_id}/reject", response_model=MessageResponse)
async def reject_job_seeker(job_seeker_id: str, admin: dict = Depends(get_current_admin)):
    """Reject a registration. Existing assignments are left untouched."""
    _set_registration_status(job_seeker_id, RegistrationStatus.rejected)
    return MessageResponse(message="Job seeker rejected")


@router.put("/{job_seeker_id}/priority", response_model=MessageResponse)
async def set_priority(job_seeker_id: str, update: PriorityUpdate, admin: dict = Depends(get_current_admin)):
    """Set priority level; higher priority job seekers are listed first for assignment."""
    with get_db_session() as db:
        result = db.execute(
            text("""
                UPDATE job_seekers SET priority_level = :priority, updated_at = CURRENT_TIMESTAMP
                WHERE id = :id
            """),
            {"priority": update.priority_level.value, "id": job_seeker_id}
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Job seeker not found")

    return MessageResponse(message=f"Priority set to {update.priority_level.value}")
