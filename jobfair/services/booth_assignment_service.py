"""
Booth Assignment Service

PURPOSE:
Match approved job seekers to employer booths, optionally reserving an
interview slot at the booth, and keep the job seeker's assignment_status in
lock-step with the assignment row.

RULES:
- A job seeker holds at most one active (assigned / confirmed) assignment per booth
- Each mutation is one get_db_session() unit of work: it all commits or none of it does
- A slot is booked with a conditional UPDATE, so it can never be booked twice
- Cancelling or removing an assignment frees its interview slot

Every public method returns a result value ({success, message | error});
nothing raises past the service boundary. Bulk assignment is best-effort:
each item is its own transaction, successes persist and failures are reported.
"""

import logging
import time
from typing import List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobfair.core.config import get_settings
from jobfair.core.errors import JobFairError, NotFoundError, ConflictError
from jobfair.db.postgres import get_db_session, fetch_all, fetch_one
from jobfair.services.booth_service import booth_capacity, utilization_pct
from jobfair.utils.helpers import generate_id, to_db_timestamp, parse_json_list, contains_ci
from jobfair.schemas.schemas import (
    ActionResult, AssignmentResult, BoothAssignmentCreate, BoothAssignmentStatus,
    BulkAssignmentResult, BulkAssignmentItemResult, BulkAssignmentSummary,
    UnassignedJobSeekerFilters, JobSeekerSummary, JobSeekerListResult,
    AvailableBooth, BoothListResult, BoothAssignmentFilters, BoothAssignmentDetail,
    AssignmentListResult, StatusCount, BoothUtilization, AssignmentStatistics,
    AssignmentStatisticsResult
)

logger = logging.getLogger(__name__)

ACTIVE_ASSIGNMENT_STATUSES = ("assigned", "confirmed")

# Assignment status -> job seeker assignment_status; anything else maps to "assigned"
JOB_SEEKER_STATUS_BY_ASSIGNMENT_STATUS = {
    "cancelled": "unassigned",
    "confirmed": "confirmed",
    "completed": "completed",
}

RECENT_ASSIGNMENTS_LIMIT = 10


def derive_job_seeker_status(assignment_status: str) -> str:
    """Job seeker assignment_status implied by a booth assignment status."""
    return JOB_SEEKER_STATUS_BY_ASSIGNMENT_STATUS.get(assignment_status, "assigned")


# ============================================================
# SQL
# ============================================================

ACTIVE_BOOTHS_SQL = """
    SELECT b.id AS booth_id, b.booth_number, b.location, b.size,
           e.company_name, ev.name AS event_name,
           COALESCE((
               SELECT COUNT(*) FROM booth_assignments ba
               WHERE ba.booth_id = b.id AND ba.status IN ('assigned', 'confirmed')
           ), 0) AS assignment_count,
           COALESCE((
               SELECT COUNT(*) FROM interview_slots s WHERE s.booth_id = b.id
           ), 0) AS slot_count,
           COALESCE((
               SELECT COUNT(*) FROM interview_slots s
               WHERE s.booth_id = b.id AND s.is_booked = FALSE
           ), 0) AS available_slot_count
    FROM booths b
    LEFT JOIN employers e ON e.id = b.employer_id
    LEFT JOIN events ev ON ev.id = b.event_id
    WHERE b.is_active = TRUE
    ORDER BY b.booth_number ASC
"""

ASSIGNMENT_DETAIL_SQL = """
    SELECT ba.id AS assignment_id, ba.job_seeker_id, u.name AS job_seeker_name,
           u.email AS job_seeker_email, ba.booth_id, b.booth_number, e.company_name,
           ev.name AS event_name, ba.interview_slot_id, ba.status, ba.priority, ba.notes,
           ba.interview_date, ba.interview_time, ba.assigned_by, ba.assigned_at
    FROM booth_assignments ba
    LEFT JOIN job_seekers js ON js.id = ba.job_seeker_id
    LEFT JOIN users u ON u.id = js.user_id
    LEFT JOIN booths b ON b.id = ba.booth_id
    LEFT JOIN employers e ON e.id = b.employer_id
    LEFT JOIN events ev ON ev.id = b.event_id
    WHERE 1 = 1
"""


class BoothAssignmentService:
    """
    Assigns job seekers to booths and manages the assignment lifecycle.
    The acting admin is passed in as the dict produced by get_current_admin.
    """

    def __init__(self, batch_size: Optional[int] = None, batch_delay_seconds: Optional[float] = None):
        settings = get_settings()
        self.batch_size = max(1, batch_size or settings.bulk_assign_batch_size)
        self.batch_delay_seconds = (
            settings.bulk_assign_batch_delay_seconds if batch_delay_seconds is None else batch_delay_seconds
        )

    # --------------------------------------------------------
    # Mutations
    # --------------------------------------------------------

    def assign_job_seeker_to_booth(self, admin: dict, data: BoothAssignmentCreate) -> AssignmentResult:
        """
        Assign one job seeker to a booth (and optionally an interview slot).

        Validation and writes share one transaction: the assignment insert,
        the job seeker status change and the slot booking commit together.
        """
        assignment_id = generate_id("assignment")
        try:
            with get_db_session() as db:
                self._require_approved_job_seeker(db, data.job_seeker_id)
                self._require_active_booth(db, data.booth_id)
                self._ensure_no_active_assignment(db, data.job_seeker_id, data.booth_id)

                if data.interview_slot_id:
                    self._book_slot(db, data.interview_slot_id, data.booth_id)

                self._write_assignment(
                    db,
                    text("""
                        INSERT INTO booth_assignments (id, job_seeker_id, booth_id, interview_slot_id,
                            assigned_by, status, interview_date, interview_time, notes, priority)
                        VALUES (:id, :job_seeker_id, :booth_id, :slot_id, :assigned_by, 'assigned',
                            :interview_date, :interview_time, :notes, :priority)
                    """),
                    {
                        "id": assignment_id,
                        "job_seeker_id": data.job_seeker_id,
                        "booth_id": data.booth_id,
                        "slot_id": data.interview_slot_id,
                        "assigned_by": admin["user_id"],
                        "interview_date": to_db_timestamp(data.interview_date),
                        "interview_time": data.interview_time,
                        "notes": data.notes,
                        "priority": data.priority.value
                    }
                )
                self._set_job_seeker_status(db, data.job_seeker_id, "assigned")
        except JobFairError as e:
            logger.info(f"[Assign] Rejected {data.job_seeker_id} -> {data.booth_id}: {e.message}")
            return AssignmentResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"[Assign] Error assigning {data.job_seeker_id} -> {data.booth_id}")
            return AssignmentResult(success=False, error="Failed to assign job seeker to booth", error_code="failure")

        logger.info(f"[Assign] {data.job_seeker_id} -> booth {data.booth_id} ({assignment_id}) by {admin['user_id']}")
        return AssignmentResult(
            success=True,
            message="Job seeker assigned to booth successfully",
            assignment_id=assignment_id
        )

    def bulk_assign_job_seekers(self, admin: dict, assignments: List[BoothAssignmentCreate]) -> BulkAssignmentResult:
        """
        Best-effort batch: each item runs the single-assign operation in its
        own transaction. Items are processed in fixed-size batches with a short
        pause between batches to spread the load on the database.
        """
        results: List[BulkAssignmentItemResult] = []
        successful = 0
        failed = 0

        for start in range(0, len(assignments), self.batch_size):
            if start and self.batch_delay_seconds > 0:
                time.sleep(self.batch_delay_seconds)

            for item in assignments[start:start + self.batch_size]:
                try:
                    result = self.assign_job_seeker_to_booth(admin, item)
                except Exception:
                    logger.exception(f"[Bulk] Unexpected error for {item.job_seeker_id} -> {item.booth_id}")
                    result = AssignmentResult(success=False, error="Assignment failed", error_code="failure")

                results.append(BulkAssignmentItemResult(
                    job_seeker_id=item.job_seeker_id,
                    booth_id=item.booth_id,
                    success=result.success,
                    error=result.error,
                    assignment_id=result.assignment_id
                ))
                if result.success:
                    successful += 1
                else:
                    failed += 1

        logger.info(f"[Bulk] {len(assignments)} items: {successful} successful, {failed} failed")
        return BulkAssignmentResult(
            success=successful > 0,
            message=f"Bulk assignment completed: {successful} successful, {failed} failed",
            results=results,
            summary=BulkAssignmentSummary(total=len(assignments), successful=successful, failed=failed)
        )

    def update_assignment_status(self, assignment_id: str, new_status, notes: Optional[str] = None) -> ActionResult:
        """
        Change an assignment's status and derive the job seeker's status from it.
        Cancelling frees the interview slot; re-activating a cancelled
        assignment books the slot again if it is still free.
        """
        try:
            status = BoothAssignmentStatus(new_status).value
        except ValueError:
            return ActionResult(success=False, error=f"Invalid assignment status: {new_status}", error_code="validation")

        try:
            with get_db_session() as db:
                assignment = self._require_assignment(db, assignment_id)
                previous = assignment["status"]
                slot_id = assignment["interview_slot_id"]

                if status in ACTIVE_ASSIGNMENT_STATUSES and previous not in ACTIVE_ASSIGNMENT_STATUSES:
                    self._ensure_no_active_assignment(
                        db, assignment["job_seeker_id"], assignment["booth_id"], exclude_id=assignment_id
                    )

                if slot_id:
                    if status == "cancelled":
                        self._free_slot(db, slot_id)
                    elif previous == "cancelled":
                        self._book_slot(db, slot_id, assignment["booth_id"])

                self._write_assignment(
                    db,
                    text("""
                        UPDATE booth_assignments
                        SET status = :status, notes = :notes, updated_at = CURRENT_TIMESTAMP
                        WHERE id = :id
                    """),
                    {"status": status, "notes": notes or assignment["notes"], "id": assignment_id}
                )
                self._set_job_seeker_status(db, assignment["job_seeker_id"], derive_job_seeker_status(status))
        except JobFairError as e:
            logger.info(f"[Status] Rejected {assignment_id} -> {status}: {e.message}")
            return ActionResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"[Status] Error updating {assignment_id} -> {status}")
            return ActionResult(success=False, error="Failed to update assignment status", error_code="failure")

        logger.info(f"[Status] {assignment_id}: {previous} -> {status}")
        return ActionResult(success=True, message="Assignment status updated successfully")

    def remove_booth_assignment(self, assignment_id: str) -> ActionResult:
        """Delete an assignment, reset the job seeker to unassigned and free the slot."""
        try:
            with get_db_session() as db:
                assignment = self._require_assignment(db, assignment_id)

                db.execute(text("DELETE FROM booth_assignments WHERE id = :id"), {"id": assignment_id})
                self._set_job_seeker_status(db, assignment["job_seeker_id"], "unassigned")
                if assignment["interview_slot_id"]:
                    self._free_slot(db, assignment["interview_slot_id"])
        except JobFairError as e:
            return ActionResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"[Remove] Error removing {assignment_id}")
            return ActionResult(success=False, error="Failed to remove assignment", error_code="failure")

        logger.info(f"[Remove] {assignment_id} removed")
        return ActionResult(success=True, message="Assignment removed successfully")

    # --------------------------------------------------------
    # Queries
    # --------------------------------------------------------

    def get_unassigned_job_seekers(self, filters: Optional[UnassignedJobSeekerFilters] = None) -> JobSeekerListResult:
        """
        Approved job seekers in the requested assignment status (default
        unassigned), highest priority first, then oldest registration first.
        Search term and skills are matched in memory.
        """
        filters = filters or UnassignedJobSeekerFilters()
        sql = """
            SELECT js.id AS job_seeker_id, js.user_id, u.name, u.email, js.bio, js.skills,
                   js.experience, js.education, js.registration_status, js.assignment_status,
                   js.priority_level, js.created_at,
                   COALESCE((
                       SELECT COUNT(*) FROM booth_assignments ba WHERE ba.job_seeker_id = js.id
                   ), 0) AS assignment_count
            FROM job_seekers js
            LEFT JOIN users u ON u.id = js.user_id
            WHERE js.registration_status = 'approved' AND js.assignment_status = :assignment_status
        """
        params = {"assignment_status": filters.assignment_status.value}

        if filters.experience:
            sql += " AND js.experience = :experience"
            params["experience"] = filters.experience
        if filters.education:
            sql += " AND js.education = :education"
            params["education"] = filters.education
        if filters.priority_level:
            sql += " AND js.priority_level = :priority_level"
            params["priority_level"] = filters.priority_level.value

        sql += """
            ORDER BY CASE js.priority_level WHEN 'high' THEN 3 WHEN 'normal' THEN 2 WHEN 'low' THEN 1 ELSE 0 END DESC,
                     js.created_at ASC
        """

        try:
            with get_db_session() as db:
                rows = fetch_all(db, sql, params)
        except Exception:
            logger.exception("Error fetching unassigned job seekers")
            return JobSeekerListResult(success=False, error="Failed to fetch unassigned job seekers", error_code="failure")

        seekers = [JobSeekerSummary(**{**r, "skills": parse_json_list(r["skills"])}) for r in rows]

        if filters.search_term:
            term = filters.search_term
            seekers = [
                s for s in seekers
                if contains_ci(s.name, term) or contains_ci(s.email, term) or contains_ci(s.bio, term)
            ]

        wanted_skills = [skill for skill in filters.skills if skill]
        if wanted_skills:
            seekers = [
                s for s in seekers
                if any(contains_ci(skill, wanted) for skill in s.skills for wanted in wanted_skills)
            ]

        return JobSeekerListResult(success=True, data=seekers, total=len(seekers))

    def get_available_booths(self) -> BoothListResult:
        """Active booths with employer/event names, load and derived capacity."""
        try:
            with get_db_session() as db:
                booths = self._active_booths(db)
        except Exception:
            logger.exception("Error fetching available booths")
            return BoothListResult(success=False, error="Failed to fetch available booths", error_code="failure")

        return BoothListResult(success=True, data=booths)

    def get_assignment_statistics(self) -> AssignmentStatisticsResult:
        """Dashboard figures: status breakdowns, booth utilization, recent assignments."""
        try:
            with get_db_session() as db:
                job_seeker_stats = fetch_all(db, """
                    SELECT assignment_status AS status, COUNT(*) AS count
                    FROM job_seekers
                    WHERE registration_status = 'approved'
                    GROUP BY assignment_status
                """)
                assignment_stats = fetch_all(db, """
                    SELECT status, COUNT(*) AS count
                    FROM booth_assignments
                    GROUP BY status
                """)
                booths = self._active_booths(db)
                recent = fetch_all(
                    db,
                    ASSIGNMENT_DETAIL_SQL + " ORDER BY ba.assigned_at DESC LIMIT :limit",
                    {"limit": RECENT_ASSIGNMENTS_LIMIT}
                )
        except Exception:
            logger.exception("Error fetching assignment statistics")
            return AssignmentStatisticsResult(success=False, error="Failed to fetch assignment statistics", error_code="failure")

        utilization = [
            BoothUtilization(
                booth_id=b.booth_id,
                booth_number=b.booth_number,
                company_name=b.company_name,
                capacity=b.capacity,
                assignment_count=b.assignment_count,
                utilization=b.utilization,
                slot_count=b.slot_count
            )
            for b in sorted(booths, key=lambda b: b.assignment_count, reverse=True)
        ]

        return AssignmentStatisticsResult(
            success=True,
            data=AssignmentStatistics(
                job_seeker_stats=[StatusCount(**r) for r in job_seeker_stats],
                assignment_stats=[StatusCount(**r) for r in assignment_stats],
                booth_utilization=utilization,
                recent_assignments=[BoothAssignmentDetail(**r) for r in recent]
            )
        )

    def get_booth_assignments(self, filters: Optional[BoothAssignmentFilters] = None) -> AssignmentListResult:
        """Assignments newest first, filtered in SQL, then by search term in memory."""
        filters = filters or BoothAssignmentFilters()
        sql = ASSIGNMENT_DETAIL_SQL
        params = {}

        if filters.status:
            sql += " AND ba.status = :status"
            params["status"] = filters.status.value
        if filters.booth_id:
            sql += " AND ba.booth_id = :booth_id"
            params["booth_id"] = filters.booth_id
        if filters.date_from:
            sql += " AND ba.assigned_at >= :date_from"
            params["date_from"] = to_db_timestamp(filters.date_from)
        if filters.date_to:
            sql += " AND ba.assigned_at <= :date_to"
            params["date_to"] = to_db_timestamp(filters.date_to)

        sql += " ORDER BY ba.assigned_at DESC"

        try:
            with get_db_session() as db:
                rows = fetch_all(db, sql, params)
        except Exception:
            logger.exception("Error fetching booth assignments")
            return AssignmentListResult(success=False, error="Failed to fetch booth assignments", error_code="failure")

        assignments = [BoothAssignmentDetail(**r) for r in rows]

        if filters.search_term:
            term = filters.search_term
            assignments = [
                a for a in assignments
                if contains_ci(a.job_seeker_name, term)
                or contains_ci(a.job_seeker_email, term)
                or contains_ci(a.company_name, term)
                or contains_ci(a.booth_number, term)
            ]

        return AssignmentListResult(success=True, data=assignments, total=len(assignments))

    # --------------------------------------------------------
    # Helpers (run inside the caller's transaction)
    # --------------------------------------------------------

    def _require_approved_job_seeker(self, db: Session, job_seeker_id: str) -> dict:
        job_seeker = fetch_one(
            db,
            "SELECT id, registration_status FROM job_seekers WHERE id = :id",
            {"id": job_seeker_id}
        )
        if not job_seeker or job_seeker["registration_status"] != "approved":
            raise NotFoundError("Job seeker not found or not approved")
        return job_seeker

    def _require_active_booth(self, db: Session, booth_id: str) -> dict:
        booth = fetch_one(db, "SELECT id, is_active FROM booths WHERE id = :id", {"id": booth_id})
        if not booth:
            raise NotFoundError("Booth not found or inactive")
        if not booth["is_active"]:
            raise ConflictError("Booth not found or inactive")
        return booth

    def _require_assignment(self, db: Session, assignment_id: str) -> dict:
        assignment = fetch_one(
            db,
            """
                SELECT id, job_seeker_id, booth_id, interview_slot_id, status, notes
                FROM booth_assignments WHERE id = :id
            """,
            {"id": assignment_id}
        )
        if not assignment:
            raise NotFoundError("Assignment not found")
        return assignment

    def _ensure_no_active_assignment(self, db: Session, job_seeker_id: str, booth_id: str,
                                     exclude_id: Optional[str] = None):
        sql = """
            SELECT id FROM booth_assignments
            WHERE job_seeker_id = :job_seeker_id AND booth_id = :booth_id
              AND status IN ('assigned', 'confirmed')
        """
        params = {"job_seeker_id": job_seeker_id, "booth_id": booth_id}
        if exclude_id:
            sql += " AND id <> :exclude_id"
            params["exclude_id"] = exclude_id
        if fetch_one(db, sql, params):
            raise ConflictError("Job seeker is already assigned to this booth")

    def _write_assignment(self, db: Session, statement, params: dict):
        # booth_assignment_active_pair_idx allows one active row per (job seeker, booth)
        try:
            db.execute(statement, params)
        except IntegrityError:
            logger.warning(f"[Assign] Duplicate active assignment rejected by index ({params['id']})")
            raise ConflictError("Job seeker is already assigned to this booth")

    def _book_slot(self, db: Session, slot_id: str, booth_id: str):
        result = db.execute(
            text("""
                UPDATE interview_slots SET is_booked = TRUE, updated_at = CURRENT_TIMESTAMP
                WHERE id = :id AND booth_id = :booth_id AND is_booked = FALSE
            """),
            {"id": slot_id, "booth_id": booth_id}
        )
        if result.rowcount == 1:
            return
        slot = fetch_one(
            db,
            "SELECT id FROM interview_slots WHERE id = :id AND booth_id = :booth_id",
            {"id": slot_id, "booth_id": booth_id}
        )
        if not slot:
            raise NotFoundError("Interview slot not found for this booth")
        raise ConflictError("Interview slot is already booked")

    def _free_slot(self, db: Session, slot_id: str):
        db.execute(
            text("UPDATE interview_slots SET is_booked = FALSE, updated_at = CURRENT_TIMESTAMP WHERE id = :id"),
            {"id": slot_id}
        )

    def _set_job_seeker_status(self, db: Session, job_seeker_id: str, assignment_status: str):
        db.execute(
            text("""
                UPDATE job_seekers SET assignment_status = :status, updated_at = CURRENT_TIMESTAMP
                WHERE id = :id
            """),
            {"status": assignment_status, "id": job_seeker_id}
        )

    def _active_booths(self, db: Session) -> List[AvailableBooth]:
        booths = []
        for r in fetch_all(db, ACTIVE_BOOTHS_SQL):
            capacity = booth_capacity(r["size"])
            count = int(r["assignment_count"])
            booths.append(AvailableBooth(
                **{**r, "assignment_count": count},
                capacity=capacity,
                remaining_capacity=max(capacity - count, 0),
                utilization=utilization_pct(count, capacity)
            ))
        return booths


# Singleton instance
_booth_assignment_service: BoothAssignmentService = None


def get_booth_assignment_service() -> BoothAssignmentService:
    """Get or create the booth assignment service (singleton pattern)"""
    global _booth_assignment_service
    if _booth_assignment_service is None:
        _booth_assignment_service = BoothAssignmentService()
    return _booth_assignment_service
