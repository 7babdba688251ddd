"""
Booth Service - booth setup, activation, capacity and interview slots.

Admins create booths for any registered employer; an employer keeps one
booth per event, created or updated through upsert_employer_booth.
Booth numbers are unique within an event.
Capacity is not stored: it is derived from the booth size.
Interview slots on one booth must not overlap in time. Back-to-back slots
(one ending exactly when the next starts) are allowed.
"""

import json
import logging
from datetime import timedelta
from typing import List

from sqlalchemy import text
from sqlalchemy.orm import Session

from jobfair.core.errors import JobFairError, NotFoundError, ConflictError, AuthorizationError
from jobfair.db.postgres import get_db_session, fetch_all, fetch_one
from jobfair.utils.helpers import generate_id, to_db_timestamp
from jobfair.schemas.schemas import (
    ActionResult, SlotResult, BoothResult, InterviewSlotCreate, InterviewSlotResponse,
    AdminBoothCreate, AdminBoothUpdate, EmployerBoothUpsert
)

logger = logging.getLogger(__name__)

BOOTH_CAPACITY_BY_SIZE = {
    "small": 15,
    "medium": 30,
    "large": 50,
}
DEFAULT_BOOTH_CAPACITY = 25


def booth_capacity(size) -> int:
    """Visitor capacity of a booth, derived from its size."""
    if hasattr(size, "value"):
        size = size.value
    return BOOTH_CAPACITY_BY_SIZE.get(size, DEFAULT_BOOTH_CAPACITY)


def utilization_pct(count: int, capacity: int) -> float:
    return round((count / capacity) * 100, 1) if capacity else 0.0


class BoothService:

    # --------------------------------------------------------
    # Booth setup
    # --------------------------------------------------------

    def create_booth(self, data: AdminBoothCreate) -> BoothResult:
        """Admin: create a booth at an event for the employer registered under `employer_email`."""
        booth_id = generate_id("booth")
        try:
            with get_db_session() as db:
                self._require_event(db, data.event_id)
                employer_id = self._find_employer_by_email(db, data.employer_email)
                self._ensure_booth_number_free(db, data.event_id, data.booth_number)
                self._insert_booth(db, booth_id, employer_id, data)
        except JobFairError as e:
            return BoothResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"Error creating booth {data.booth_number} for event {data.event_id}")
            return BoothResult(success=False, error="Failed to create booth", error_code="failure")

        logger.info(f"[Booth] {booth_id} created ({data.booth_number}) for {data.employer_email}")
        return BoothResult(success=True, message="Booth created successfully", booth_id=booth_id)

    def update_booth(self, booth_id: str, data: AdminBoothUpdate) -> BoothResult:
        """Admin: change any subset of a booth's fields."""
        if not data.model_dump(exclude_none=True):
            return BoothResult(success=False, error="No fields to update", error_code="validation")

        updates = []
        params = {"id": booth_id}

        try:
            with get_db_session() as db:
                booth = fetch_one(db, "SELECT id, event_id, booth_number FROM booths WHERE id = :id", {"id": booth_id})
                if not booth:
                    raise NotFoundError("Booth not found")

                event_id = data.event_id or booth["event_id"]
                booth_number = data.booth_number or booth["booth_number"]
                if data.event_id:
                    self._require_event(db, data.event_id)
                    updates.append("event_id = :event_id"); params["event_id"] = data.event_id
                if data.employer_email:
                    updates.append("employer_id = :employer_id")
                    params["employer_id"] = self._find_employer_by_email(db, data.employer_email)
                if data.booth_number: updates.append("booth_number = :booth_number"); params["booth_number"] = data.booth_number
                if data.location is not None: updates.append("location = :location"); params["location"] = data.location
                if data.size: updates.append("size = :size"); params["size"] = data.size.value
                if data.equipment is not None: updates.append("equipment = :equipment"); params["equipment"] = json.dumps(data.equipment)
                if data.special_requirements is not None:
                    updates.append("special_requirements = :special_requirements")
                    params["special_requirements"] = data.special_requirements
                if data.is_active is not None: updates.append("is_active = :is_active"); params["is_active"] = data.is_active

                if (event_id, booth_number) != (booth["event_id"], booth["booth_number"]):
                    self._ensure_booth_number_free(db, event_id, booth_number, exclude_id=booth_id)

                db.execute(
                    text(f"UPDATE booths SET {', '.join(updates)}, updated_at = CURRENT_TIMESTAMP WHERE id = :id"),
                    params
                )
        except JobFairError as e:
            return BoothResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"Error updating booth {booth_id}")
            return BoothResult(success=False, error="Failed to update booth", error_code="failure")

        logger.info(f"[Booth] {booth_id} updated: {', '.join(sorted(k for k in params if k != 'id'))}")
        return BoothResult(success=True, message="Booth updated successfully", booth_id=booth_id)

    def delete_booth(self, booth_id: str) -> ActionResult:
        """
        Admin: delete a booth together with its slots and assignment history.
        Refused while any assignment at the booth is still active.
        """
        try:
            with get_db_session() as db:
                if not fetch_one(db, "SELECT id FROM booths WHERE id = :id", {"id": booth_id}):
                    raise NotFoundError("Booth not found")
                active = fetch_one(
                    db,
                    """
                        SELECT COUNT(*) AS n FROM booth_assignments
                        WHERE booth_id = :id AND status IN ('assigned', 'confirmed')
                    """,
                    {"id": booth_id}
                )
                if active["n"]:
                    raise ConflictError("Cannot delete a booth with active assignments")

                db.execute(text("DELETE FROM booth_assignments WHERE booth_id = :id"), {"id": booth_id})
                db.execute(text("DELETE FROM interview_slots WHERE booth_id = :id"), {"id": booth_id})
                db.execute(text("DELETE FROM booths WHERE id = :id"), {"id": booth_id})
        except JobFairError as e:
            return ActionResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"Error deleting booth {booth_id}")
            return ActionResult(success=False, error="Failed to delete booth", error_code="failure")

        logger.info(f"[Booth] {booth_id} deleted")
        return ActionResult(success=True, message="Booth deleted successfully")

    def upsert_employer_booth(self, user: dict, data: EmployerBoothUpsert) -> BoothResult:
        """Employer: create the booth for an event, or update it when one already exists."""
        try:
            with get_db_session() as db:
                if user["role"] == "admin":
                    raise AuthorizationError("Admins create booths through the admin booth endpoints")
                employer = fetch_one(db, "SELECT id FROM employers WHERE user_id = :id", {"id": user["user_id"]})
                if not employer:
                    raise NotFoundError("Employer profile not found. Please complete your company registration first.")
                self._require_event(db, data.event_id)

                existing = fetch_one(
                    db,
                    "SELECT id FROM booths WHERE employer_id = :employer_id AND event_id = :event_id",
                    {"employer_id": employer["id"], "event_id": data.event_id}
                )
                booth_id = existing["id"] if existing else generate_id("booth")
                self._ensure_booth_number_free(db, data.event_id, data.booth_number, exclude_id=booth_id)

                if existing:
                    db.execute(
                        text("""
                            UPDATE booths
                            SET booth_number = :booth_number, location = :location, size = :size,
                                equipment = :equipment, special_requirements = :special_requirements,
                                updated_at = CURRENT_TIMESTAMP
                            WHERE id = :id
                        """),
                        {
                            "id": booth_id,
                            "booth_number": data.booth_number,
                            "location": data.location,
                            "size": data.size.value,
                            "equipment": json.dumps(data.equipment),
                            "special_requirements": data.special_requirements
                        }
                    )
                else:
                    self._insert_booth(db, booth_id, employer["id"], data)
        except JobFairError as e:
            return BoothResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"Error saving booth for employer user {user['user_id']}")
            return BoothResult(success=False, error="Failed to save booth", error_code="failure")

        action = "updated" if existing else "created"
        logger.info(f"[Booth] {booth_id} {action} by employer user {user['user_id']}")
        return BoothResult(success=True, message=f"Booth {action} successfully", booth_id=booth_id)

    # --------------------------------------------------------
    # Activation and interview slots
    # --------------------------------------------------------

    def toggle_booth_status(self, booth_id: str) -> ActionResult:
        try:
            with get_db_session() as db:
                booth = fetch_one(db, "SELECT id, is_active FROM booths WHERE id = :id", {"id": booth_id})
                if not booth:
                    raise NotFoundError("Booth not found")
                was_active = bool(booth["is_active"])
                db.execute(
                    text("UPDATE booths SET is_active = :active, updated_at = CURRENT_TIMESTAMP WHERE id = :id"),
                    {"active": not was_active, "id": booth_id}
                )
        except JobFairError as e:
            return ActionResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"Error toggling booth {booth_id}")
            return ActionResult(success=False, error="Failed to toggle booth status", error_code="failure")

        action = "deactivated" if was_active else "activated"
        logger.info(f"[Booth] {booth_id} {action}")
        return ActionResult(success=True, message=f"Booth {action} successfully")

    def create_interview_slot(self, user: dict, booth_id: str, data: InterviewSlotCreate) -> SlotResult:
        """Create a slot of `duration` minutes, rejecting any overlap on the same booth."""
        start_time = data.start_time
        end_time = start_time + timedelta(minutes=data.duration)
        slot_id = generate_id("slot")
        params = {
            "booth_id": booth_id,
            "start_time": to_db_timestamp(start_time),
            "end_time": to_db_timestamp(end_time),
        }

        try:
            with get_db_session() as db:
                self._get_managed_booth(db, user, booth_id)

                conflict = fetch_one(
                    db,
                    """
                        SELECT id FROM interview_slots
                        WHERE booth_id = :booth_id
                          AND start_time < :end_time
                          AND end_time > :start_time
                    """,
                    params
                )
                if conflict:
                    raise ConflictError("Time slot conflicts with existing interview slot")

                db.execute(
                    text("""
                        INSERT INTO interview_slots (id, booth_id, start_time, end_time, duration,
                            is_booked, interviewer_name, notes)
                        VALUES (:id, :booth_id, :start_time, :end_time, :duration, FALSE,
                            :interviewer_name, :notes)
                    """),
                    {
                        **params,
                        "id": slot_id,
                        "duration": data.duration,
                        "interviewer_name": data.interviewer_name,
                        "notes": data.notes
                    }
                )
        except JobFairError as e:
            return SlotResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"Error creating interview slot for booth {booth_id}")
            return SlotResult(success=False, error="Failed to create interview slot", error_code="failure")

        logger.info(f"[Slot] {slot_id} created on booth {booth_id} at {params['start_time']}")
        return SlotResult(success=True, message="Interview slot created successfully", slot_id=slot_id)

    def list_interview_slots(self, user: dict, booth_id: str) -> List[InterviewSlotResponse]:
        """Slots of one booth ordered by start time. Raises NotFoundError for unknown/foreign booths."""
        with get_db_session() as db:
            self._get_managed_booth(db, user, booth_id)
            rows = fetch_all(
                db,
                """
                    SELECT id AS slot_id, booth_id, start_time, end_time, duration, is_booked,
                           interviewer_name, notes
                    FROM interview_slots WHERE booth_id = :booth_id
                    ORDER BY start_time ASC
                """,
                {"booth_id": booth_id}
            )
        return [InterviewSlotResponse(**r) for r in rows]

    def delete_interview_slot(self, user: dict, slot_id: str) -> ActionResult:
        try:
            with get_db_session() as db:
                slot = fetch_one(
                    db, "SELECT id, booth_id, is_booked FROM interview_slots WHERE id = :id", {"id": slot_id}
                )
                if not slot:
                    raise NotFoundError("Interview slot not found or access denied")
                self._get_managed_booth(db, user, slot["booth_id"])
                if slot["is_booked"]:
                    raise ConflictError("Cannot delete a booked interview slot")
                db.execute(text("DELETE FROM interview_slots WHERE id = :id"), {"id": slot_id})
        except JobFairError as e:
            return ActionResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"Error deleting interview slot {slot_id}")
            return ActionResult(success=False, error="Failed to delete interview slot", error_code="failure")

        logger.info(f"[Slot] {slot_id} deleted")
        return ActionResult(success=True, message="Interview slot deleted successfully")

    def _require_event(self, db: Session, event_id: str) -> dict:
        event = fetch_one(db, "SELECT id FROM events WHERE id = :id", {"id": event_id})
        if not event:
            raise NotFoundError("Event not found")
        return event

    def _find_employer_by_email(self, db: Session, email: str) -> str:
        row = fetch_one(
            db,
            """
                SELECT u.id AS user_id, e.id AS employer_id
                FROM users u LEFT JOIN employers e ON e.user_id = u.id
                WHERE u.email = :email
            """,
            {"email": email}
        )
        if not row:
            raise NotFoundError(
                f"No user found with email: {email}. "
                "Please ensure the company user is registered in the system first."
            )
        if not row["employer_id"]:
            raise NotFoundError(
                f"User with email {email} exists but has no employer profile. "
                "Please ask them to complete their company registration first."
            )
        return row["employer_id"]

    def _ensure_booth_number_free(self, db: Session, event_id: str, booth_number: str, exclude_id: str = None):
        sql = "SELECT id FROM booths WHERE event_id = :event_id AND booth_number = :booth_number"
        params = {"event_id": event_id, "booth_number": booth_number}
        if exclude_id:
            sql += " AND id <> :exclude_id"
            params["exclude_id"] = exclude_id
        if fetch_one(db, sql, params):
            raise ConflictError(f"Booth number {booth_number} already exists for this event")

    def _insert_booth(self, db: Session, booth_id: str, employer_id: str, data):
        db.execute(
            text("""
                INSERT INTO booths (id, event_id, employer_id, booth_number, location, size,
                    equipment, special_requirements, is_active)
                VALUES (:id, :event_id, :employer_id, :booth_number, :location, :size,
                    :equipment, :special_requirements, TRUE)
            """),
            {
                "id": booth_id,
                "event_id": data.event_id,
                "employer_id": employer_id,
                "booth_number": data.booth_number,
                "location": data.location,
                "size": data.size.value,
                "equipment": json.dumps(data.equipment),
                "special_requirements": data.special_requirements
            }
        )

    def _get_managed_booth(self, db: Session, user: dict, booth_id: str) -> dict:
        """Admins manage every booth; employers only their own."""
        booth = fetch_one(
            db,
            """
                SELECT b.id, b.employer_id, e.user_id AS owner_user_id
                FROM booths b LEFT JOIN employers e ON e.id = b.employer_id
                WHERE b.id = :id
            """,
            {"id": booth_id}
        )
        if not booth:
            raise NotFoundError("Booth not found or access denied")
        if user["role"] != "admin" and booth["owner_user_id"] != user["user_id"]:
            raise NotFoundError("Booth not found or access denied")
        return booth


# Singleton instance
_booth_service: BoothService = None


def get_booth_service() -> BoothService:
    """Get or create the booth service (singleton pattern)"""
    global _booth_service
    if _booth_service is None:
        _booth_service = BoothService()
    return _booth_service
