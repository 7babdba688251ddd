"""
Event Routes

POST /admin/events - Create event (admin only)
GET /events - List events with their booth counts
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from typing import List

from jobfair.db.postgres import get_db_session, fetch_all, fetch_one
from jobfair.core.auth import get_current_admin, get_current_user
from jobfair.utils.helpers import generate_id, to_db_timestamp
from jobfair.schemas.schemas import EventCreate, EventResponse

router = APIRouter(tags=["Events"])
logger = logging.getLogger(__name__)

EVENTS_SQL = """
    SELECT ev.id AS event_id, ev.name, ev.venue, ev.start_date, ev.end_date, ev.is_active,
           COALESCE((SELECT COUNT(*) FROM booths b WHERE b.event_id = ev.id), 0) AS booth_count
    FROM events ev
"""


@router.post("/admin/events", response_model=EventResponse, status_code=201)
async def create_event(data: EventCreate, admin: dict = Depends(get_current_admin)):
    """Create a job fair event; booths are then added to it."""
    event_id = generate_id("event")
    with get_db_session() as db:
        db.execute(
            text("""
                INSERT INTO events (id, name, venue, start_date, end_date)
                VALUES (:id, :name, :venue, :start_date, :end_date)
            """),
            {
                "id": event_id,
                "name": data.name,
                "venue": data.venue,
                "start_date": to_db_timestamp(data.start_date),
                "end_date": to_db_timestamp(data.end_date)
            }
        )
        row = fetch_one(db, EVENTS_SQL + " WHERE ev.id = :id", {"id": event_id})

    logger.info(f"[Event] {event_id} created: {data.name}")
    return EventResponse(**row)


@router.get("/events", response_model=List[EventResponse])
async def list_events(user: dict = Depends(get_current_user)):
    """All events, soonest first."""
    with get_db_session() as db:
        rows = fetch_all(db, EVENTS_SQL + " ORDER BY ev.start_date ASC")
    return [EventResponse(**r) for r in rows]
