import json
import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

# Settings are read once at import time, so point them at a throwaway
# SQLite database before anything from jobfair is imported.
_DB_PATH = Path(tempfile.gettempdir()) / f"jobfair_test_{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ["BULK_ASSIGN_BATCH_DELAY_SECONDS"] = "0"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["AUTO_CREATE_SCHEMA"] = "false"
os.environ["DEBUG"] = "false"

import pytest
from sqlalchemy import text

from jobfair.core.auth import create_access_token
from jobfair.db.postgres import engine, get_db_session, fetch_one
from jobfair.db.schema import init_schema, drop_schema
from jobfair.services.booth_assignment_service import BoothAssignmentService
from jobfair.services.booth_service import BoothService
from jobfair.utils.helpers import generate_id, to_db_timestamp

SLOT_DAY = datetime(2026, 5, 1, 9, 0)


class Seeder:
    """Inserts rows directly so tests control every column."""

    def __init__(self):
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def user(self, name="Test User", role="job_seeker", email=None, password_hash=None, is_active=True) -> str:
        user_id = generate_id("user")
        with get_db_session() as db:
            db.execute(
                text("""
                    INSERT INTO users (id, name, email, role, password_hash, is_active)
                    VALUES (:id, :name, :email, :role, :password_hash, :is_active)
                """),
                {
                    "id": user_id,
                    "name": name,
                    "email": email or f"user{self._next()}@example.com",
                    "role": role,
                    "password_hash": password_hash,
                    "is_active": is_active,
                }
            )
        return user_id

    def admin(self, name="Ada Admin") -> dict:
        user_id = self.user(name=name, role="admin")
        return {"user_id": user_id, "name": name, "email": None, "role": "admin"}

    def job_seeker(self, name="Jane Seeker", email=None, registration_status="approved",
                   assignment_status="unassigned", priority_level="normal", skills=None,
                   bio=None, experience=None, education=None, created_at=None) -> str:
        user_id = self.user(name=name, email=email)
        job_seeker_id = generate_id("jobseeker")
        with get_db_session() as db:
            db.execute(
                text("""
                    INSERT INTO job_seekers (id, user_id, bio, skills, experience, education,
                        registration_status, assignment_status, priority_level, created_at)
                    VALUES (:id, :user_id, :bio, :skills, :experience, :education,
                        :registration_status, :assignment_status, :priority_level, :created_at)
                """),
                {
                    "id": job_seeker_id,
                    "user_id": user_id,
                    "bio": bio,
                    "skills": json.dumps(skills or []),
                    "experience": experience,
                    "education": education,
                    "registration_status": registration_status,
                    "assignment_status": assignment_status,
                    "priority_level": priority_level,
                    "created_at": to_db_timestamp(created_at or datetime(2026, 1, 1, 12, 0)),
                }
            )
        return job_seeker_id

    def employer(self, company_name="Acme Corp", user_id=None) -> str:
        user_id = user_id or self.user(name=f"{company_name} HR", role="employer")
        employer_id = generate_id("employer")
        with get_db_session() as db:
            db.execute(
                text("INSERT INTO employers (id, user_id, company_name) VALUES (:id, :user_id, :name)"),
                {"id": employer_id, "user_id": user_id, "name": company_name}
            )
        return employer_id

    def event(self, name="Spring Job Fair") -> str:
        event_id = generate_id("event")
        with get_db_session() as db:
            db.execute(
                text("""
                    INSERT INTO events (id, name, venue, start_date, end_date)
                    VALUES (:id, :name, 'Expo Hall', :start, :end)
                """),
                {
                    "id": event_id,
                    "name": name,
                    "start": to_db_timestamp(SLOT_DAY),
                    "end": to_db_timestamp(SLOT_DAY + timedelta(hours=9)),
                }
            )
        return event_id

    def booth(self, booth_number="A1", size="medium", is_active=True, employer_id=None, event_id=None,
              company_name="Acme Corp") -> str:
        employer_id = employer_id or self.employer(company_name=company_name)
        event_id = event_id or self.event()
        booth_id = generate_id("booth")
        with get_db_session() as db:
            db.execute(
                text("""
                    INSERT INTO booths (id, event_id, employer_id, booth_number, size, is_active)
                    VALUES (:id, :event_id, :employer_id, :booth_number, :size, :is_active)
                """),
                {
                    "id": booth_id,
                    "event_id": event_id,
                    "employer_id": employer_id,
                    "booth_number": booth_number,
                    "size": size,
                    "is_active": is_active,
                }
            )
        return booth_id

    def slot(self, booth_id, start=None, minutes=30, is_booked=False) -> str:
        start = start or SLOT_DAY + timedelta(hours=1)
        slot_id = generate_id("slot")
        with get_db_session() as db:
            db.execute(
                text("""
                    INSERT INTO interview_slots (id, booth_id, start_time, end_time, duration, is_booked)
                    VALUES (:id, :booth_id, :start, :end, :duration, :is_booked)
                """),
                {
                    "id": slot_id,
                    "booth_id": booth_id,
                    "start": to_db_timestamp(start),
                    "end": to_db_timestamp(start + timedelta(minutes=minutes)),
                    "duration": minutes,
                    "is_booked": is_booked,
                }
            )
        return slot_id

    def row(self, sql, params=None):
        with get_db_session() as db:
            return fetch_one(db, sql, params)

    def job_seeker_status(self, job_seeker_id) -> str:
        return self.row("SELECT assignment_status FROM job_seekers WHERE id = :id", {"id": job_seeker_id})["assignment_status"]

    def slot_booked(self, slot_id) -> bool:
        return bool(self.row("SELECT is_booked FROM interview_slots WHERE id = :id", {"id": slot_id})["is_booked"])

    def assignment(self, assignment_id):
        return self.row("SELECT * FROM booth_assignments WHERE id = :id", {"id": assignment_id})

    def count_assignments(self, job_seeker_id=None, booth_id=None) -> int:
        sql = "SELECT COUNT(*) AS n FROM booth_assignments WHERE 1 = 1"
        params = {}
        if job_seeker_id:
            sql += " AND job_seeker_id = :js"
            params["js"] = job_seeker_id
        if booth_id:
            sql += " AND booth_id = :b"
            params["b"] = booth_id
        return int(self.row(sql, params)["n"])


@pytest.fixture(scope="session", autouse=True)
def _database_file():
    yield
    engine.dispose()
    if _DB_PATH.exists():
        _DB_PATH.unlink()


@pytest.fixture(autouse=True)
def fresh_schema():
    drop_schema()
    init_schema()
    yield


@pytest.fixture
def seed():
    return Seeder()


@pytest.fixture
def admin(seed):
    return seed.admin()


@pytest.fixture
def service():
    return BoothAssignmentService(batch_size=2, batch_delay_seconds=0)


@pytest.fixture
def booth_service():
    return BoothService()


@pytest.fixture
def auth_headers():
    def _headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}
    return _headers
