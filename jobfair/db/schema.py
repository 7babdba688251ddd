"""
Relational schema (DDL) for the job fair database.

Kept in plain SQL that runs on both PostgreSQL (production) and SQLite
(test-suite). Skills are stored as a JSON-encoded TEXT column.
"""

import logging

from sqlalchemy import text

from jobfair.db.postgres import get_db_session

logger = logging.getLogger(__name__)


CREATE_USERS_SQL = """
create table if not exists users (
  id              text primary key,
  name            text not null,
  email           text not null unique,
  role            text not null default 'job_seeker',
  password_hash   text,
  phone_number    text,
  is_active       boolean not null default true,
  created_at      timestamp not null default current_timestamp,
  updated_at      timestamp not null default current_timestamp
)
"""

CREATE_JOB_SEEKERS_SQL = """
create table if not exists job_seekers (
  id                    text primary key,
  user_id               text not null references users(id) on delete cascade,
  bio                   text,
  skills                text,
  experience            text,
  education             text,
  registration_status   text not null default 'pending',
  assignment_status     text not null default 'unassigned',
  priority_level        text not null default 'normal',
  created_at            timestamp not null default current_timestamp,
  updated_at            timestamp not null default current_timestamp
)
"""

CREATE_EMPLOYERS_SQL = """
create table if not exists employers (
  id                    text primary key,
  user_id               text not null references users(id) on delete cascade,
  company_name          text not null,
  company_description   text,
  industry              text,
  company_size          text,
  website               text,
  contact_email         text,
  is_verified           boolean not null default false,
  created_at            timestamp not null default current_timestamp,
  updated_at            timestamp not null default current_timestamp
)
"""

CREATE_EVENTS_SQL = """
create table if not exists events (
  id              text primary key,
  name            text not null,
  venue           text not null,
  start_date      timestamp not null,
  end_date        timestamp not null,
  is_active       boolean not null default true,
  created_at      timestamp not null default current_timestamp,
  updated_at      timestamp not null default current_timestamp
)
"""

CREATE_BOOTHS_SQL = """
create table if not exists booths (
  id                    text primary key,
  event_id              text not null references events(id) on delete cascade,
  employer_id           text not null references employers(id) on delete cascade,
  booth_number          text not null,
  location              text,
  size                  text,
  equipment             text,
  special_requirements  text,
  is_active             boolean not null default true,
  created_at            timestamp not null default current_timestamp,
  updated_at            timestamp not null default current_timestamp
)
"""

CREATE_INTERVIEW_SLOTS_SQL = """
create table if not exists interview_slots (
  id                text primary key,
  booth_id          text not null references booths(id) on delete cascade,
  start_time        timestamp not null,
  end_time          timestamp not null,
  duration          integer not null default 30,
  is_booked         boolean not null default false,
  interviewer_name  text,
  notes             text,
  created_at        timestamp not null default current_timestamp,
  updated_at        timestamp not null default current_timestamp
)
"""

CREATE_BOOTH_ASSIGNMENTS_SQL = """
create table if not exists booth_assignments (
  id                  text primary key,
  job_seeker_id       text not null references job_seekers(id) on delete cascade,
  booth_id            text not null references booths(id) on delete cascade,
  interview_slot_id   text references interview_slots(id) on delete set null,
  assigned_by         text not null references users(id) on delete cascade,
  assigned_at         timestamp not null default current_timestamp,
  status              text not null default 'assigned',
  interview_date      timestamp,
  interview_time      text,
  notes               text,
  priority            text not null default 'medium',
  notification_sent   boolean not null default false,
  created_at          timestamp not null default current_timestamp,
  updated_at          timestamp not null default current_timestamp
)
"""

CREATE_INDEXES_SQL = [
    "create index if not exists job_seeker_status_idx on job_seekers (registration_status)",
    "create index if not exists job_seeker_assignment_status_idx on job_seekers (assignment_status)",
    "create index if not exists booth_event_idx on booths (event_id)",
    "create index if not exists booth_employer_idx on booths (employer_id)",
    "create index if not exists interview_slot_booth_idx on interview_slots (booth_id)",
    "create index if not exists booth_assignment_job_seeker_idx on booth_assignments (job_seeker_id)",
    "create index if not exists booth_assignment_booth_idx on booth_assignments (booth_id)",
    "create index if not exists booth_assignment_status_idx on booth_assignments (status)",
    "create unique index if not exists employer_user_idx on employers (user_id)",
    "create unique index if not exists booth_event_number_idx on booths (event_id, booth_number)",
    # one active assignment per (job seeker, booth)
    """
    create unique index if not exists booth_assignment_active_pair_idx
    on booth_assignments (job_seeker_id, booth_id)
    where status in ('assigned', 'confirmed')
    """,
]

# Creation order respects foreign keys; dropping walks it backwards
TABLES = [
    ("users", CREATE_USERS_SQL),
    ("job_seekers", CREATE_JOB_SEEKERS_SQL),
    ("employers", CREATE_EMPLOYERS_SQL),
    ("events", CREATE_EVENTS_SQL),
    ("booths", CREATE_BOOTHS_SQL),
    ("interview_slots", CREATE_INTERVIEW_SLOTS_SQL),
    ("booth_assignments", CREATE_BOOTH_ASSIGNMENTS_SQL),
]


def init_schema():
    """Create all tables and indexes if they do not exist yet."""
    with get_db_session() as db:
        for _, ddl in TABLES:
            db.execute(text(ddl))
        for ddl in CREATE_INDEXES_SQL:
            db.execute(text(ddl))
    logger.info("Database schema initialized")


def drop_schema():
    """Drop every table. Destroys all data."""
    with get_db_session() as db:
        for name, _ in reversed(TABLES):
            db.execute(text(f"drop table if exists {name}"))
    logger.info("Database schema dropped")
