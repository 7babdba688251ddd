from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from jobfair.core.errors import NotFoundError
from jobfair.services.booth_service import booth_capacity, utilization_pct
from jobfair.schemas.schemas import (
    BoothSize, InterviewSlotCreate, AdminBoothCreate, AdminBoothUpdate, EmployerBoothUpsert,
    BoothAssignmentCreate
)

TEN_AM = datetime(2026, 5, 1, 10, 0)


@pytest.mark.parametrize("size, capacity", [
    ("small", 15),
    ("medium", 30),
    ("large", 50),
    (BoothSize.large, 50),
    ("xl", 25),
    (None, 25),
])
def test_booth_capacity_by_size(size, capacity):
    assert booth_capacity(size) == capacity


def test_utilization_pct():
    assert utilization_pct(0, 30) == 0.0
    assert utilization_pct(1, 3) == 33.3
    assert utilization_pct(5, 0) == 0.0


def test_toggle_booth_status(booth_service, seed):
    booth = seed.booth()

    first = booth_service.toggle_booth_status(booth)
    assert first.success
    assert first.message == "Booth deactivated successfully"
    assert not seed.row("SELECT is_active FROM booths WHERE id = :id", {"id": booth})["is_active"]

    second = booth_service.toggle_booth_status(booth)
    assert second.message == "Booth activated successfully"
    assert seed.row("SELECT is_active FROM booths WHERE id = :id", {"id": booth})["is_active"]

    missing = booth_service.toggle_booth_status("booth_missing")
    assert not missing.success
    assert missing.error == "Booth not found"


def test_create_interview_slot(booth_service, admin, seed):
    booth = seed.booth()

    result = booth_service.create_interview_slot(
        admin, booth, InterviewSlotCreate(start_time=TEN_AM, duration=45, interviewer_name="Sam Ortiz")
    )

    assert result.success
    assert result.message == "Interview slot created successfully"
    slots = booth_service.list_interview_slots(admin, booth)
    assert len(slots) == 1
    assert slots[0].slot_id == result.slot_id
    assert slots[0].end_time == datetime(2026, 5, 1, 10, 45)
    assert slots[0].interviewer_name == "Sam Ortiz"
    assert not slots[0].is_booked


@pytest.mark.parametrize("start, duration", [
    (datetime(2026, 5, 1, 10, 0), 30),   # identical
    (datetime(2026, 5, 1, 10, 15), 30),  # starts inside
    (datetime(2026, 5, 1, 9, 45), 30),   # ends inside
    (datetime(2026, 5, 1, 9, 30), 120),  # contains
])
def test_overlapping_slot_is_rejected(booth_service, admin, seed, start, duration):
    booth = seed.booth()
    assert booth_service.create_interview_slot(admin, booth, InterviewSlotCreate(start_time=TEN_AM)).success

    result = booth_service.create_interview_slot(
        admin, booth, InterviewSlotCreate(start_time=start, duration=duration)
    )

    assert not result.success
    assert result.error == "Time slot conflicts with existing interview slot"
    assert len(booth_service.list_interview_slots(admin, booth)) == 1


def test_back_to_back_slots_are_allowed(booth_service, admin, seed):
    booth = seed.booth()
    before = InterviewSlotCreate(start_time=datetime(2026, 5, 1, 9, 30))
    at_ten = InterviewSlotCreate(start_time=TEN_AM)
    after = InterviewSlotCreate(start_time=datetime(2026, 5, 1, 10, 30))

    assert booth_service.create_interview_slot(admin, booth, at_ten).success
    assert booth_service.create_interview_slot(admin, booth, after).success
    assert booth_service.create_interview_slot(admin, booth, before).success

    starts = [s.start_time.hour * 60 + s.start_time.minute for s in booth_service.list_interview_slots(admin, booth)]
    assert starts == [570, 600, 630]


def test_same_time_on_another_booth_is_allowed(booth_service, admin, seed):
    first = seed.booth(booth_number="A1")
    second = seed.booth(booth_number="A2")
    data = InterviewSlotCreate(start_time=TEN_AM)

    assert booth_service.create_interview_slot(admin, first, data).success
    assert booth_service.create_interview_slot(admin, second, data).success


def test_slot_duration_bounds():
    with pytest.raises(ValidationError):
        InterviewSlotCreate(start_time=TEN_AM, duration=0)
    with pytest.raises(ValidationError):
        InterviewSlotCreate(start_time=TEN_AM, duration=481)


def test_employer_manages_only_own_booths(booth_service, seed):
    owner_id = seed.user(name="Owner", role="employer")
    owner = {"user_id": owner_id, "role": "employer"}
    rival = {"user_id": seed.user(name="Rival", role="employer"), "role": "employer"}
    booth = seed.booth(employer_id=seed.employer(user_id=owner_id))

    assert booth_service.create_interview_slot(owner, booth, InterviewSlotCreate(start_time=TEN_AM)).success

    denied = booth_service.create_interview_slot(rival, booth, InterviewSlotCreate(start_time=datetime(2026, 5, 1, 15, 0)))
    assert not denied.success
    assert denied.error == "Booth not found or access denied"

    with pytest.raises(NotFoundError):
        booth_service.list_interview_slots(rival, booth)


def test_delete_interview_slot(booth_service, admin, seed):
    booth = seed.booth()
    free = seed.slot(booth, start=TEN_AM)
    booked = seed.slot(booth, start=datetime(2026, 5, 1, 11, 0), is_booked=True)

    refused = booth_service.delete_interview_slot(admin, booked)
    assert not refused.success
    assert refused.error == "Cannot delete a booked interview slot"

    deleted = booth_service.delete_interview_slot(admin, free)
    assert deleted.success
    assert [s.slot_id for s in booth_service.list_interview_slots(admin, booth)] == [booked]

    missing = booth_service.delete_interview_slot(admin, free)
    assert missing.error == "Interview slot not found or access denied"


def test_slot_overlap_compares_instants_across_offsets(booth_service, admin, seed):
    booth = seed.booth()
    nine_utc = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)
    plus_two = timezone(timedelta(hours=2))
    plus_one = timezone(timedelta(hours=1))

    assert booth_service.create_interview_slot(admin, booth, InterviewSlotCreate(start_time=nine_utc)).success
    # 09:00+02:00 is 07:00 UTC, two hours before the first slot
    early = booth_service.create_interview_slot(
        admin, booth, InterviewSlotCreate(start_time=datetime(2026, 5, 1, 9, 0, tzinfo=plus_two))
    )
    assert early.success
    # 10:15+01:00 is 09:15 UTC, inside the first slot
    clash = booth_service.create_interview_slot(
        admin, booth, InterviewSlotCreate(start_time=datetime(2026, 5, 1, 10, 15, tzinfo=plus_one))
    )
    assert not clash.success
    assert clash.error == "Time slot conflicts with existing interview slot"

    starts = [s.start_time for s in booth_service.list_interview_slots(admin, booth)]
    assert starts == [datetime(2026, 5, 1, 7, 0), datetime(2026, 5, 1, 9, 0)]


# ============================================================
# Booth setup
# ============================================================

def _employer_with_email(seed, email, company_name="Acme Corp"):
    user_id = seed.user(name=f"{company_name} HR", role="employer", email=email)
    return user_id, seed.employer(company_name=company_name, user_id=user_id)


def test_admin_creates_booth_for_registered_employer(booth_service, seed):
    _, employer_id = _employer_with_email(seed, "hr@acme.example.com")
    event = seed.event()

    result = booth_service.create_booth(AdminBoothCreate(
        event_id=event, employer_email="hr@acme.example.com", booth_number="C3",
        location="Hall B", size="large", equipment=["Monitor", "Table"]
    ))

    assert result.success
    assert result.message == "Booth created successfully"
    row = seed.row("SELECT * FROM booths WHERE id = :id", {"id": result.booth_id})
    assert row["employer_id"] == employer_id
    assert row["size"] == "large"
    assert row["is_active"]

    duplicate = booth_service.create_booth(AdminBoothCreate(
        event_id=event, employer_email="hr@acme.example.com", booth_number="C3"
    ))
    assert not duplicate.success
    assert duplicate.error == "Booth number C3 already exists for this event"
    assert duplicate.error_code == "conflict"


def test_create_booth_reports_missing_employer_or_event(booth_service, seed):
    event = seed.event()
    seed.user(name="No Profile", role="employer", email="bare@example.com")

    unknown = booth_service.create_booth(AdminBoothCreate(
        event_id=event, employer_email="nobody@example.com", booth_number="A1"
    ))
    assert unknown.error.startswith("No user found with email: nobody@example.com")

    bare = booth_service.create_booth(AdminBoothCreate(
        event_id=event, employer_email="bare@example.com", booth_number="A1"
    ))
    assert bare.error.startswith("User with email bare@example.com exists but has no employer profile")

    _employer_with_email(seed, "hr@acme.example.com")
    no_event = booth_service.create_booth(AdminBoothCreate(
        event_id="event_missing", employer_email="hr@acme.example.com", booth_number="A1"
    ))
    assert no_event.error == "Event not found"
    assert no_event.error_code == "not_found"


def test_update_booth(booth_service, seed):
    event = seed.event()
    booth = seed.booth(booth_number="A1", event_id=event)
    seed.booth(booth_number="A2", event_id=event)
    _, globex = _employer_with_email(seed, "hr@globex.example.com", company_name="Globex")

    updated = booth_service.update_booth(booth, AdminBoothUpdate(
        employer_email="hr@globex.example.com", location="Hall C", size="small", is_active=False
    ))
    assert updated.success
    row = seed.row("SELECT * FROM booths WHERE id = :id", {"id": booth})
    assert row["employer_id"] == globex
    assert row["location"] == "Hall C"
    assert row["size"] == "small"
    assert not row["is_active"]

    taken = booth_service.update_booth(booth, AdminBoothUpdate(booth_number="A2"))
    assert taken.error == "Booth number A2 already exists for this event"

    empty = booth_service.update_booth(booth, AdminBoothUpdate())
    assert empty.error_code == "validation"

    missing = booth_service.update_booth("booth_missing", AdminBoothUpdate(location="Hall D"))
    assert missing.error == "Booth not found"


def test_delete_booth(booth_service, service, admin, seed):
    booth = seed.booth()
    slot = seed.slot(booth)
    js = seed.job_seeker()
    created = service.assign_job_seeker_to_booth(
        admin, BoothAssignmentCreate(job_seeker_id=js, booth_id=booth, interview_slot_id=slot)
    )

    refused = booth_service.delete_booth(booth)
    assert not refused.success
    assert refused.error == "Cannot delete a booth with active assignments"

    service.update_assignment_status(created.assignment_id, "cancelled")
    deleted = booth_service.delete_booth(booth)

    assert deleted.success
    assert seed.row("SELECT id FROM booths WHERE id = :id", {"id": booth}) is None
    assert seed.row("SELECT id FROM interview_slots WHERE id = :id", {"id": slot}) is None
    assert seed.count_assignments(booth_id=booth) == 0
    assert booth_service.delete_booth(booth).error == "Booth not found"


def test_employer_upserts_one_booth_per_event(booth_service, seed):
    user_id, employer_id = _employer_with_email(seed, "hr@acme.example.com")
    employer = {"user_id": user_id, "role": "employer"}
    event = seed.event()

    created = booth_service.upsert_employer_booth(employer, EmployerBoothUpsert(event_id=event, booth_number="E1"))
    assert created.success
    assert created.message == "Booth created successfully"

    updated = booth_service.upsert_employer_booth(
        employer, EmployerBoothUpsert(event_id=event, booth_number="E2", size="large")
    )
    assert updated.message == "Booth updated successfully"
    assert updated.booth_id == created.booth_id
    row = seed.row("SELECT booth_number, size, employer_id FROM booths WHERE id = :id", {"id": created.booth_id})
    assert (row["booth_number"], row["size"], row["employer_id"]) == ("E2", "large", employer_id)
    assert int(seed.row("SELECT COUNT(*) AS n FROM booths WHERE employer_id = :id", {"id": employer_id})["n"]) == 1


def test_employer_booth_upsert_rejections(booth_service, admin, seed):
    event = seed.event()
    seed.booth(booth_number="E1", event_id=event)
    user_id, _ = _employer_with_email(seed, "hr@acme.example.com")
    employer = {"user_id": user_id, "role": "employer"}
    no_profile = {"user_id": seed.user(role="employer"), "role": "employer"}

    as_admin = booth_service.upsert_employer_booth(admin, EmployerBoothUpsert(event_id=event, booth_number="X1"))
    assert as_admin.error_code == "authorization"

    missing_profile = booth_service.upsert_employer_booth(no_profile, EmployerBoothUpsert(event_id=event, booth_number="X1"))
    assert missing_profile.error.startswith("Employer profile not found")

    taken = booth_service.upsert_employer_booth(employer, EmployerBoothUpsert(event_id=event, booth_number="E1"))
    assert taken.error == "Booth number E1 already exists for this event"
