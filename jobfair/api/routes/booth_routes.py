"""
Booth Routes

POST /booths - Create or update own booth for an event (employer)
PUT /booths/{booth_id}/toggle - Activate/deactivate booth (admin only)
GET /booths/{booth_id}/slots - List interview slots (admin or owning employer)
POST /booths/{booth_id}/slots - Create interview slot (admin or owning employer)
DELETE /booths/slots/{slot_id} - Delete unbooked slot (admin or owning employer)

POST /admin/booths - Create booth for a registered employer (admin only)
PUT /admin/booths/{booth_id} - Update booth (admin only)
DELETE /admin/booths/{booth_id} - Delete booth without active assignments (admin only)
"""

from fastapi import APIRouter, Depends
from typing import List

from jobfair.core.auth import get_current_admin, get_current_booth_manager
from jobfair.services.booth_service import get_booth_service
from jobfair.schemas.schemas import (
    ActionResult, SlotResult, BoothResult, InterviewSlotCreate, InterviewSlotResponse,
    AdminBoothCreate, AdminBoothUpdate, EmployerBoothUpsert
)

router = APIRouter(prefix="/booths", tags=["Booths"])
admin_router = APIRouter(prefix="/admin/booths", tags=["Booths"])


@router.post("", response_model=BoothResult)
async def save_own_booth(data: EmployerBoothUpsert, user: dict = Depends(get_current_booth_manager)):
    """Employers keep one booth per event: the first call creates it, later calls update it."""
    return get_booth_service().upsert_employer_booth(user, data)


@router.put("/{booth_id}/toggle", response_model=ActionResult)
async def toggle_booth(booth_id: str, admin: dict = Depends(get_current_admin)):
    """Flip a booth between active and inactive. Inactive booths take no new assignments."""
    return get_booth_service().toggle_booth_status(booth_id)


@router.get("/{booth_id}/slots", response_model=List[InterviewSlotResponse])
async def list_slots(booth_id: str, user: dict = Depends(get_current_booth_manager)):
    """List a booth's interview slots by start time."""
    return get_booth_service().list_interview_slots(user, booth_id)


@router.post("/{booth_id}/slots", response_model=SlotResult)
async def create_slot(booth_id: str, data: InterviewSlotCreate, user: dict = Depends(get_current_booth_manager)):
    """Create an interview slot; overlapping slots on the same booth are rejected."""
    return get_booth_service().create_interview_slot(user, booth_id, data)


@router.delete("/slots/{slot_id}", response_model=ActionResult)
async def delete_slot(slot_id: str, user: dict = Depends(get_current_booth_manager)):
    """Delete an interview slot. Booked slots must be released first."""
    return get_booth_service().delete_interview_slot(user, slot_id)


@admin_router.post("", response_model=BoothResult)
async def create_booth(data: AdminBoothCreate, admin: dict = Depends(get_current_admin)):
    """Create a booth and hand it to the employer registered under employer_email."""
    return get_booth_service().create_booth(data)


@admin_router.put("/{booth_id}", response_model=BoothResult)
async def update_booth(booth_id: str, data: AdminBoothUpdate, admin: dict = Depends(get_current_admin)):
    """Update any subset of a booth's fields."""
    return get_booth_service().update_booth(booth_id, data)


@admin_router.delete("/{booth_id}", response_model=ActionResult)
async def delete_booth(booth_id: str, admin: dict = Depends(get_current_admin)):
    """Delete a booth with its slots. Refused while assignments are active."""
    return get_booth_service().delete_booth(booth_id)
