"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Service results follow one convention: {success, message | error}.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    job_seeker = "job_seeker"
    employer = "employer"
    admin = "admin"
    security = "security"


class RegistrationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class JobSeekerAssignmentStatus(str, Enum):
    unassigned = "unassigned"
    assigned = "assigned"
    confirmed = "confirmed"
    completed = "completed"


class BoothAssignmentStatus(str, Enum):
    assigned = "assigned"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"
    no_show = "no_show"


class PriorityLevel(str, Enum):
    low = "low"
    normal = "normal"
    high = "high"


class AssignmentPriority(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class BoothSize(str, Enum):
    small = "small"
    medium = "medium"
    large = "large"


class CompanySize(str, Enum):
    startup = "startup"
    small = "small"
    medium = "medium"
    large = "large"
    enterprise = "enterprise"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole = UserRole.job_seeker
    # employers only: creates the company profile together with the account
    company_name: Optional[str] = Field(None, min_length=2, max_length=200)

    @field_validator("role")
    @classmethod
    def self_service_roles_only(cls, role: UserRole) -> UserRole:
        if role not in (UserRole.job_seeker, UserRole.employer):
            raise ValueError("Only job_seeker and employer accounts can self-register")
        return role

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str

class UserResponse(BaseModel):
    user_id: str
    name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime


# ============================================================
# RESULT SCHEMAS
# ============================================================

class ActionResult(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

class AssignmentResult(ActionResult):
    assignment_id: Optional[str] = None

class SlotResult(ActionResult):
    slot_id: Optional[str] = None


# ============================================================
# BOOTH ASSIGNMENT SCHEMAS
# ============================================================

class BoothAssignmentCreate(BaseModel):
    job_seeker_id: str = Field(..., min_length=1)
    booth_id: str = Field(..., min_length=1)
    interview_slot_id: Optional[str] = None
    interview_date: Optional[datetime] = None
    interview_time: Optional[str] = None
    notes: Optional[str] = None
    priority: AssignmentPriority = AssignmentPriority.medium

class BulkAssignmentRequest(BaseModel):
    assignments: List[BoothAssignmentCreate]
    send_notifications: bool = False

class AssignmentStatusUpdate(BaseModel):
    status: BoothAssignmentStatus
    notes: Optional[str] = None

class BulkAssignmentItemResult(BaseModel):
    job_seeker_id: str
    booth_id: str
    success: bool
    error: Optional[str] = None
    assignment_id: Optional[str] = None

class BulkAssignmentSummary(BaseModel):
    total: int
    successful: int
    failed: int

class BulkAssignmentResult(ActionResult):
    results: List[BulkAssignmentItemResult] = []
    summary: BulkAssignmentSummary


# ============================================================
# QUERY SCHEMAS
# ============================================================

class UnassignedJobSeekerFilters(BaseModel):
    assignment_status: JobSeekerAssignmentStatus = JobSeekerAssignmentStatus.unassigned
    skills: List[str] = []
    experience: Optional[str] = None
    education: Optional[str] = None
    priority_level: Optional[PriorityLevel] = None
    search_term: Optional[str] = None

class JobSeekerSummary(BaseModel):
    job_seeker_id: str
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    skills: List[str] = []
    experience: Optional[str] = None
    education: Optional[str] = None
    registration_status: str
    assignment_status: str
    priority_level: str
    assignment_count: int = 0
    created_at: datetime

class JobSeekerListResult(ActionResult):
    data: List[JobSeekerSummary] = []
    total: int = 0

class AvailableBooth(BaseModel):
    booth_id: str
    booth_number: str
    location: Optional[str] = None
    size: Optional[str] = None
    company_name: Optional[str] = None
    event_name: Optional[str] = None
    capacity: int
    assignment_count: int
    remaining_capacity: int
    utilization: float
    slot_count: int
    available_slot_count: int

class BoothListResult(ActionResult):
    data: List[AvailableBooth] = []

class BoothAssignmentFilters(BaseModel):
    status: Optional[BoothAssignmentStatus] = None
    booth_id: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    search_term: Optional[str] = None

class BoothAssignmentDetail(BaseModel):
    assignment_id: str
    job_seeker_id: str
    job_seeker_name: Optional[str] = None
    job_seeker_email: Optional[str] = None
    booth_id: str
    booth_number: Optional[str] = None
    company_name: Optional[str] = None
    event_name: Optional[str] = None
    interview_slot_id: Optional[str] = None
    status: str
    priority: str
    notes: Optional[str] = None
    interview_date: Optional[datetime] = None
    interview_time: Optional[str] = None
    assigned_by: str
    assigned_at: datetime

class AssignmentListResult(ActionResult):
    data: List[BoothAssignmentDetail] = []
    total: int = 0

class StatusCount(BaseModel):
    status: str
    count: int

class BoothUtilization(BaseModel):
    booth_id: str
    booth_number: str
    company_name: Optional[str] = None
    capacity: int
    assignment_count: int
    utilization: float
    slot_count: int

class AssignmentStatistics(BaseModel):
    job_seeker_stats: List[StatusCount] = []
    assignment_stats: List[StatusCount] = []
    booth_utilization: List[BoothUtilization] = []
    recent_assignments: List[BoothAssignmentDetail] = []

class AssignmentStatisticsResult(ActionResult):
    data: Optional[AssignmentStatistics] = None


# ============================================================
# BOOTH & INTERVIEW SLOT SCHEMAS
# ============================================================

class AdminBoothCreate(BaseModel):
    event_id: str = Field(..., min_length=1)
    employer_email: EmailStr
    booth_number: str = Field(..., min_length=1, max_length=20)
    location: Optional[str] = None
    size: BoothSize = BoothSize.medium
    equipment: List[str] = []
    special_requirements: Optional[str] = None

class AdminBoothUpdate(BaseModel):
    event_id: Optional[str] = None
    employer_email: Optional[EmailStr] = None
    booth_number: Optional[str] = Field(None, min_length=1, max_length=20)
    location: Optional[str] = None
    size: Optional[BoothSize] = None
    equipment: Optional[List[str]] = None
    special_requirements: Optional[str] = None
    is_active: Optional[bool] = None

class EmployerBoothUpsert(BaseModel):
    event_id: str = Field(..., min_length=1)
    booth_number: str = Field(..., min_length=1, max_length=20)
    location: Optional[str] = None
    size: BoothSize = BoothSize.medium
    equipment: List[str] = []
    special_requirements: Optional[str] = None

class BoothResult(ActionResult):
    booth_id: Optional[str] = None

class InterviewSlotCreate(BaseModel):
    start_time: datetime
    duration: int = Field(30, ge=5, le=480)
    interviewer_name: Optional[str] = None
    notes: Optional[str] = None

class InterviewSlotResponse(BaseModel):
    slot_id: str
    booth_id: str
    start_time: datetime
    end_time: datetime
    duration: int
    is_booked: bool
    interviewer_name: Optional[str] = None
    notes: Optional[str] = None


# ============================================================
# JOB SEEKER REVIEW SCHEMAS
# ============================================================

class PriorityUpdate(BaseModel):
    priority_level: PriorityLevel

class BulkApproveResult(ActionResult):
    approved_count: int = 0


# ============================================================
# EVENT SCHEMAS
# ============================================================

class EventCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    venue: str = Field(..., min_length=2, max_length=200)
    start_date: datetime
    end_date: datetime

    @model_validator(mode="after")
    def ends_after_start(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self

class EventResponse(BaseModel):
    event_id: str
    name: str
    venue: str
    start_date: datetime
    end_date: datetime
    is_active: bool
    booth_count: int = 0


# ============================================================
# EMPLOYER SCHEMAS
# ============================================================

class EmployerProfileCreate(BaseModel):
    company_name: str = Field(..., min_length=2, max_length=200)
    company_description: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[CompanySize] = None
    website: Optional[str] = None
    contact_email: Optional[EmailStr] = None

class EmployerProfileResult(ActionResult):
    employer_id: Optional[str] = None

class EmployerProfileResponse(BaseModel):
    employer_id: str
    user_id: str
    company_name: str
    company_description: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    website: Optional[str] = None
    contact_email: Optional[str] = None
    is_verified: bool
    created_at: datetime


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
