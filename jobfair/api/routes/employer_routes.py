"""
Employer Routes

POST /employers/profile - Create company profile (employer accounts)
GET /employers/profile - Get own company profile
"""

from fastapi import APIRouter, Depends

from jobfair.core.auth import get_current_user
from jobfair.services.employer_service import get_employer_service
from jobfair.schemas.schemas import EmployerProfileCreate, EmployerProfileResult, EmployerProfileResponse

router = APIRouter(prefix="/employers", tags=["Employers"])


@router.post("/profile", response_model=EmployerProfileResult)
async def create_profile(data: EmployerProfileCreate, user: dict = Depends(get_current_user)):
    """Complete company registration. Calling it again returns the existing profile."""
    return get_employer_service().create_profile(user, data)


@router.get("/profile", response_model=EmployerProfileResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    """Get the current employer's company profile."""
    return get_employer_service().get_profile(user["user_id"])
