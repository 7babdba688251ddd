"""
Employer Service - company profiles.

An employer account owns at most one profile; booths are attached to the
profile, not the user. The profile is created at registration or later
through the setup endpoint.
"""

import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

from jobfair.core.errors import JobFairError, AuthorizationError, NotFoundError
from jobfair.db.postgres import get_db_session, fetch_one
from jobfair.utils.helpers import generate_id
from jobfair.schemas.schemas import EmployerProfileCreate, EmployerProfileResult, EmployerProfileResponse

logger = logging.getLogger(__name__)

PROFILE_SQL = """
    SELECT id AS employer_id, user_id, company_name, company_description, industry,
           company_size, website, contact_email, is_verified, created_at
    FROM employers WHERE user_id = :user_id
"""


def insert_employer_profile(db: Session, user_id: str, data: EmployerProfileCreate) -> str:
    """Insert a profile inside the caller's transaction and return its id."""
    employer_id = generate_id("employer")
    db.execute(
        text("""
            INSERT INTO employers (id, user_id, company_name, company_description, industry,
                company_size, website, contact_email)
            VALUES (:id, :user_id, :company_name, :company_description, :industry,
                :company_size, :website, :contact_email)
        """),
        {
            "id": employer_id,
            "user_id": user_id,
            "company_name": data.company_name.strip(),
            "company_description": data.company_description,
            "industry": data.industry,
            "company_size": data.company_size.value if data.company_size else None,
            "website": data.website,
            "contact_email": data.contact_email
        }
    )
    return employer_id


class EmployerService:

    def create_profile(self, user: dict, data: EmployerProfileCreate) -> EmployerProfileResult:
        """Create the caller's company profile. An existing profile is returned unchanged."""
        try:
            with get_db_session() as db:
                if user["role"] != "employer":
                    raise AuthorizationError("Only employer accounts can create company profiles")
                existing = fetch_one(db, PROFILE_SQL, {"user_id": user["user_id"]})
                if existing:
                    return EmployerProfileResult(
                        success=True,
                        message=f"Welcome back, {existing['company_name']}!",
                        employer_id=existing["employer_id"]
                    )
                employer_id = insert_employer_profile(db, user["user_id"], data)
        except JobFairError as e:
            return EmployerProfileResult(success=False, error=e.message, error_code=e.error_code)
        except Exception:
            logger.exception(f"Error creating employer profile for {user['user_id']}")
            return EmployerProfileResult(success=False, error="Failed to create employer profile", error_code="failure")

        logger.info(f"[Employer] Profile {employer_id} created for {user['user_id']}")
        return EmployerProfileResult(
            success=True,
            message=f"Welcome to the platform, {data.company_name.strip()}!",
            employer_id=employer_id
        )

    def get_profile(self, user_id: str) -> EmployerProfileResponse:
        """Raises NotFoundError when the user has no profile yet."""
        with get_db_session() as db:
            row = fetch_one(db, PROFILE_SQL, {"user_id": user_id})
        if not row:
            raise NotFoundError("Employer profile not found")
        return EmployerProfileResponse(**row)


# Singleton instance
_employer_service: EmployerService = None


def get_employer_service() -> EmployerService:
    """Get or create the employer service (singleton pattern)"""
    global _employer_service
    if _employer_service is None:
        _employer_service = EmployerService()
    return _employer_service
