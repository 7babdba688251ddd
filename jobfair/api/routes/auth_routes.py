"""
Authentication Routes

POST /auth/register - Register new user (job seekers and employers)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from jobfair.db.postgres import get_db_session
from jobfair.core.auth import hash_password, verify_password, create_access_token, get_current_user
from jobfair.utils.helpers import generate_id
from jobfair.services.employer_service import insert_employer_profile
from jobfair.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse, UserRole,
    EmployerProfileCreate
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    Job seekers get a profile in 'pending' registration status; an admin
    must approve it before the job seeker can be assigned to a booth.
    Employers get a company profile named after `company_name` (or their
    own name); details can be filled in later.
    """
    user_id = generate_id("user")
    with get_db_session() as db:
        # Check email exists
        result = db.execute(
            text("SELECT id FROM users WHERE email = :email"),
            {"email": request.email}
        )
        if result.fetchone():
            raise HTTPException(status_code=400, detail="Email already registered")

        # Create user
        db.execute(
            text("""
                INSERT INTO users (id, name, email, password_hash, role)
                VALUES (:id, :name, :email, :password_hash, :role)
            """),
            {
                "id": user_id,
                "name": request.name,
                "email": request.email,
                "password_hash": hash_password(request.password),
                "role": request.role.value
            }
        )

        if request.role == UserRole.job_seeker:
            db.execute(
                text("INSERT INTO job_seekers (id, user_id) VALUES (:id, :user_id)"),
                {"id": generate_id("jobseeker"), "user_id": user_id}
            )
        elif request.role == UserRole.employer:
            insert_employer_profile(
                db, user_id, EmployerProfileCreate(company_name=request.company_name or request.name)
            )

    return MessageResponse(message=f"Registered successfully as {request.role.value}. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        result = db.execute(
            text("SELECT id, password_hash, role, is_active FROM users WHERE email = :email"),
            {"email": request.email}
        )
        user = result.fetchone()

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user_id, password_hash, role, is_active = user

    if not is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    if not verify_password(request.password, password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(data={"sub": user_id, "role": role})

    return TokenResponse(access_token=token, user_id=user_id, role=role)


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    with get_db_session() as db:
        result = db.execute(
            text("SELECT id, name, email, role, is_active, created_at FROM users WHERE id = :id"),
            {"id": user["user_id"]}
        )
        row = result.fetchone()

    return UserResponse(
        user_id=row[0], name=row[1], email=row[2], role=row[3], is_active=row[4], created_at=row[5]
    )
