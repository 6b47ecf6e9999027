import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from jackemate.crud import catalog as catalog_crud
from jackemate.crud import user as user_crud
from jackemate.database import get_db
from jackemate.models.catalog import RoleName
from jackemate.models.user import User
from jackemate.schemas.auth import RegisterRequest, LoginRequest, Token
from jackemate.schemas.user import ProfileResponse
from jackemate.utils.security import (
    authenticate_user,
    create_access_token,
    get_current_user,
    get_password_hash,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Admin accounts are only created by the bootstrap script
SELF_SERVICE_ROLES = {
    RoleName.CITIZEN.value.lower(): RoleName.CITIZEN,
    RoleName.INTERESTED.value.lower(): RoleName.INTERESTED,
}


# ===== REGISTER ENDPOINT =====

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Register new user and create the associated profile"""
    requested_role = (user_data.role or RoleName.CITIZEN.value).strip().lower()
    role_name = SELF_SERVICE_ROLES.get(requested_role)
    if role_name is None:
        raise HTTPException(
            status_code=400,
            detail="Role must be one of: Citizen, Interested"
        )

    role = catalog_crud.get_role_by_name(db, role_name.value)
    if role is None:
        logger.error("Role '%s' is missing from the roles table", role_name.value)
        raise HTTPException(status_code=500, detail="Internal server error")

    normalized_email = user_data.email.strip().lower()
    if user_crud.get_user_by_email(db, normalized_email):
        raise HTTPException(status_code=400, detail="Email already registered")
    if user_crud.get_profile_by_username(db, user_data.username):
        raise HTTPException(status_code=400, detail="Username already taken")

    try:
        profile = user_crud.create_user_with_profile(
            db,
            email=normalized_email,
            password_hash=get_password_hash(user_data.password),
            username=user_data.username,
            role_id=role.id,
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email or username already registered")

    logger.info("Registered user %s with role %s", profile.id, role.name)
    return {"message": "Registration successful", "user_id": profile.id}


# ===== LOGIN ENDPOINT =====

@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Verify credentials and return access token"""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    role = user.profile.role_name if user.profile else None
    access_token = create_access_token(data={"sub": str(user.id), "role": role})

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "role": role or ""
    }


@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy."""
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=ProfileResponse)
def read_current_user(current_user: User = Depends(get_current_user)):
    if current_user.profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileResponse.from_profile(current_user.profile, current_user.email)
