from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from jackemate import models


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_profile(db: Session, profile_id: int) -> Optional[models.UserProfile]:
    # populate_existing so a role changed mid-session is never read stale
    return db.query(models.UserProfile).options(
        joinedload(models.UserProfile.role)
    ).populate_existing().filter(models.UserProfile.id == profile_id).first()


def get_profile_by_username(db: Session, username: str) -> Optional[models.UserProfile]:
    return db.query(models.UserProfile).filter(
        func.lower(models.UserProfile.username) == username.strip().lower()
    ).first()


def create_user_with_profile(
    db: Session,
    *,
    email: str,
    password_hash: str,
    username: str,
    role_id: int,
) -> models.UserProfile:
    """Insert the auth identity and its profile; the caller commits."""
    user = models.User(
        email=email.strip().lower(),
        password_hash=password_hash,
        is_active=True,
    )
    db.add(user)
    db.flush()

    profile = models.UserProfile(
        id=user.id,
        username=username.strip(),
        role_id=role_id,
        points=0,
    )
    db.add(profile)
    db.flush()
    return profile


def get_owner_email(db: Session, profile_id: Optional[int]) -> Optional[str]:
    if profile_id is None:
        return None
    return db.query(models.User.email).filter(models.User.id == profile_id).scalar()
