"""
Seed the reference tables and, when enabled, create the first admin.

    python -m jackemate.scripts.bootstrap

Reference rows are created only when missing, so the command can be rerun.
Admin creation is opt-in through ENABLE_ADMIN_BOOTSTRAP and the ADMIN_*
variables.
"""

import os
import re
import sys
from typing import Optional

from sqlalchemy.orm import Session

from jackemate import models
from jackemate.crud import catalog as catalog_crud
from jackemate.crud import user as user_crud
from jackemate.database import SessionLocal
from jackemate.utils.security import get_password_hash


CONFIRM_PHRASE = "CREATE-FIRST-ADMIN"
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

REFERENCE_DATA = {
    models.Role: [role.value for role in models.RoleName],
    models.Status: [status.value for status in models.StatusName],
    models.Priority: ["Low", "Medium", "High"],
    models.Category: [
        "Pothole",
        "Traffic light",
        "Fallen tree",
        "Street lighting",
        "Waste",
        "Security",
        "Other",
    ],
}


def _is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def _required_env(key: str) -> str:
    value = os.getenv(key, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {key}")
    return value


def _validate_password(password: str) -> None:
    if len(password) < 8:
        raise ValueError("ADMIN_PASSWORD must be at least 8 characters.")
    if len(password.encode("utf-8")) > 72:
        raise ValueError("ADMIN_PASSWORD must be <= 72 bytes (bcrypt limit).")
    if not re.search(r"[A-Za-z]", password) or not re.search(r"\d", password):
        raise ValueError("ADMIN_PASSWORD must contain letters and digits.")


def seed_reference_data(db: Session) -> int:
    """Insert missing reference rows; returns how many were created."""
    created = 0
    for model, names in REFERENCE_DATA.items():
        for name in names:
            _, was_created = catalog_crud.get_or_create(db, model, name)
            created += int(was_created)
    return created


def create_admin(db: Session, *, username: str, email: str, password: str) -> models.UserProfile:
    email = email.strip().lower()
    if not EMAIL_RE.match(email):
        raise ValueError("ADMIN_EMAIL is not a valid email format.")
    _validate_password(password)

    admin_role = catalog_crud.get_role_by_name(db, models.RoleName.ADMIN.value)
    if admin_role is None:
        raise ValueError("Admin role is missing; seed the reference tables first.")

    existing_admins = db.query(models.UserProfile).filter(
        models.UserProfile.role_id == admin_role.id
    ).count()
    if existing_admins > 0:
        raise ValueError(
            "Admin bootstrap blocked: an admin already exists. "
            "This command is one-time for first admin creation."
        )
    if user_crud.get_user_by_email(db, email):
        raise ValueError("ADMIN_EMAIL is already registered.")
    if user_crud.get_profile_by_username(db, username):
        raise ValueError("ADMIN_USERNAME is already taken.")

    return user_crud.create_user_with_profile(
        db,
        email=email,
        password_hash=get_password_hash(password),
        username=username,
        role_id=admin_role.id,
    )


def bootstrap() -> int:
    db = SessionLocal()
    try:
        created = seed_reference_data(db)
        db.commit()
        print(f"Reference data ready ({created} rows created)")

        if not _is_truthy(os.getenv("ENABLE_ADMIN_BOOTSTRAP")):
            return 0

        confirm = _required_env("ADMIN_BOOTSTRAP_CONFIRM")
        if confirm != CONFIRM_PHRASE:
            raise ValueError(
                f"Invalid ADMIN_BOOTSTRAP_CONFIRM. Expected exact phrase: {CONFIRM_PHRASE}"
            )

        profile = create_admin(
            db,
            username=_required_env("ADMIN_USERNAME"),
            email=_required_env("ADMIN_EMAIL"),
            password=_required_env("ADMIN_PASSWORD"),
        )
        db.commit()
        print(f"Admin created successfully: {profile.username}")
        return 0
    except Exception as exc:
        db.rollback()
        print(f"Bootstrap failed: {exc}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(bootstrap())
