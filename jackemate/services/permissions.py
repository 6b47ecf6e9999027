# jackemate/services/permissions.py
"""
Role gate.

``can`` is a pure predicate over a role name. ``require`` reloads the
profile from the database on every call, so a role change takes effect on
the very next request.
"""

import enum
import logging
from typing import Optional

from sqlalchemy.orm import Session

from jackemate.crud import user as user_crud
from jackemate.models.catalog import RoleName
from jackemate.models.user import UserProfile
from jackemate.services.errors import PermissionDeniedError

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    CREATE_REPORT = "create_report"
    COMMENT = "comment"
    VOTE = "vote"
    CHANGE_STATUS = "change_status"
    MODERATE = "moderate"
    VIEW_DASHBOARD = "view_dashboard"


ROLE_PERMISSIONS = {
    RoleName.ADMIN.value: frozenset(Action),
    RoleName.CITIZEN.value: frozenset({Action.CREATE_REPORT, Action.COMMENT, Action.VOTE}),
    RoleName.INTERESTED.value: frozenset({Action.VIEW_DASHBOARD}),
}

DENIED_MESSAGES = {
    Action.CREATE_REPORT: "Your role is not allowed to create reports",
    Action.COMMENT: "Your role is not allowed to comment",
    Action.VOTE: "Your role is not allowed to vote",
    Action.CHANGE_STATUS: "Administrator permissions are required",
    Action.MODERATE: "Administrator permissions are required",
    Action.VIEW_DASHBOARD: "Your role is not allowed to view the dashboard",
}


def can(role_name: Optional[str], action: Action) -> bool:
    if not role_name:
        return False
    return action in ROLE_PERMISSIONS.get(role_name, frozenset())


def is_admin(profile: Optional[UserProfile]) -> bool:
    return profile is not None and profile.role_name == RoleName.ADMIN.value


def load_actor(db: Session, profile_id: int) -> UserProfile:
    """Fresh profile for ``profile_id`` or PermissionDeniedError."""
    profile = user_crud.get_profile(db, profile_id)
    if profile is None:
        raise PermissionDeniedError("User profile not found")
    return profile


def require(db: Session, profile_id: int, action: Action) -> UserProfile:
    profile = load_actor(db, profile_id)
    if not can(profile.role_name, action):
        logger.info(
            "Permission denied (profile_id=%s, role=%s, action=%s)",
            profile_id,
            profile.role_name,
            action.value,
        )
        raise PermissionDeniedError(DENIED_MESSAGES[action])
    return profile
