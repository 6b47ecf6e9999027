# jackemate/services/points_service.py
"""
Points Ledger - Business Logic Service

Gamification balances. Every delta is applied with one atomic UPDATE and
floored at zero. Deltas are committed on their own, after the action that
earned them, and never fail the caller: a failure is logged and reported in
the returned dict.
"""

import logging
from typing import Optional, Dict, Any, List

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from jackemate.crud import points as points_crud

logger = logging.getLogger(__name__)


# =====================================
# CONFIGURATION CONSTANTS
# =====================================

class PointsPolicy:
    """Fixed point deltas per action."""
    CREATE_REPORT = 10
    COMMENT_REPORT = 2
    VOTE_DOES_NOT_EXIST = 1
    VOTE_REPAIRED = 1
    REPORT_VALIDATED_REPAIRED = 5   # Not applied anywhere yet
    REPORT_REJECTED = -3
    DELETE_OWN_REPORT = -10


# =====================================
# DELTA APPLICATION
# =====================================

def apply_delta(
    db: Session,
    user_id: int,
    delta: int,
    reason: Optional[str] = None
) -> Dict[str, Any]:
    """
    Adjust a user's points, never letting the balance drop below zero.

    Args:
        db: Database session
        user_id: Profile ID
        delta: Positive to add points, negative to subtract
        reason: Short description stored in the ledger and logged

    Returns:
        ``{"success": True, "balance": ..., "delta": ..., "error": None}`` or
        ``{"success": False, "balance": None, "delta": ..., "error": "..."}``
    """
    try:
        balance = points_crud.increment_balance(db, user_id, delta)
        if balance is None:
            db.rollback()
            logger.warning("Points not applied: profile %s not found (%+d, %s)", user_id, delta, reason)
            return {"success": False, "balance": None, "delta": delta, "error": "Profile not found"}

        points_crud.create_entry(
            db,
            profile_id=user_id,
            delta=delta,
            balance_after=balance,
            reason=reason,
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Points update failed for user %s (%+d, %s): %s", user_id, delta, reason, e)
        return {"success": False, "balance": None, "delta": delta, "error": "Failed to update points"}

    if reason:
        logger.info("[POINTS] User %s: %+d points (total: %s) - %s", user_id, delta, balance, reason)

    return {"success": True, "balance": balance, "delta": delta, "error": None}


def add_points(db: Session, user_id: int, points: int, reason: Optional[str] = None) -> Dict[str, Any]:
    return apply_delta(db, user_id, abs(points), reason)


def subtract_points(db: Session, user_id: int, points: int, reason: Optional[str] = None) -> Dict[str, Any]:
    return apply_delta(db, user_id, -abs(points), reason)


# =====================================
# READS
# =====================================

def get_points(db: Session, user_id: int) -> int:
    """Current balance, 0 when the profile is missing."""
    return points_crud.get_balance(db, user_id) or 0


def get_leaderboard(db: Session, limit: int = 3) -> List[Dict[str, Any]]:
    return [
        {"id": p.id, "username": p.username, "points": p.points}
        for p in points_crud.get_top_profiles(db, limit)
    ]


def get_points_history(
    db: Session,
    user_id: int,
    limit: int = 50,
    offset: int = 0
) -> List[Dict[str, Any]]:
    entries = points_crud.get_entries(db, user_id, limit, offset)
    return [
        {
            "id": e.id,
            "delta": e.delta,
            "balance_after": e.balance_after,
            "reason": e.reason,
            "timestamp": e.timestamp.isoformat() if e.timestamp else None,
        }
        for e in entries
    ]
