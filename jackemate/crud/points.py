# jackemate/crud/points.py
"""
Points Ledger - CRUD Operations

Database operations for profile point balances and the ledger log.
"""

from sqlalchemy.orm import Session
from sqlalchemy import case
from typing import Optional, List

from jackemate import models


# =====================================
# BALANCE OPERATIONS
# =====================================

def get_balance(db: Session, profile_id: int) -> Optional[int]:
    """
    Read a profile's current balance.

    Returns:
        Balance, or None when the profile does not exist
    """
    return db.query(models.UserProfile.points).filter(
        models.UserProfile.id == profile_id
    ).scalar()


def increment_balance(db: Session, profile_id: int, delta: int) -> Optional[int]:
    """
    Add ``delta`` to a balance in a single UPDATE, flooring the result at zero.

    The arithmetic runs inside the database so concurrent deltas on the same
    profile cannot overwrite each other.

    Args:
        db: Database session
        profile_id: Profile ID
        delta: Positive to credit, negative to debit

    Returns:
        The new balance, or None when no profile matched
    """
    target = models.UserProfile.points + delta
    updated = db.query(models.UserProfile).filter(
        models.UserProfile.id == profile_id
    ).update(
        {models.UserProfile.points: case((target < 0, 0), else_=target)},
        synchronize_session=False,
    )
    if not updated:
        return None
    return get_balance(db, profile_id)


# =====================================
# LEDGER LOG
# =====================================

def create_entry(
    db: Session,
    profile_id: int,
    delta: int,
    balance_after: int,
    reason: Optional[str] = None
) -> models.PointsEntry:
    entry = models.PointsEntry(
        profile_id=profile_id,
        delta=delta,
        balance_after=balance_after,
        reason=reason,
    )
    db.add(entry)
    db.flush()
    return entry


def get_entries(
    db: Session,
    profile_id: int,
    limit: int = 50,
    offset: int = 0
) -> List[models.PointsEntry]:
    return db.query(models.PointsEntry).filter(
        models.PointsEntry.profile_id == profile_id
    ).order_by(
        models.PointsEntry.timestamp.desc(),
        models.PointsEntry.id.desc()
    ).limit(limit).offset(offset).all()


# =====================================
# RANKING
# =====================================

def get_top_profiles(db: Session, limit: int = 3) -> List[models.UserProfile]:
    return db.query(models.UserProfile).order_by(
        models.UserProfile.points.desc(),
        models.UserProfile.id.asc()
    ).limit(limit).all()
