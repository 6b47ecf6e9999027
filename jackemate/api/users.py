from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jackemate.database import get_db
from jackemate.models.user import User
from jackemate.schemas.user import LeaderboardEntry, PointsHistoryResponse, ProfileResponse
from jackemate.services import points_service
from jackemate.services.permissions import load_actor
from jackemate.utils.security import get_current_user

router = APIRouter(prefix="/users", tags=["Users"])


# ======================
# GET: Current profile
# ======================
@router.get("/me", response_model=ProfileResponse)
def get_my_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    profile = load_actor(db, current_user.id)
    return ProfileResponse.from_profile(profile, current_user.email)


# ======================
# GET: Points balance and ledger
# ======================
@router.get("/me/puntos", response_model=PointsHistoryResponse)
def get_my_points(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return {
        "balance": points_service.get_points(db, current_user.id),
        "entries": points_service.get_points_history(db, current_user.id, limit, offset),
    }


# ======================
# GET: Leaderboard
# ======================
@router.get("/ranking", response_model=List[LeaderboardEntry])
def get_ranking(
    limit: int = Query(3, ge=1, le=50),
    db: Session = Depends(get_db)
):
    return points_service.get_leaderboard(db, limit)
