# jackemate/api/votes.py
"""
Votes API Router

Endpoints:
- GET /reportes/{report_id}/votos - Tallies and the caller's own votes
- POST /reportes/{report_id}/votos/no-existe - "Does not exist" vote
- POST /reportes/{report_id}/votos/reparado - "Repaired" vote
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jackemate.database import get_db
from jackemate.crud import report as report_crud
from jackemate.models.user import User
from jackemate.schemas.vote import VoteResult, VoteSummary
from jackemate.services import vote_service
from jackemate.services.errors import NotFoundError
from jackemate.utils.security import get_current_user, get_current_user_optional

router = APIRouter(prefix="/reportes/{report_id}/votos", tags=["Votes"])


@router.get("", response_model=VoteSummary)
def get_votes(
    report_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: Session = Depends(get_db)
):
    if report_crud.get_visible_report(db, report_id) is None:
        raise NotFoundError("Report not found")
    viewer_id = current_user.id if current_user else None
    return vote_service.get_vote_summary(db, report_id, viewer_id)


@router.post("/no-existe", response_model=VoteResult, status_code=status.HTTP_201_CREATED)
def vote_does_not_exist(
    report_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return vote_service.cast_does_not_exist_vote(db, report_id, current_user.id)


@router.post("/reparado", response_model=VoteResult, status_code=status.HTTP_201_CREATED)
def vote_repaired(
    report_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return vote_service.cast_repaired_vote(db, report_id, current_user.id)
