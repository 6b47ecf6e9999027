# jackemate/api/comments.py
"""
Comments API Router

Endpoints:
- GET /reportes/{report_id}/comentarios - Visible comments, oldest first
- POST /reportes/{report_id}/comentarios - Add a comment
- DELETE /comentarios/{comment_id} - Soft-delete (author or admin)
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jackemate.database import get_db
from jackemate.models.user import User
from jackemate.schemas.comment import CommentCreate, CommentCreated, CommentResponse
from jackemate.services import comment_service
from jackemate.utils.security import get_current_user

router = APIRouter(tags=["Comments"])


@router.get("/reportes/{report_id}/comentarios", response_model=List[CommentResponse])
def list_comments(report_id: int, db: Session = Depends(get_db)):
    return comment_service.list_comments(db, report_id)


@router.post(
    "/reportes/{report_id}/comentarios",
    response_model=CommentCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    report_id: int,
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return comment_service.create_comment(db, report_id, current_user.id, payload.content)


@router.delete("/comentarios/{comment_id}")
def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return comment_service.delete_comment(db, comment_id, current_user.id)
