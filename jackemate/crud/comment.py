from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from jackemate.models.comment import Comment


def create_comment(db: Session, *, report_id: int, author_id: int, content: str) -> Comment:
    comment = Comment(report_id=report_id, author_id=author_id, content=content)
    db.add(comment)
    db.flush()
    return comment


def get_comment(db: Session, comment_id: int) -> Optional[Comment]:
    """Fetch a comment by id, including soft-deleted ones."""
    return db.query(Comment).options(joinedload(Comment.author)).filter(
        Comment.id == comment_id
    ).first()


def list_visible_comments(db: Session, report_id: int) -> List[Comment]:
    return db.query(Comment).options(joinedload(Comment.author)).filter(
        Comment.report_id == report_id,
        Comment.deleted_at.is_(None),
    ).order_by(Comment.created_at.asc(), Comment.id.asc()).all()


def soft_delete_comment(db: Session, comment_id: int, author_id: Optional[int] = None) -> bool:
    query = db.query(Comment).filter(Comment.id == comment_id, Comment.deleted_at.is_(None))
    if author_id is not None:
        query = query.filter(Comment.author_id == author_id)
    updated = query.update({Comment.deleted_at: datetime.now(UTC)}, synchronize_session=False)
    return bool(updated)
