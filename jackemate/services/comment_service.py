# jackemate/services/comment_service.py
"""
Comment Service Layer

Comments on visible reports, their soft deletion, and the owner email.
"""

import logging
from typing import Dict, Any, List

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from jackemate.crud import comment as comment_crud
from jackemate.crud import report as report_crud
from jackemate.schemas.comment import CommentResponse
from jackemate.services import notification_service, points_service
from jackemate.services.errors import NotFoundError, PermissionDeniedError, ValidationError
from jackemate.services.permissions import Action, is_admin, load_actor, require
from jackemate.services.points_service import PointsPolicy

logger = logging.getLogger(__name__)

COMMENT_MAX_LENGTH = 1000


# ======================
# CREATION
# ======================

def create_comment(db: Session, report_id: int, author_id: int, content: str) -> Dict[str, Any]:
    """
    Add a comment to a visible report.

    Awards COMMENT_REPORT points and emails the report owner when the
    commenter is someone else. Neither step can fail the request.

    Raises:
        PermissionDeniedError: role cannot comment
        NotFoundError: report missing or deleted
        ValidationError: empty or oversized content
    """
    commenter = require(db, author_id, Action.COMMENT)

    content = (content or "").strip()
    if not content:
        raise ValidationError("Comment cannot be empty")
    if len(content) > COMMENT_MAX_LENGTH:
        raise ValidationError(f"Comment must be {COMMENT_MAX_LENGTH} characters or less")

    report = report_crud.get_visible_report(db, report_id)
    if not report:
        raise NotFoundError("Report not found")

    try:
        comment = comment_crud.create_comment(
            db, report_id=report_id, author_id=author_id, content=content
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create comment on report %s", report_id)
        raise

    comment_id = comment.id
    logger.info("Comment %s added to report %s by user %s", comment_id, report_id, author_id)

    points_service.add_points(db, author_id, PointsPolicy.COMMENT_REPORT, "Comment on report")

    report = report_crud.get_report(db, report_id)
    if report.author_id is not None and report.author_id != author_id:
        notification_service.notify_new_comment(
            db,
            report=report,
            commenter_username=commenter.username,
            content=content,
        )

    return {
        "message": "Comment added successfully",
        "comment": CommentResponse.from_comment(comment_crud.get_comment(db, comment_id)),
        "points_awarded": PointsPolicy.COMMENT_REPORT,
    }


# ======================
# SOFT DELETION
# ======================

def delete_comment(db: Session, comment_id: int, actor_id: int) -> Dict[str, Any]:
    """Soft-delete a comment as its author or as an admin. No points change."""
    actor = load_actor(db, actor_id)
    comment = comment_crud.get_comment(db, comment_id)
    if not comment or comment.deleted_at is not None:
        raise NotFoundError("Comment not found")

    own_comment = comment.author_id == actor_id
    if not own_comment and not is_admin(actor):
        raise PermissionDeniedError("Only the author or an administrator can delete this comment")

    return _soft_delete(db, comment_id, actor_id, author_id=actor_id if own_comment else None)


def delete_comment_as_admin(db: Session, comment_id: int, admin_id: int) -> Dict[str, Any]:
    require(db, admin_id, Action.MODERATE)
    return _soft_delete(db, comment_id, admin_id)


def _soft_delete(db: Session, comment_id: int, actor_id: int, author_id=None) -> Dict[str, Any]:
    try:
        deleted = comment_crud.soft_delete_comment(db, comment_id, author_id=author_id)
        if not deleted:
            db.rollback()
            raise NotFoundError("Comment not found")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete comment %s", comment_id)
        raise

    logger.info("Comment %s deleted by user %s", comment_id, actor_id)
    return {"message": "Comment deleted successfully", "comment_id": comment_id}


# ======================
# READS
# ======================

def list_comments(db: Session, report_id: int) -> List[CommentResponse]:
    if not report_crud.get_visible_report(db, report_id):
        raise NotFoundError("Report not found")
    return [
        CommentResponse.from_comment(c)
        for c in comment_crud.list_visible_comments(db, report_id)
    ]
