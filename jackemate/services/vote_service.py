# jackemate/services/vote_service.py
"""
Community Votes

"Does not exist" votes reject a report automatically once the tally reaches
REJECTION_THRESHOLD. "Repaired" votes are only counted; moving a report to
Repaired stays an admin decision.
"""

import logging
from typing import Optional, Dict, Any

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from jackemate.crud import report as report_crud
from jackemate.crud import vote as vote_crud
from jackemate.models.catalog import StatusName
from jackemate.models.report import Report
from jackemate.models.vote import DoesNotExistVote, RepairedVote
from jackemate.schemas.vote import VoteSummary
from jackemate.services import notification_service, points_service, state_service
from jackemate.services.errors import NotFoundError, ValidationError
from jackemate.services.permissions import Action, require
from jackemate.services.points_service import PointsPolicy

logger = logging.getLogger(__name__)

REJECTION_THRESHOLD = 5
AUTO_REJECT_COMMENT = (
    f"Automatically rejected after {REJECTION_THRESHOLD} \"does not exist\" votes"
)


def _load_votable_report(db: Session, report_id: int, voter_id: int) -> Report:
    report = report_crud.get_visible_report(db, report_id)
    if not report:
        raise NotFoundError("Report not found")
    if report.author_id == voter_id:
        raise ValidationError("You cannot vote on your own report")
    return report


def _insert_vote(db: Session, model, report_id: int, voter_id: int) -> int:
    """Insert the vote and return the tally including it, without committing."""
    try:
        vote_crud.add_vote(db, model, report_id, voter_id)
    except IntegrityError:
        db.rollback()
        raise ValidationError("You have already cast this vote on this report")
    return vote_crud.count_votes(db, model, report_id)


# ======================
# DOES-NOT-EXIST VOTES
# ======================

def cast_does_not_exist_vote(db: Session, report_id: int, voter_id: int) -> Dict[str, Any]:
    """
    Record a "does not exist" vote and apply the rejection rule.

    Only the vote that brings the tally to exactly REJECTION_THRESHOLD can
    reject the report, and the conditional update in ``record_transition``
    skips reports that are already Rejected. The author's penalty and the
    notification run only when this call performed the transition.

    Raises:
        PermissionDeniedError: role cannot vote
        NotFoundError: report missing or deleted
        ValidationError: own report or duplicate vote
    """
    require(db, voter_id, Action.VOTE)
    report = _load_votable_report(db, report_id, voter_id)
    author_id = report.author_id

    tally = _insert_vote(db, DoesNotExistVote, report_id, voter_id)

    transitioned = False
    try:
        if tally == REJECTION_THRESHOLD:
            rejected = state_service.get_required_status(db, StatusName.REJECTED)
            current_status_id = db.query(Report.status_id).filter(Report.id == report_id).scalar()
            if current_status_id != rejected.id:
                transitioned = state_service.record_transition(
                    db,
                    report_id=report_id,
                    previous_status_id=current_status_id,
                    new_status_id=rejected.id,
                    actor_id=voter_id,
                    comment=AUTO_REJECT_COMMENT,
                    unless_status_id=rejected.id,
                )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to record vote on report %s", report_id)
        raise

    points_service.add_points(
        db, voter_id, PointsPolicy.VOTE_DOES_NOT_EXIST, "Vote 'does not exist'"
    )

    report = report_crud.get_report(db, report_id)

    if transitioned:
        logger.info("Report %s rejected by community vote (%s votes)", report_id, tally)
        if author_id is not None:
            points_service.apply_delta(
                db, author_id, PointsPolicy.REPORT_REJECTED, "Report rejected"
            )
        notification_service.notify_status_change(
            db,
            report=report,
            new_status=StatusName.REJECTED.value,
            comment=AUTO_REJECT_COMMENT,
        )

    status_name = report.status.name if report.status else "No status"

    return {
        "report_id": report_id,
        "kind": "does_not_exist",
        "votes": tally,
        "threshold": REJECTION_THRESHOLD,
        "status": status_name,
        "transitioned": transitioned,
        "points_awarded": PointsPolicy.VOTE_DOES_NOT_EXIST,
        "message": "Report rejected by the community" if transitioned else "Vote recorded",
    }


# ======================
# REPAIRED VOTES
# ======================

def cast_repaired_vote(db: Session, report_id: int, voter_id: int) -> Dict[str, Any]:
    """Record a "repaired" vote. No status change follows from it."""
    require(db, voter_id, Action.VOTE)
    report = _load_votable_report(db, report_id, voter_id)
    status_name = report.status.name if report.status else "No status"

    tally = _insert_vote(db, RepairedVote, report_id, voter_id)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to record repaired vote on report %s", report_id)
        raise

    points_service.add_points(db, voter_id, PointsPolicy.VOTE_REPAIRED, "Vote 'repaired'")

    return {
        "report_id": report_id,
        "kind": "repaired",
        "votes": tally,
        "threshold": None,
        "status": status_name,
        "transitioned": False,
        "points_awarded": PointsPolicy.VOTE_REPAIRED,
        "message": "Vote recorded",
    }


# ======================
# TALLIES
# ======================

def get_vote_summary(db: Session, report_id: int, viewer_id: Optional[int] = None) -> VoteSummary:
    voted_dne = voted_repaired = False
    if viewer_id is not None:
        voted_dne = vote_crud.has_voted(db, DoesNotExistVote, report_id, viewer_id)
        voted_repaired = vote_crud.has_voted(db, RepairedVote, report_id, viewer_id)
    return VoteSummary(
        does_not_exist=vote_crud.count_votes(db, DoesNotExistVote, report_id),
        repaired=vote_crud.count_votes(db, RepairedVote, report_id),
        threshold=REJECTION_THRESHOLD,
        voted_does_not_exist=voted_dne,
        voted_repaired=voted_repaired,
    )
