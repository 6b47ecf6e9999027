# jackemate/services/state_service.py
"""
Report Status Transitions

Every status change, whether triggered by votes or by an administrator, goes
through ``record_transition`` so it is always paired with a StateHistory row.
"""

import logging
from typing import Optional, Dict, Any, List

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from jackemate.crud import catalog as catalog_crud
from jackemate.crud import report as report_crud
from jackemate.models.catalog import Status, StatusName
from jackemate.schemas.report import HistoryEntry
from jackemate.services import notification_service
from jackemate.services.errors import NotFoundError, ValidationError
from jackemate.services.permissions import Action, require

logger = logging.getLogger(__name__)

ADMIN_DEFAULT_COMMENT = "Status changed by an administrator"


def get_required_status(db: Session, name: StatusName) -> Status:
    """Look up a seeded status row; its absence is a deployment error."""
    status = catalog_crud.get_status_by_name(db, name.value)
    if status is None:
        raise RuntimeError(f"Status '{name.value}' is missing from the statuses table")
    return status


def record_transition(
    db: Session,
    *,
    report_id: int,
    previous_status_id: Optional[int],
    new_status_id: int,
    actor_id: Optional[int] = None,
    comment: Optional[str] = None,
    unless_status_id: Optional[int] = None,
) -> bool:
    """
    Move a report from ``previous_status_id`` to ``new_status_id`` and log it.

    The update only matches while the report still holds the previous status
    (and, if given, is not in ``unless_status_id``), so of two racing callers
    only one gets True and writes history. The caller commits.
    """
    changed = report_crud.set_status(
        db,
        report_id,
        new_status_id,
        expected_status_id=previous_status_id,
        unless_status_id=unless_status_id,
    )
    if not changed:
        return False

    report_crud.append_history(
        db,
        report_id=report_id,
        previous_status_id=previous_status_id,
        new_status_id=new_status_id,
        actor_id=actor_id,
        comment=comment,
    )
    return True


# ======================
# ADMIN TRANSITION
# ======================

def change_status(
    db: Session,
    report_id: int,
    new_status_id: int,
    admin_id: int,
    comment: Optional[str] = None
) -> Dict[str, Any]:
    """
    Set a report's status directly. Admin only.

    No points are awarded or removed on this path.

    Raises:
        PermissionDeniedError: caller is not an admin
        NotFoundError: report missing or deleted
        ValidationError: unknown status or no-op transition
    """
    require(db, admin_id, Action.CHANGE_STATUS)

    report = report_crud.get_visible_report(db, report_id)
    if not report:
        raise NotFoundError("Report not found")

    new_status = catalog_crud.get_status(db, new_status_id)
    if not new_status:
        raise ValidationError("Unknown status")

    previous_status_id = report.status_id
    previous_name = report.status.name if report.status else None
    if previous_status_id == new_status.id:
        raise ValidationError(f"Report is already {new_status.name}")

    note = comment or ADMIN_DEFAULT_COMMENT
    try:
        changed = record_transition(
            db,
            report_id=report.id,
            previous_status_id=previous_status_id,
            new_status_id=new_status.id,
            actor_id=admin_id,
            comment=note,
        )
        if not changed:
            db.rollback()
            raise ValidationError("Report status changed concurrently, reload and try again")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Report %s status %s -> %s by admin %s",
        report_id,
        previous_name,
        new_status.name,
        admin_id,
    )

    db.refresh(report)
    notification_service.notify_status_change(
        db,
        report=report,
        new_status=new_status.name,
        comment=note,
    )

    return {
        "report_id": report.id,
        "previous_status": previous_name,
        "new_status": new_status.name,
        "comment": note,
        "message": "Status updated successfully",
    }


# ======================
# HISTORY
# ======================

def get_history(db: Session, report_id: int) -> List[HistoryEntry]:
    """History of a report, newest first. Deleted reports keep their history."""
    if report_crud.get_report(db, report_id) is None:
        raise NotFoundError("Report not found")
    return [HistoryEntry.from_history(h) for h in report_crud.get_history(db, report_id)]
