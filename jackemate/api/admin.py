# jackemate/api/admin.py
"""
Admin Router
Moderation endpoints: audit reads, direct status changes and removal of reports and
comments. Every call re-checks the caller's role from the database.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jackemate.database import get_db
from jackemate.models.user import User
from jackemate.schemas.report import (
    ReportDeleted,
    ReportDetail,
    StatusChangeRequest,
    StatusChangeResponse,
)
from jackemate.services import comment_service, report_service, state_service
from jackemate.services.permissions import Action, require
from jackemate.utils.security import get_current_user

router = APIRouter(prefix="/admin", tags=["Admin"])


# ─────────────────────────────────────────
# HELPER: Enforce admin access
# ─────────────────────────────────────────
def require_admin(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    require(db, current_user.id, Action.MODERATE)
    return current_user


# ─────────────────────────────────────────
# GET /admin/reportes/{id}
# ─────────────────────────────────────────
@router.get("/reportes/{report_id}", response_model=ReportDetail)
def get_report(
    report_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return report_service.get_report_detail_as_admin(db, report_id, admin.id)


# ─────────────────────────────────────────
# PATCH /admin/reportes/{id}/estado
# ─────────────────────────────────────────
@router.patch("/reportes/{report_id}/estado", response_model=StatusChangeResponse)
def change_report_status(
    report_id: int,
    payload: StatusChangeRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return state_service.change_status(
        db, report_id, payload.status_id, admin.id, payload.comment
    )


# ─────────────────────────────────────────
# DELETE /admin/reportes/{id}
# ─────────────────────────────────────────
@router.delete("/reportes/{report_id}", response_model=ReportDeleted)
def delete_report(
    report_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return report_service.delete_report_as_admin(db, report_id, admin.id)


# ─────────────────────────────────────────
# DELETE /admin/comentarios/{id}
# ─────────────────────────────────────────
@router.delete("/comentarios/{comment_id}")
def delete_comment(
    comment_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return comment_service.delete_comment_as_admin(db, comment_id, admin.id)
