# jackemate/services/report_service.py
"""
Report Service Layer

Creation, soft deletion and read models for citizen reports.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Dict, Any, BinaryIO, List

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from jackemate.crud import catalog as catalog_crud
from jackemate.crud import comment as comment_crud
from jackemate.crud import report as report_crud
from jackemate.models.catalog import StatusName
from jackemate.schemas.comment import CommentResponse
from jackemate.schemas.report import HistoryEntry, ReportDetail, ReportSummary
from jackemate.services import points_service, state_service, vote_service
from jackemate.services.errors import NotFoundError, PermissionDeniedError, ValidationError
from jackemate.services.permissions import Action, is_admin, load_actor, require
from jackemate.services.points_service import PointsPolicy
from jackemate.utils.storage import StorageError, get_file_storage

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 150
DESCRIPTION_MAX_LENGTH = 5000
DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100


# ======================
# VALIDATION
# ======================

def _clean_text(value: Optional[str], field: str, max_length: int) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required")
    if len(cleaned) > max_length:
        raise ValidationError(f"{field} must be {max_length} characters or less")
    return cleaned


def _validate_coordinates(lat: Optional[float], lon: Optional[float]):
    if lat is None and lon is None:
        return None, None
    if lat is None or lon is None:
        raise ValidationError("Latitude and longitude must be provided together")
    if not -90 <= lat <= 90:
        raise ValidationError("Latitude must be between -90 and 90")
    if not -180 <= lon <= 180:
        raise ValidationError("Longitude must be between -180 and 180")
    return lat, lon


# ======================
# PHOTO UPLOAD
# ======================

def attach_photo(
    db: Session,
    report_id: int,
    file: BinaryIO,
    filename: str,
    content_type: Optional[str] = None
) -> str:
    """
    Store a photo and link it to the report.

    Raises:
        StorageError: the file could not be stored or linked
    """
    extension = Path(filename or "").suffix.lower() or ".jpg"
    path = f"{report_id}_{int(time.time() * 1000)}{extension}"

    storage = get_file_storage()
    url = storage.upload(path, file, content_type)
    try:
        report_crud.add_photo(db, report_id, url)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        storage.delete(path)
        raise StorageError(f"Failed to save photo URL: {e}") from e
    return url


# ======================
# CREATION
# ======================

def create_report(
    db: Session,
    *,
    author_id: int,
    title: str,
    description: str,
    category_id: Optional[int],
    priority_id: Optional[int],
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    photo: Optional[BinaryIO] = None,
    photo_filename: Optional[str] = None,
    photo_content_type: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a Pending report, award creation points and store the photo.

    The report is committed before points and photo are handled; a failure
    in either leaves the report in place. A photo failure is returned as
    ``warning`` instead of raising.

    Raises:
        PermissionDeniedError: role cannot create reports
        ValidationError: missing or invalid fields
    """
    require(db, author_id, Action.CREATE_REPORT)

    title = _clean_text(title, "Title", TITLE_MAX_LENGTH)
    description = _clean_text(description, "Description", DESCRIPTION_MAX_LENGTH)
    if category_id is None or not catalog_crud.get_category(db, category_id):
        raise ValidationError("A valid category is required")
    if priority_id is None or not catalog_crud.get_priority(db, priority_id):
        raise ValidationError("A valid priority is required")
    lat, lon = _validate_coordinates(lat, lon)

    pending = state_service.get_required_status(db, StatusName.PENDING)

    try:
        report = report_crud.create_report(
            db,
            author_id=author_id,
            title=title,
            description=description,
            category_id=category_id,
            priority_id=priority_id,
            status_id=pending.id,
            lat=lat,
            lon=lon,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create report for user %s", author_id)
        raise

    report_id = report.id
    logger.info("Report %s created by user %s", report_id, author_id)

    points_service.add_points(db, author_id, PointsPolicy.CREATE_REPORT, "Create report")

    photo_url = None
    warning = None
    if photo is not None:
        try:
            photo_url = attach_photo(db, report_id, photo, photo_filename, photo_content_type)
        except StorageError as e:
            logger.warning("Photo upload failed for report %s: %s", report_id, e)
            warning = "The report was created but the photo could not be uploaded"

    report = report_crud.get_report(db, report_id)
    return {
        "message": "Report created successfully",
        "report": ReportSummary.from_report(report),
        "points_awarded": PointsPolicy.CREATE_REPORT,
        "photo_url": photo_url,
        "warning": warning,
    }


# ======================
# SOFT DELETION
# ======================

def delete_report(db: Session, report_id: int, actor_id: int) -> Dict[str, Any]:
    """
    Soft-delete a report as its author or as an admin.

    Authors lose DELETE_OWN_REPORT points; an admin removing someone else's
    report changes nobody's balance. Comments, votes and history stay.
    """
    actor = load_actor(db, actor_id)
    report = report_crud.get_visible_report(db, report_id)
    if not report:
        raise NotFoundError("Report not found")

    own_report = report.author_id == actor_id
    if not own_report and not is_admin(actor):
        raise PermissionDeniedError("Only the author or an administrator can delete this report")

    try:
        deleted = report_crud.soft_delete_report(
            db, report_id, author_id=actor_id if own_report else None
        )
        if not deleted:
            db.rollback()
            raise NotFoundError("Report not found")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete report %s", report_id)
        raise

    logger.info("Report %s deleted by user %s", report_id, actor_id)

    points_delta = 0
    if own_report:
        points_service.apply_delta(
            db, actor_id, PointsPolicy.DELETE_OWN_REPORT, "Delete own report"
        )
        points_delta = PointsPolicy.DELETE_OWN_REPORT

    return {
        "message": "Report deleted successfully",
        "report_id": report_id,
        "points_delta": points_delta,
    }


def delete_report_as_admin(db: Session, report_id: int, admin_id: int) -> Dict[str, Any]:
    """Admin moderation path: soft-delete any report, no points change."""
    require(db, admin_id, Action.MODERATE)
    try:
        deleted = report_crud.soft_delete_report(db, report_id)
        if not deleted:
            db.rollback()
            raise NotFoundError("Report not found")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete report %s", report_id)
        raise

    logger.info("Report %s deleted by admin %s", report_id, admin_id)
    return {"message": "Report deleted successfully", "report_id": report_id, "points_delta": 0}


# ======================
# READS
# ======================

def list_reports(
    db: Session,
    *,
    search: Optional[str] = None,
    category: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    with_coordinates: bool = False,
    offset: int = 0,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Dict[str, Any]:
    """Paginated feed of visible reports, newest first."""
    offset = max(0, offset)
    limit = min(max(1, limit), MAX_PAGE_SIZE)

    reports, total = report_crud.list_reports(
        db,
        search=search,
        category=category,
        status=status,
        priority=priority,
        with_coordinates=with_coordinates,
        offset=offset,
        limit=limit,
    )
    return {
        "data": [ReportSummary.from_report(r) for r in reports],
        "hasMore": offset + limit < total,
        "count": total,
        "offset": offset,
        "limite": limit,
    }


def get_recent_reports(db: Session, limit: int = 3) -> List[ReportSummary]:
    return [ReportSummary.from_report(r) for r in report_crud.get_recent_reports(db, limit)]


def get_report_detail(
    db: Session,
    report_id: int,
    viewer_id: Optional[int] = None,
    include_deleted: bool = False
) -> ReportDetail:
    if include_deleted:
        report = report_crud.get_report(db, report_id)
    else:
        report = report_crud.get_visible_report(db, report_id)
    if not report:
        raise NotFoundError("Report not found")

    summary = ReportSummary.from_report(report)
    return ReportDetail(
        **summary.model_dump(),
        author_id=report.author_id,
        photos=[p.url for p in report.photos],
        deleted_at=report.deleted_at,
        votes=vote_service.get_vote_summary(db, report.id, viewer_id),
        comments=[
            CommentResponse.from_comment(c)
            for c in comment_crud.list_visible_comments(db, report.id)
        ],
        history=[HistoryEntry.from_history(h) for h in report_crud.get_history(db, report.id)],
    )


def get_report_detail_as_admin(db: Session, report_id: int, admin_id: int) -> ReportDetail:
    """Audit read: the full detail of any report, soft-deleted ones included."""
    require(db, admin_id, Action.MODERATE)
    return get_report_detail(db, report_id, admin_id, include_deleted=True)
