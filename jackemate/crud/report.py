# jackemate/crud/report.py
"""
Report CRUD Operations

Rows are soft-deleted only. ``get_report`` returns a report whatever its
deletion state; every listing goes through ``_visible`` first.
"""

from datetime import datetime, UTC
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from jackemate.models.catalog import Category, Priority, Status
from jackemate.models.report import Report, ReportPhoto, StateHistory


def _with_relations(query):
    return query.options(
        joinedload(Report.category),
        joinedload(Report.priority),
        joinedload(Report.status),
        joinedload(Report.author),
        selectinload(Report.photos),
    )


def _visible(query):
    return query.filter(Report.deleted_at.is_(None))


def _matches_name(relationship, model, value: Optional[str]):
    """Filter clause for a reference name; ``None`` when the filter is off."""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == "all":
        return None
    return relationship.has(func.lower(model.name) == value.lower())


# ======================
# REPORT CRUD
# ======================

def create_report(
    db: Session,
    *,
    author_id: int,
    title: str,
    description: str,
    category_id: int,
    priority_id: int,
    status_id: int,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
) -> Report:
    report = Report(
        author_id=author_id,
        title=title,
        description=description,
        category_id=category_id,
        priority_id=priority_id,
        status_id=status_id,
        lat=lat,
        lon=lon,
    )
    db.add(report)
    db.flush()
    return report


def get_report(db: Session, report_id: int) -> Optional[Report]:
    """Fetch a report by id, including soft-deleted ones."""
    return _with_relations(db.query(Report)).filter(Report.id == report_id).first()


def get_visible_report(db: Session, report_id: int) -> Optional[Report]:
    return _visible(_with_relations(db.query(Report))).filter(Report.id == report_id).first()


def list_reports(
    db: Session,
    *,
    search: Optional[str] = None,
    category: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    with_coordinates: bool = False,
    offset: int = 0,
    limit: int = 12,
) -> Tuple[List[Report], int]:
    """
    Visible reports matching the filters, newest first.

    Returns:
        (page of reports, total number of matches)
    """
    query = _visible(db.query(Report))

    if search and search.strip():
        like = f"%{search.strip()}%"
        query = query.filter(or_(Report.title.ilike(like), Report.description.ilike(like)))

    for clause in (
        _matches_name(Report.category, Category, category),
        _matches_name(Report.status, Status, status),
        _matches_name(Report.priority, Priority, priority),
    ):
        if clause is not None:
            query = query.filter(clause)

    if with_coordinates:
        query = query.filter(Report.lat.isnot(None), Report.lon.isnot(None))

    total = query.count()
    reports = _with_relations(query).order_by(
        Report.created_at.desc(), Report.id.desc()
    ).offset(offset).limit(limit).all()
    return reports, total


def get_recent_reports(db: Session, limit: int = 3) -> List[Report]:
    return _visible(_with_relations(db.query(Report))).order_by(
        Report.created_at.desc(), Report.id.desc()
    ).limit(limit).all()


def soft_delete_report(db: Session, report_id: int, author_id: Optional[int] = None) -> bool:
    """
    Stamp ``deleted_at`` on a visible report.

    When ``author_id`` is given only that author's report matches.
    Returns True when a row was marked.
    """
    query = db.query(Report).filter(Report.id == report_id, Report.deleted_at.is_(None))
    if author_id is not None:
        query = query.filter(Report.author_id == author_id)
    updated = query.update({Report.deleted_at: datetime.now(UTC)}, synchronize_session=False)
    return bool(updated)


# ======================
# STATUS TRANSITIONS
# ======================

def set_status(
    db: Session,
    report_id: int,
    new_status_id: int,
    *,
    expected_status_id: Optional[int] = None,
    unless_status_id: Optional[int] = None,
) -> bool:
    """
    Conditionally move a report to ``new_status_id``.

    ``expected_status_id`` requires the report to still hold that status;
    ``unless_status_id`` skips reports already in it. Returns True when this
    call changed the row, which makes racing transitions single-winner.
    """
    query = db.query(Report).filter(Report.id == report_id)
    if expected_status_id is not None:
        query = query.filter(Report.status_id == expected_status_id)
    if unless_status_id is not None:
        query = query.filter(Report.status_id != unless_status_id)
    updated = query.update({Report.status_id: new_status_id}, synchronize_session=False)
    return bool(updated)


def append_history(
    db: Session,
    *,
    report_id: int,
    previous_status_id: Optional[int],
    new_status_id: int,
    actor_id: Optional[int] = None,
    comment: Optional[str] = None,
) -> StateHistory:
    entry = StateHistory(
        report_id=report_id,
        previous_status_id=previous_status_id,
        new_status_id=new_status_id,
        actor_id=actor_id,
        comment=comment,
    )
    db.add(entry)
    db.flush()
    return entry


def get_history(db: Session, report_id: int) -> List[StateHistory]:
    return db.query(StateHistory).options(
        joinedload(StateHistory.previous_status),
        joinedload(StateHistory.new_status),
        joinedload(StateHistory.actor),
    ).filter(
        StateHistory.report_id == report_id
    ).order_by(StateHistory.created_at.desc(), StateHistory.id.desc()).all()


# ======================
# PHOTOS
# ======================

def add_photo(db: Session, report_id: int, url: str) -> ReportPhoto:
    photo = ReportPhoto(report_id=report_id, url=url)
    db.add(photo)
    db.flush()
    return photo
