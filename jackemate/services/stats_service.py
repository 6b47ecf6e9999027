# jackemate/services/stats_service.py
"""
Statistics Service

Public platform counters and the dashboard shown to admins and interested
parties. All figures only count visible (not soft-deleted) reports.
"""

import logging
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from jackemate.models.catalog import Category, Status, StatusName
from jackemate.models.report import Report, StateHistory
from jackemate.models.user import UserProfile
from jackemate.schemas.stats import (
    CategoryCount,
    DashboardStats,
    HotZone,
    PlatformStats,
    ResolutionTime,
    StatusSummary,
)
from jackemate.services.permissions import Action, require

logger = logging.getLogger(__name__)

CATEGORY_COLORS = [
    "#3b82f6",
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
    "#14b8a6",
    "#f97316",
]

HOT_ZONE_PRECISION = 0.001
HOT_ZONE_LIMIT = 10


def _round_half_up(value: float, places: int = 0) -> float:
    """Round halves away from zero, unlike the builtin round()."""
    step = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP))


def _visible_reports(db: Session):
    return db.query(Report).filter(Report.deleted_at.is_(None))


def _count_by_status(db: Session) -> Dict[str, int]:
    rows = db.query(Status.name, func.count(Report.id)).join(
        Report, Report.status_id == Status.id
    ).filter(
        Report.deleted_at.is_(None)
    ).group_by(Status.name).all()
    return {name.lower(): count for name, count in rows}


def get_platform_stats(db: Session) -> PlatformStats:
    by_status = _count_by_status(db)
    return PlatformStats(
        total_users=db.query(func.count(UserProfile.id)).scalar() or 0,
        total_reports=_visible_reports(db).count(),
        resolved_reports=by_status.get(StatusName.REPAIRED.value.lower(), 0),
    )


# ======================
# DASHBOARD SECTIONS
# ======================

def get_reports_by_category(db: Session) -> List[CategoryCount]:
    rows = db.query(Category.name).select_from(Report).outerjoin(
        Category, Report.category_id == Category.id
    ).filter(Report.deleted_at.is_(None)).all()

    counts = Counter(name or "Uncategorized" for (name,) in rows)
    # colour follows first appearance, order follows count
    entries = [
        CategoryCount(category=name, count=count, color=CATEGORY_COLORS[i % len(CATEGORY_COLORS)])
        for i, (name, count) in enumerate(counts.items())
    ]
    return sorted(entries, key=lambda e: e.count, reverse=True)


def get_average_resolution_time(db: Session) -> ResolutionTime:
    """Mean time from creation to the first transition into Repaired."""
    repaired = db.query(Status).filter(
        func.lower(Status.name) == StatusName.REPAIRED.value.lower()
    ).first()
    if repaired is None:
        return ResolutionTime()

    first_repaired = db.query(
        StateHistory.report_id.label("report_id"),
        func.min(StateHistory.created_at).label("repaired_at"),
    ).filter(
        StateHistory.new_status_id == repaired.id
    ).group_by(StateHistory.report_id).subquery()

    rows = db.query(Report.created_at, first_repaired.c.repaired_at).join(
        first_repaired, first_repaired.c.report_id == Report.id
    ).filter(
        Report.deleted_at.is_(None),
        Report.status_id == repaired.id,
    ).all()

    durations = [
        (repaired_at - created_at).total_seconds()
        for created_at, repaired_at in rows
        if created_at is not None and repaired_at is not None
    ]
    if not durations:
        return ResolutionTime()

    average = sum(durations) / len(durations)
    return ResolutionTime(
        average_days=_round_half_up(average / 86400, 1),
        average_hours=_round_half_up(average / 3600, 1),
    )


def get_hot_zones(db: Session, limit: int = HOT_ZONE_LIMIT) -> List[HotZone]:
    """Group geolocated reports into ~100 m cells and return the busiest ones."""
    rows = db.query(Report.lat, Report.lon, Report.created_at).filter(
        Report.deleted_at.is_(None),
        Report.lat.isnot(None),
        Report.lon.isnot(None),
    ).order_by(Report.created_at.desc()).all()

    zones: Dict[tuple, dict] = {}
    for lat, lon, created_at in rows:
        key = (round(lat / HOT_ZONE_PRECISION), round(lon / HOT_ZONE_PRECISION))
        zone = zones.get(key)
        if zone is None:
            zones[key] = {
                "lat": round(key[0] * HOT_ZONE_PRECISION, 3),
                "lon": round(key[1] * HOT_ZONE_PRECISION, 3),
                "count": 1,
                "latest": created_at,
            }
            continue
        zone["count"] += 1
        if created_at and (zone["latest"] is None or created_at > zone["latest"]):
            zone["latest"] = created_at

    ranked = sorted(zones.values(), key=lambda z: z["count"], reverse=True)[:limit]
    return [
        HotZone(
            lat=z["lat"],
            lon=z["lon"],
            count=z["count"],
            latest_report=z["latest"].isoformat() if z["latest"] else None,
        )
        for z in ranked
    ]


def get_status_summary(db: Session) -> StatusSummary:
    by_status = _count_by_status(db)
    total = sum(by_status.values())
    repaired = by_status.get(StatusName.REPAIRED.value.lower(), 0)
    return StatusSummary(
        total=total,
        repaired=repaired,
        pending=by_status.get(StatusName.PENDING.value.lower(), 0),
        rejected=by_status.get(StatusName.REJECTED.value.lower(), 0),
        resolution_rate=int(_round_half_up(repaired / total * 100)) if total else 0,
    )


def get_dashboard(db: Session, viewer_id: Optional[int]) -> DashboardStats:
    """
    Aggregated dashboard. Admin and Interested roles only.

    Raises:
        PermissionDeniedError: role cannot view the dashboard
    """
    require(db, viewer_id, Action.VIEW_DASHBOARD)
    return DashboardStats(
        summary=get_status_summary(db),
        by_category=get_reports_by_category(db),
        resolution_time=get_average_resolution_time(db),
        hot_zones=get_hot_zones(db),
    )
