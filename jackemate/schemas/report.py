# jackemate/schemas/report.py
"""
Report Pydantic Schemas

Related rows (category, priority, status, author, photos) are flattened here
into plain optional values so API consumers never see nested join results.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jackemate.schemas.comment import CommentResponse
from jackemate.schemas.vote import VoteSummary


def format_location(lat: Optional[float], lon: Optional[float]) -> str:
    if lat is None or lon is None:
        return "Location unavailable"
    return f"Lat {lat:.4f}, Lon {lon:.4f}"


# ======================
# LISTING SCHEMAS
# ======================

class ReportSummary(BaseModel):
    """One row of the public feed"""
    id: int
    title: str
    description: str = ""
    category: str = Field("Uncategorized", description="Category name")
    priority: str = Field("No priority", description="Priority name")
    status: str = Field("No status", description="Status name")
    location: str = Field("Location unavailable", description="Human readable coordinates")
    lat: Optional[float] = None
    lon: Optional[float] = None
    author: str = Field("Anonymous", description="Author username")
    created_at: Optional[datetime] = None
    image: Optional[str] = Field(None, description="First photo URL")

    @classmethod
    def from_report(cls, report) -> "ReportSummary":
        return cls(
            id=report.id,
            title=report.title,
            description=report.description or "",
            category=report.category.name if report.category else "Uncategorized",
            priority=report.priority.name if report.priority else "No priority",
            status=report.status.name if report.status else "No status",
            location=format_location(report.lat, report.lon),
            lat=report.lat,
            lon=report.lon,
            author=report.author.username if report.author else "Anonymous",
            created_at=report.created_at,
            image=report.photos[0].url if report.photos else None,
        )


class ReportPage(BaseModel):
    """Paginated feed response; field names are part of the public API."""
    data: List[ReportSummary]
    hasMore: bool
    count: int
    offset: int
    limite: int


# ======================
# DETAIL SCHEMAS
# ======================

class HistoryEntry(BaseModel):
    id: int
    previous_status: Optional[str] = None
    new_status: str
    actor: Optional[str] = None
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_history(cls, entry) -> "HistoryEntry":
        return cls(
            id=entry.id,
            previous_status=entry.previous_status.name if entry.previous_status else None,
            new_status=entry.new_status.name if entry.new_status else "No status",
            actor=entry.actor.username if entry.actor else None,
            comment=entry.comment,
            created_at=entry.created_at,
        )


class ReportDetail(ReportSummary):
    author_id: Optional[int] = None
    photos: List[str] = Field(default_factory=list)
    deleted_at: Optional[datetime] = None
    votes: VoteSummary
    comments: List[CommentResponse] = Field(default_factory=list)
    history: List[HistoryEntry] = Field(default_factory=list)


class ReportCreated(BaseModel):
    """Response after creating a report"""
    message: str
    report: ReportSummary
    points_awarded: int
    photo_url: Optional[str] = None
    warning: Optional[str] = Field(None, description="Set when the photo could not be stored")


class ReportDeleted(BaseModel):
    message: str
    report_id: int
    points_delta: int = 0


# ======================
# ADMIN SCHEMAS
# ======================

class StatusChangeRequest(BaseModel):
    status_id: int = Field(..., description="Target status identifier")
    comment: Optional[str] = Field(None, max_length=500, description="Optional note stored in the history")

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, v):
        if v is None:
            return None
        return v.strip() or None


class StatusChangeResponse(BaseModel):
    report_id: int
    previous_status: Optional[str] = None
    new_status: str
    comment: Optional[str] = None
    message: str

    model_config = ConfigDict(from_attributes=True)
