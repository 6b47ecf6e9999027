# jackemate/schemas/stats.py
from typing import List, Optional

from pydantic import BaseModel, Field


class PlatformStats(BaseModel):
    total_users: int
    total_reports: int
    resolved_reports: int


class CategoryCount(BaseModel):
    category: str
    count: int
    color: str


class ResolutionTime(BaseModel):
    average_days: float = 0.0
    average_hours: float = 0.0


class HotZone(BaseModel):
    lat: float
    lon: float
    count: int
    latest_report: Optional[str] = None


class StatusSummary(BaseModel):
    total: int
    repaired: int
    pending: int
    rejected: int
    resolution_rate: int = Field(..., description="Repaired share of visible reports, 0-100")


class DashboardStats(BaseModel):
    summary: StatusSummary
    by_category: List[CategoryCount]
    resolution_time: ResolutionTime
    hot_zones: List[HotZone]
