# jackemate/schemas/__init__.py

# Auth schemas
from .auth import Token, TokenData, RegisterRequest, LoginRequest

# User schemas
from .user import ProfileResponse, LeaderboardEntry, PointsEntryResponse, PointsHistoryResponse

# Reference tables
from .catalog import CatalogItem

# Report lifecycle
from .comment import CommentCreate, CommentResponse, CommentCreated
from .vote import VoteSummary, VoteResult
from .report import (
    ReportSummary,
    ReportPage,
    ReportDetail,
    ReportCreated,
    ReportDeleted,
    HistoryEntry,
    StatusChangeRequest,
    StatusChangeResponse,
)

# Statistics
from .stats import PlatformStats, DashboardStats

__all__ = [
    "Token",
    "TokenData",
    "RegisterRequest",
    "LoginRequest",
    "ProfileResponse",
    "LeaderboardEntry",
    "PointsEntryResponse",
    "PointsHistoryResponse",
    "CatalogItem",
    "CommentCreate",
    "CommentResponse",
    "CommentCreated",
    "VoteSummary",
    "VoteResult",
    "ReportSummary",
    "ReportPage",
    "ReportDetail",
    "ReportCreated",
    "ReportDeleted",
    "HistoryEntry",
    "StatusChangeRequest",
    "StatusChangeResponse",
    "PlatformStats",
    "DashboardStats",
]
