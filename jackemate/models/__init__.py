# jackemate/models/__init__.py
# Import models in dependency order
from .catalog import Role, Category, Priority, Status, RoleName, StatusName
from .user import User, UserProfile
from .points import PointsEntry
from .report import Report, ReportPhoto, StateHistory
from .comment import Comment
from .vote import DoesNotExistVote, RepairedVote

__all__ = [
    "Role",
    "Category",
    "Priority",
    "Status",
    "RoleName",
    "StatusName",
    "User",
    "UserProfile",
    "PointsEntry",
    "Report",
    "ReportPhoto",
    "StateHistory",
    "Comment",
    "DoesNotExistVote",
    "RepairedVote",
]
