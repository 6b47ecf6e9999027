from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProfileResponse(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    role: Optional[str] = None
    points: int = 0

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_profile(cls, profile, email: Optional[str] = None) -> "ProfileResponse":
        return cls(
            id=profile.id,
            username=profile.username,
            email=email,
            role=profile.role_name,
            points=profile.points or 0,
        )


class LeaderboardEntry(BaseModel):
    id: int
    username: str
    points: int


class PointsEntryResponse(BaseModel):
    id: int
    delta: int
    balance_after: int
    reason: Optional[str] = None
    timestamp: Optional[str] = None


class PointsHistoryResponse(BaseModel):
    balance: int = Field(..., description="Current points balance")
    entries: List[PointsEntryResponse]
