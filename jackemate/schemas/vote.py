from typing import Optional

from pydantic import BaseModel, Field


class VoteSummary(BaseModel):
    does_not_exist: int = Field(0, description="Number of 'does not exist' votes")
    repaired: int = Field(0, description="Number of 'repaired' votes")
    threshold: int = Field(..., description="'Does not exist' votes that reject a report")
    voted_does_not_exist: bool = False
    voted_repaired: bool = False


class VoteResult(BaseModel):
    report_id: int
    kind: str
    votes: int
    threshold: Optional[int] = None
    status: str
    transitioned: bool = Field(False, description="True when this vote rejected the report")
    points_awarded: int
    message: str
