from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000, description="Comment text (max 1000 chars)")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        """Validate content is not just whitespace"""
        if v.strip() == "":
            raise ValueError("Comment cannot be empty or just whitespace")
        return v.strip()


class CommentResponse(BaseModel):
    id: int
    report_id: int
    author_id: Optional[int] = None
    author: str = "Anonymous"
    content: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_comment(cls, comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            report_id=comment.report_id,
            author_id=comment.author_id,
            author=comment.author.username if comment.author else "Anonymous",
            content=comment.content,
            created_at=comment.created_at,
        )


class CommentCreated(BaseModel):
    message: str
    comment: CommentResponse
    points_awarded: int
