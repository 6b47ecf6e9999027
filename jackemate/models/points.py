# jackemate/models/points.py
from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, func
from sqlalchemy.orm import relationship
from jackemate.database import Base


class PointsEntry(Base):
    """Append-only log of applied point deltas."""
    __tablename__ = "points_entries"

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    delta = Column(Integer, nullable=False)
    balance_after = Column(Integer, nullable=False)
    reason = Column(String(255))
    timestamp = Column(TIMESTAMP, server_default=func.now())

    profile = relationship("UserProfile", back_populates="points_entries")
