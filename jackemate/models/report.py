from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey, TIMESTAMP, func
from sqlalchemy.orm import relationship

from jackemate.database import Base


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String(150), nullable=False)
    description = Column(Text, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    priority_id = Column(Integer, ForeignKey("priorities.id"), nullable=True, index=True)
    status_id = Column(Integer, ForeignKey("statuses.id"), nullable=False, index=True)
    lat = Column(Float, nullable=True)
    lon = Column(Float, nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.now(), nullable=False, index=True)
    deleted_at = Column(TIMESTAMP, nullable=True, index=True)

    author = relationship("UserProfile", foreign_keys=[author_id])
    category = relationship("Category")
    priority = relationship("Priority")
    status = relationship("Status")
    photos = relationship("ReportPhoto", back_populates="report", order_by="ReportPhoto.id")
    history = relationship("StateHistory", back_populates="report")

    @property
    def is_visible(self):
        return self.deleted_at is None


class ReportPhoto(Base):
    __tablename__ = "report_photos"

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(500), nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    report = relationship("Report", back_populates="photos")


class StateHistory(Base):
    """Append-only audit trail of report status transitions."""
    __tablename__ = "state_history"

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    previous_status_id = Column(Integer, ForeignKey("statuses.id"), nullable=True)
    new_status_id = Column(Integer, ForeignKey("statuses.id"), nullable=False, index=True)
    actor_id = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    comment = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.now(), nullable=False)

    report = relationship("Report", back_populates="history")
    previous_status = relationship("Status", foreign_keys=[previous_status_id])
    new_status = relationship("Status", foreign_keys=[new_status_id])
    actor = relationship("UserProfile", foreign_keys=[actor_id])
