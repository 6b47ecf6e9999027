# jackemate/models/vote.py
from sqlalchemy import Column, Integer, ForeignKey, TIMESTAMP, UniqueConstraint, func
from jackemate.database import Base


class DoesNotExistVote(Base):
    __tablename__ = "votes_does_not_exist"

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    voter_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("report_id", "voter_id", name="uq_vote_does_not_exist"),
    )


class RepairedVote(Base):
    __tablename__ = "votes_repaired"

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    voter_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("report_id", "voter_id", name="uq_vote_repaired"),
    )
