from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, TIMESTAMP, CheckConstraint, func
from sqlalchemy.orm import relationship
from jackemate.database import Base
from datetime import datetime
# ---------------- USER (AUTH TABLE) ----------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")


# ---------------- PROFILE TABLE ----------------
class UserProfile(Base):
    """Public profile; its primary key is the auth identity."""
    __tablename__ = "profiles"

    id: int = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    username: str = Column(String(50), unique=True, nullable=False, index=True)
    role_id: int = Column(Integer, ForeignKey("roles.id"), nullable=False)
    points: int = Column(Integer, default=0, nullable=False)
    created_at: datetime = Column(TIMESTAMP, server_default=func.now())
    updated_at: datetime = Column(
        TIMESTAMP,
        server_default=func.now(),
        onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("points >= 0", name="check_points_non_negative"),
    )

    user = relationship("User", back_populates="profile")
    role = relationship("Role")
    points_entries = relationship("PointsEntry", back_populates="profile", cascade="all, delete-orphan")

    @property
    def role_name(self):
        return self.role.name if self.role else None
