# jackemate/models/catalog.py
import enum

from sqlalchemy import Column, Integer, String
from jackemate.database import Base


class RoleName(str, enum.Enum):
    ADMIN = "Admin"
    CITIZEN = "Citizen"
    INTERESTED = "Interested"


class StatusName(str, enum.Enum):
    PENDING = "Pending"
    REPAIRED = "Repaired"
    REJECTED = "Rejected"


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)


class Priority(Base):
    __tablename__ = "priorities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)


class Status(Base):
    __tablename__ = "statuses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)
