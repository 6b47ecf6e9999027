"""Pytest bootstrap for project imports and shared database fixtures."""

from pathlib import Path
import sys

# Ensure project root is on sys.path so `import jackemate` works
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jackemate import models
from jackemate.crud import catalog as catalog_crud
from jackemate.crud import user as user_crud
from jackemate.database import Base
from jackemate.scripts.bootstrap import seed_reference_data


def build_session_factory():
    # StaticPool keeps one connection so every session sees the same in-memory db
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    db = SessionLocal()
    try:
        seed_reference_data(db)
        db.commit()
    finally:
        db.close()
    return SessionLocal


@pytest.fixture
def session_factory():
    return build_session_factory()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def create_profile(db, username: str, role: str = "Citizen", points: int = 0) -> models.UserProfile:
    role_row = catalog_crud.get_role_by_name(db, role)
    profile = user_crud.create_user_with_profile(
        db,
        email=f"{username}@example.com",
        password_hash="hash",
        username=username,
        role_id=role_row.id,
    )
    profile.points = points
    db.commit()
    return profile


def reference_id(db, model, name: str) -> int:
    return db.query(model).filter(model.name == name).one().id


@pytest.fixture
def citizen(db_session):
    return create_profile(db_session, "citizen")


@pytest.fixture
def admin(db_session):
    return create_profile(db_session, "admin", role="Admin")


@pytest.fixture
def interested(db_session):
    return create_profile(db_session, "watcher", role="Interested")


@pytest.fixture
def make_report(db_session):
    """Create a visible Pending report through the service layer."""
    from jackemate.services import report_service

    def _make(author_id: int, title: str = "Pothole on Main St", category: str = "Pothole", **kwargs):
        result = report_service.create_report(
            db_session,
            author_id=author_id,
            title=title,
            description=kwargs.pop("description", "Deep pothole next to the bus stop"),
            category_id=reference_id(db_session, models.Category, category),
            priority_id=reference_id(db_session, models.Priority, kwargs.pop("priority", "High")),
            **kwargs,
        )
        return result["report"].id

    return _make
