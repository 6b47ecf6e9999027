# jackemate/crud/catalog.py
"""Lookups over the reference tables (roles, categories, priorities, statuses)."""

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from jackemate.models.catalog import Role, Category, Priority, Status


def get_role_by_name(db: Session, name: str) -> Optional[Role]:
    return db.query(Role).filter(func.lower(Role.name) == name.lower()).first()


def get_status(db: Session, status_id: int) -> Optional[Status]:
    return db.query(Status).filter(Status.id == status_id).first()


def get_status_by_name(db: Session, name: str) -> Optional[Status]:
    return db.query(Status).filter(func.lower(Status.name) == name.lower()).first()


def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.query(Category).filter(Category.id == category_id).first()


def get_priority(db: Session, priority_id: int) -> Optional[Priority]:
    return db.query(Priority).filter(Priority.id == priority_id).first()


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name).all()


def list_priorities(db: Session) -> List[Priority]:
    return db.query(Priority).order_by(Priority.name).all()


def list_statuses(db: Session) -> List[Status]:
    return db.query(Status).order_by(Status.name).all()


def get_or_create(db: Session, model, name: str) -> Tuple[object, bool]:
    """Return ``(row, created)`` for the reference row called ``name``."""
    instance = db.query(model).filter(model.name == name).first()
    if instance:
        return instance, False
    instance = model(name=name)
    db.add(instance)
    db.flush()
    return instance, True
