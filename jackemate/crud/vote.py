# jackemate/crud/vote.py
"""
Vote CRUD Operations

Both vote kinds share the same shape, so every helper takes the model class.
Uniqueness per (report, voter) is enforced by the table constraint.
"""

from typing import Type, Union

from sqlalchemy.orm import Session

from jackemate.models.vote import DoesNotExistVote, RepairedVote

VoteModel = Type[Union[DoesNotExistVote, RepairedVote]]


def add_vote(db: Session, model: VoteModel, report_id: int, voter_id: int):
    """
    Insert a vote row.

    Raises:
        IntegrityError: on flush when the voter already voted this kind
    """
    vote = model(report_id=report_id, voter_id=voter_id)
    db.add(vote)
    db.flush()
    return vote


def count_votes(db: Session, model: VoteModel, report_id: int) -> int:
    return db.query(model).filter(model.report_id == report_id).count()


def has_voted(db: Session, model: VoteModel, report_id: int, voter_id: int) -> bool:
    return db.query(model.id).filter(
        model.report_id == report_id,
        model.voter_id == voter_id,
    ).first() is not None
