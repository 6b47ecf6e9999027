from __future__ import annotations

import pytest

from jackemate import models
from jackemate.crud import report as report_crud
from jackemate.services import notification_service, points_service, state_service, vote_service
from jackemate.services.errors import NotFoundError, PermissionDeniedError, ValidationError
from jackemate.services.vote_service import REJECTION_THRESHOLD

from conftest import create_profile, reference_id


@pytest.fixture
def voters(db_session):
    return [create_profile(db_session, f"voter{i}") for i in range(REJECTION_THRESHOLD + 2)]


def _status(db, report_id: int) -> str:
    db.expire_all()
    return report_crud.get_report(db, report_id).status.name


def test_each_vote_awards_one_point(db_session, citizen, voters, make_report):
    report_id = make_report(citizen.id)

    result = vote_service.cast_does_not_exist_vote(db_session, report_id, voters[0].id)

    assert result["votes"] == 1
    assert result["transitioned"] is False
    assert result["status"] == "Pending"
    assert points_service.get_points(db_session, voters[0].id) == 1


def test_fifth_vote_rejects_report_once(db_session, voters, make_report):
    author = create_profile(db_session, "author", points=1)
    report_id = make_report(author.id)
    # creation awarded +10
    assert points_service.get_points(db_session, author.id) == 11

    results = [
        vote_service.cast_does_not_exist_vote(db_session, report_id, voter.id)
        for voter in voters[:REJECTION_THRESHOLD]
    ]

    assert [r["transitioned"] for r in results] == [False] * 4 + [True]
    assert results[-1]["status"] == "Rejected"
    assert _status(db_session, report_id) == "Rejected"
    assert points_service.get_points(db_session, author.id) == 8

    history = db_session.query(models.StateHistory).filter_by(report_id=report_id).all()
    assert len(history) == 1
    assert history[0].previous_status.name == "Pending"
    assert history[0].new_status.name == "Rejected"
    assert history[0].actor_id == voters[REJECTION_THRESHOLD - 1].id
    assert history[0].comment == vote_service.AUTO_REJECT_COMMENT


def test_votes_past_threshold_do_not_retrigger(db_session, citizen, voters, make_report):
    report_id = make_report(citizen.id)
    for voter in voters[:REJECTION_THRESHOLD]:
        vote_service.cast_does_not_exist_vote(db_session, report_id, voter.id)
    balance_after_rejection = points_service.get_points(db_session, citizen.id)

    extra = vote_service.cast_does_not_exist_vote(db_session, report_id, voters[REJECTION_THRESHOLD].id)

    assert extra["votes"] == REJECTION_THRESHOLD + 1
    assert extra["transitioned"] is False
    assert points_service.get_points(db_session, citizen.id) == balance_after_rejection
    assert db_session.query(models.StateHistory).filter_by(report_id=report_id).count() == 1


def test_threshold_vote_on_already_rejected_report(db_session, citizen, admin, voters, make_report):
    report_id = make_report(citizen.id)
    for voter in voters[:REJECTION_THRESHOLD - 1]:
        vote_service.cast_does_not_exist_vote(db_session, report_id, voter.id)

    rejected_id = reference_id(db_session, models.Status, "Rejected")
    state_service.change_status(db_session, report_id, rejected_id, admin.id, "Duplicate")
    author_balance = points_service.get_points(db_session, citizen.id)

    result = vote_service.cast_does_not_exist_vote(
        db_session, report_id, voters[REJECTION_THRESHOLD - 1].id
    )

    assert result["votes"] == REJECTION_THRESHOLD
    assert result["transitioned"] is False
    assert _status(db_session, report_id) == "Rejected"
    assert points_service.get_points(db_session, citizen.id) == author_balance
    assert db_session.query(models.StateHistory).filter_by(report_id=report_id).count() == 1


def test_author_penalty_is_floored_at_zero(db_session, voters, make_report):
    author = create_profile(db_session, "poorauthor")
    report_id = make_report(author.id)
    points_service.subtract_points(db_session, author.id, 9)
    assert points_service.get_points(db_session, author.id) == 1

    for voter in voters[:REJECTION_THRESHOLD]:
        vote_service.cast_does_not_exist_vote(db_session, report_id, voter.id)

    assert points_service.get_points(db_session, author.id) == 0


def test_rejection_attempts_status_email(db_session, citizen, voters, make_report, monkeypatch):
    report_id = make_report(citizen.id)
    sent = []
    monkeypatch.setattr(
        notification_service,
        "notify_status_change",
        lambda db, **kwargs: sent.append(kwargs) or True,
    )

    for voter in voters[:REJECTION_THRESHOLD]:
        vote_service.cast_does_not_exist_vote(db_session, report_id, voter.id)

    assert len(sent) == 1
    assert sent[0]["new_status"] == "Rejected"
    assert sent[0]["report"].id == report_id


def test_duplicate_vote_is_rejected(db_session, citizen, voters, make_report):
    report_id = make_report(citizen.id)
    vote_service.cast_does_not_exist_vote(db_session, report_id, voters[0].id)

    with pytest.raises(ValidationError):
        vote_service.cast_does_not_exist_vote(db_session, report_id, voters[0].id)

    assert vote_service.get_vote_summary(db_session, report_id).does_not_exist == 1
    assert points_service.get_points(db_session, voters[0].id) == 1


def test_author_cannot_vote_on_own_report(db_session, citizen, make_report):
    report_id = make_report(citizen.id)

    with pytest.raises(ValidationError):
        vote_service.cast_does_not_exist_vote(db_session, report_id, citizen.id)
    with pytest.raises(ValidationError):
        vote_service.cast_repaired_vote(db_session, report_id, citizen.id)


def test_interested_role_cannot_vote(db_session, citizen, interested, make_report):
    report_id = make_report(citizen.id)

    with pytest.raises(PermissionDeniedError):
        vote_service.cast_does_not_exist_vote(db_session, report_id, interested.id)

    assert db_session.query(models.DoesNotExistVote).count() == 0
    assert points_service.get_points(db_session, interested.id) == 0


def test_vote_on_missing_report(db_session, voters):
    with pytest.raises(NotFoundError):
        vote_service.cast_does_not_exist_vote(db_session, 12345, voters[0].id)


def test_repaired_votes_never_change_status(db_session, citizen, voters, make_report):
    report_id = make_report(citizen.id)

    for voter in voters:
        result = vote_service.cast_repaired_vote(db_session, report_id, voter.id)
        assert result["transitioned"] is False

    assert _status(db_session, report_id) == "Pending"
    assert points_service.get_points(db_session, voters[0].id) == 1

    summary = vote_service.get_vote_summary(db_session, report_id, viewer_id=voters[0].id)
    assert summary.repaired == len(voters)
    assert summary.voted_repaired is True
    assert summary.voted_does_not_exist is False
