from __future__ import annotations

import pytest

from jackemate import models
from jackemate.services import points_service, state_service, vote_service
from jackemate.services.errors import NotFoundError, PermissionDeniedError, ValidationError

from conftest import create_profile, reference_id


def test_admin_marks_report_repaired(db_session, citizen, admin, make_report, monkeypatch):
    report_id = make_report(citizen.id)
    repaired_id = reference_id(db_session, models.Status, "Repaired")
    notified = []
    monkeypatch.setattr(
        state_service.notification_service,
        "notify_status_change",
        lambda db, **kwargs: notified.append(kwargs) or True,
    )

    result = state_service.change_status(db_session, report_id, repaired_id, admin.id)

    assert result["previous_status"] == "Pending"
    assert result["new_status"] == "Repaired"
    assert result["comment"] == state_service.ADMIN_DEFAULT_COMMENT

    history = state_service.get_history(db_session, report_id)
    assert len(history) == 1
    assert history[0].previous_status == "Pending"
    assert history[0].new_status == "Repaired"
    assert history[0].actor == "admin"

    # no bonus for the author, nothing for the admin
    assert points_service.get_points(db_session, citizen.id) == 10
    assert points_service.get_points(db_session, admin.id) == 0
    assert notified[0]["new_status"] == "Repaired"


def test_admin_comment_is_recorded(db_session, citizen, admin, make_report):
    report_id = make_report(citizen.id)
    rejected_id = reference_id(db_session, models.Status, "Rejected")

    state_service.change_status(db_session, report_id, rejected_id, admin.id, "Duplicate of #3")

    history = state_service.get_history(db_session, report_id)
    assert history[0].comment == "Duplicate of #3"


def test_same_status_is_rejected(db_session, citizen, admin, make_report):
    report_id = make_report(citizen.id)
    pending_id = reference_id(db_session, models.Status, "Pending")

    with pytest.raises(ValidationError):
        state_service.change_status(db_session, report_id, pending_id, admin.id)

    assert state_service.get_history(db_session, report_id) == []


def test_unknown_status_is_rejected(db_session, citizen, admin, make_report):
    report_id = make_report(citizen.id)

    with pytest.raises(ValidationError):
        state_service.change_status(db_session, report_id, 999, admin.id)


def test_missing_report_is_not_found(db_session, admin):
    repaired_id = reference_id(db_session, models.Status, "Repaired")

    with pytest.raises(NotFoundError):
        state_service.change_status(db_session, 4242, repaired_id, admin.id)


def test_citizen_cannot_change_status(db_session, citizen, make_report):
    report_id = make_report(citizen.id)
    repaired_id = reference_id(db_session, models.Status, "Repaired")

    with pytest.raises(PermissionDeniedError):
        state_service.change_status(db_session, report_id, repaired_id, citizen.id)

    assert state_service.get_history(db_session, report_id) == []


def test_history_is_newest_first(db_session, citizen, admin, make_report):
    report_id = make_report(citizen.id)
    repaired_id = reference_id(db_session, models.Status, "Repaired")
    pending_id = reference_id(db_session, models.Status, "Pending")

    state_service.change_status(db_session, report_id, repaired_id, admin.id)
    state_service.change_status(db_session, report_id, pending_id, admin.id)

    history = state_service.get_history(db_session, report_id)
    assert [h.new_status for h in history] == ["Pending", "Repaired"]


def test_admin_revert_is_not_retriggered_by_later_votes(db_session, citizen, admin, make_report):
    report_id = make_report(citizen.id)
    voters = [create_profile(db_session, f"neighbour{i}") for i in range(6)]
    for voter in voters[:5]:
        vote_service.cast_does_not_exist_vote(db_session, report_id, voter.id)

    pending_id = reference_id(db_session, models.Status, "Pending")
    state_service.change_status(db_session, report_id, pending_id, admin.id, "Verified on site")

    result = vote_service.cast_does_not_exist_vote(db_session, report_id, voters[5].id)

    assert result["transitioned"] is False
    assert result["status"] == "Pending"
