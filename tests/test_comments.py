from __future__ import annotations

import pytest

from jackemate.crud import comment as comment_crud
from jackemate.services import comment_service, notification_service, points_service, report_service
from jackemate.services.errors import NotFoundError, PermissionDeniedError, ValidationError

from conftest import create_profile


class _InlineThread:
    """Stand-in for threading.Thread that runs the target immediately."""

    def __init__(self, target, args=(), kwargs=None, daemon=None):
        self._target = target
        self._args = args
        self._kwargs = kwargs or {}

    def start(self):
        self._target(*self._args, **self._kwargs)


@pytest.fixture
def commenter(db_session):
    return create_profile(db_session, "commenter")


def test_comment_awards_points_and_emails_owner(db_session, citizen, commenter, make_report, monkeypatch):
    report_id = make_report(citizen.id)
    sent = []
    monkeypatch.setattr(notification_service, "is_email_enabled", lambda: True)
    monkeypatch.setattr(notification_service, "send_email", lambda **kwargs: sent.append(kwargs) or "<id@test>")
    monkeypatch.setattr(notification_service.threading, "Thread", _InlineThread)

    result = comment_service.create_comment(db_session, report_id, commenter.id, "  Still there today  ")

    assert result["points_awarded"] == 2
    assert result["comment"].content == "Still there today"
    assert result["comment"].author == "commenter"
    assert points_service.get_points(db_session, commenter.id) == 2

    assert len(sent) == 1
    assert sent[0]["to_email"] == "citizen@example.com"
    assert "Pothole on Main St" in sent[0]["subject"]
    assert "Still there today" in sent[0]["body_text"]


def test_owner_commenting_sends_no_email(db_session, citizen, make_report, monkeypatch):
    report_id = make_report(citizen.id)
    calls = []
    monkeypatch.setattr(notification_service, "notify_new_comment", lambda db, **kwargs: calls.append(kwargs))

    comment_service.create_comment(db_session, report_id, citizen.id, "Adding more detail")

    assert calls == []


def test_email_failure_does_not_fail_comment(db_session, citizen, commenter, make_report, monkeypatch):
    report_id = make_report(citizen.id)
    monkeypatch.setattr(notification_service, "is_email_enabled", lambda: True)
    monkeypatch.setattr(
        notification_service,
        "send_email",
        lambda **kwargs: (_ for _ in ()).throw(RuntimeError("SMTP down")),
    )
    monkeypatch.setattr(notification_service.threading, "Thread", _InlineThread)

    result = comment_service.create_comment(db_session, report_id, commenter.id, "Hello")

    assert result["comment"].id is not None
    assert points_service.get_points(db_session, commenter.id) == 2


def test_interested_cannot_comment(db_session, citizen, interested, make_report):
    report_id = make_report(citizen.id)

    with pytest.raises(PermissionDeniedError):
        comment_service.create_comment(db_session, report_id, interested.id, "Hi")

    assert comment_service.list_comments(db_session, report_id) == []


def test_empty_comment_rejected(db_session, citizen, commenter, make_report):
    report_id = make_report(citizen.id)

    with pytest.raises(ValidationError):
        comment_service.create_comment(db_session, report_id, commenter.id, "   ")


def test_comment_on_deleted_report_is_not_found(db_session, citizen, commenter, make_report):
    report_id = make_report(citizen.id)
    report_service.delete_report(db_session, report_id, citizen.id)

    with pytest.raises(NotFoundError):
        comment_service.create_comment(db_session, report_id, commenter.id, "Too late")


def test_soft_deleted_comment_is_hidden(db_session, citizen, commenter, make_report):
    report_id = make_report(citizen.id)
    first = comment_service.create_comment(db_session, report_id, commenter.id, "First")["comment"]
    comment_service.create_comment(db_session, report_id, commenter.id, "Second")

    comment_service.delete_comment(db_session, first.id, commenter.id)

    visible = comment_service.list_comments(db_session, report_id)
    assert [c.content for c in visible] == ["Second"]
    assert comment_crud.get_comment(db_session, first.id).deleted_at is not None
    # no points change on deletion
    assert points_service.get_points(db_session, commenter.id) == 4

    with pytest.raises(NotFoundError):
        comment_service.delete_comment(db_session, first.id, commenter.id)


def test_only_author_or_admin_deletes_comment(db_session, citizen, commenter, admin, make_report):
    report_id = make_report(citizen.id)
    comment = comment_service.create_comment(db_session, report_id, commenter.id, "Mine")["comment"]

    with pytest.raises(PermissionDeniedError):
        comment_service.delete_comment(db_session, comment.id, citizen.id)

    comment_service.delete_comment(db_session, comment.id, admin.id)
    assert comment_service.list_comments(db_session, report_id) == []


def test_admin_moderation_requires_admin(db_session, citizen, commenter, make_report):
    report_id = make_report(citizen.id)
    comment = comment_service.create_comment(db_session, report_id, commenter.id, "Mine")["comment"]

    with pytest.raises(PermissionDeniedError):
        comment_service.delete_comment_as_admin(db_session, comment.id, commenter.id)
