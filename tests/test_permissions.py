from __future__ import annotations

import pytest

from jackemate.crud import catalog as catalog_crud
from jackemate.services.errors import PermissionDeniedError
from jackemate.services.permissions import Action, can, require


@pytest.mark.parametrize("action", list(Action))
def test_admin_can_do_everything(action):
    assert can("Admin", action) is True


@pytest.mark.parametrize(
    "action, allowed",
    [
        (Action.CREATE_REPORT, True),
        (Action.COMMENT, True),
        (Action.VOTE, True),
        (Action.CHANGE_STATUS, False),
        (Action.MODERATE, False),
        (Action.VIEW_DASHBOARD, False),
    ],
)
def test_citizen_permissions(action, allowed):
    assert can("Citizen", action) is allowed


@pytest.mark.parametrize(
    "action, allowed",
    [
        (Action.CREATE_REPORT, False),
        (Action.COMMENT, False),
        (Action.VOTE, False),
        (Action.VIEW_DASHBOARD, True),
    ],
)
def test_interested_permissions(action, allowed):
    assert can("Interested", action) is allowed


def test_unknown_or_missing_role_is_denied():
    assert can(None, Action.COMMENT) is False
    assert can("Superuser", Action.COMMENT) is False


def test_require_unknown_profile(db_session):
    with pytest.raises(PermissionDeniedError):
        require(db_session, 777, Action.COMMENT)


def test_role_change_applies_immediately(db_session, citizen):
    require(db_session, citizen.id, Action.VOTE)

    interested_role = catalog_crud.get_role_by_name(db_session, "Interested")
    citizen.role_id = interested_role.id
    db_session.commit()

    with pytest.raises(PermissionDeniedError):
        require(db_session, citizen.id, Action.VOTE)
