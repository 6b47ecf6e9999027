from __future__ import annotations

import io

import pytest

from jackemate import models
from jackemate.crud import report as report_crud
from jackemate.services import points_service, report_service
from jackemate.services.errors import NotFoundError, PermissionDeniedError, ValidationError
from jackemate.utils.storage import LocalStorage

from conftest import create_profile, reference_id


@pytest.fixture
def local_storage(tmp_path, monkeypatch):
    storage = LocalStorage(tmp_path, "/static/uploads", max_bytes=1024)
    monkeypatch.setattr(report_service, "get_file_storage", lambda: storage)
    return storage


def _create(db, author_id, **overrides):
    fields = {
        "author_id": author_id,
        "title": "Broken street light",
        "description": "The light at the corner has been out for a week",
        "category_id": reference_id(db, models.Category, "Street lighting"),
        "priority_id": reference_id(db, models.Priority, "Medium"),
    }
    fields.update(overrides)
    return report_service.create_report(db, **fields)


# ======================
# CREATION
# ======================

def test_create_report_is_pending_and_awards_points(db_session, citizen):
    result = _create(db_session, citizen.id, lat=-34.6037, lon=-58.3816)

    report = result["report"]
    assert report.status == "Pending"
    assert report.category == "Street lighting"
    assert report.author == "citizen"
    assert report.location == "Lat -34.6037, Lon -58.3816"
    assert result["points_awarded"] == 10
    assert result["warning"] is None
    assert points_service.get_points(db_session, citizen.id) == 10
    # creation itself writes no history
    assert db_session.query(models.StateHistory).count() == 0


def test_create_report_without_location(db_session, citizen):
    report = _create(db_session, citizen.id)["report"]

    assert report.location == "Location unavailable"
    assert report.image is None


def test_interested_cannot_create_report(db_session, interested):
    with pytest.raises(PermissionDeniedError):
        _create(db_session, interested.id)

    assert db_session.query(models.Report).count() == 0
    assert points_service.get_points(db_session, interested.id) == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"description": ""},
        {"category_id": 9999},
        {"priority_id": None},
        {"lat": 10.0},
        {"lat": 95.0, "lon": 10.0},
        {"lat": 10.0, "lon": -181.0},
    ],
)
def test_invalid_report_fields(db_session, citizen, overrides):
    with pytest.raises(ValidationError):
        _create(db_session, citizen.id, **overrides)

    assert db_session.query(models.Report).count() == 0


def test_photo_is_stored_and_linked(db_session, citizen, local_storage, tmp_path):
    result = _create(
        db_session,
        citizen.id,
        photo=io.BytesIO(b"fake-jpeg-bytes"),
        photo_filename="street.JPG",
        photo_content_type="image/jpeg",
    )

    assert result["warning"] is None
    assert result["photo_url"].startswith("/static/uploads/")
    assert result["photo_url"].endswith(".jpg")
    assert result["report"].image == result["photo_url"]
    assert len(list(tmp_path.iterdir())) == 1


def test_photo_failure_keeps_report_with_warning(db_session, citizen, local_storage, tmp_path):
    result = _create(
        db_session,
        citizen.id,
        photo=io.BytesIO(b"not an image"),
        photo_filename="notes.txt",
        photo_content_type="text/plain",
    )

    assert result["warning"]
    assert result["photo_url"] is None
    assert report_crud.get_visible_report(db_session, result["report"].id) is not None
    assert points_service.get_points(db_session, citizen.id) == 10
    assert list(tmp_path.iterdir()) == []


def test_oversized_photo_is_rejected(db_session, citizen, local_storage, tmp_path):
    result = _create(
        db_session,
        citizen.id,
        photo=io.BytesIO(b"x" * 2048),
        photo_filename="big.png",
        photo_content_type="image/png",
    )

    assert result["warning"]
    assert list(tmp_path.iterdir()) == []


# ======================
# SOFT DELETION
# ======================

def test_author_delete_hides_report_and_costs_points(db_session, citizen, make_report):
    report_id = make_report(citizen.id)
    points_service.add_points(db_session, citizen.id, 5)

    result = report_service.delete_report(db_session, report_id, citizen.id)

    assert result["points_delta"] == -10
    assert points_service.get_points(db_session, citizen.id) == 5
    assert report_crud.get_visible_report(db_session, report_id) is None
    assert report_service.list_reports(db_session)["count"] == 0
    # still retrievable for audit
    assert report_crud.get_report(db_session, report_id).deleted_at is not None


def test_delete_twice_is_not_found(db_session, citizen, make_report):
    report_id = make_report(citizen.id)
    report_service.delete_report(db_session, report_id, citizen.id)

    with pytest.raises(NotFoundError):
        report_service.delete_report(db_session, report_id, citizen.id)


def test_other_citizen_cannot_delete(db_session, citizen, make_report):
    report_id = make_report(citizen.id)
    other = create_profile(db_session, "neighbour")

    with pytest.raises(PermissionDeniedError):
        report_service.delete_report(db_session, report_id, other.id)

    assert report_crud.get_visible_report(db_session, report_id) is not None


def test_admin_delete_applies_no_points(db_session, citizen, admin, make_report):
    report_id = make_report(citizen.id)

    result = report_service.delete_report(db_session, report_id, admin.id)

    assert result["points_delta"] == 0
    assert points_service.get_points(db_session, citizen.id) == 10
    assert points_service.get_points(db_session, admin.id) == 0

    with pytest.raises(NotFoundError):
        report_service.delete_report_as_admin(db_session, report_id, admin.id)


def test_deleted_report_detail_is_not_found(db_session, citizen, make_report):
    report_id = make_report(citizen.id)
    report_service.delete_report(db_session, report_id, citizen.id)

    with pytest.raises(NotFoundError):
        report_service.get_report_detail(db_session, report_id)

    detail = report_service.get_report_detail(db_session, report_id, include_deleted=True)
    assert detail.deleted_at is not None


def test_admin_can_audit_deleted_report(db_session, citizen, admin, make_report):
    report_id = make_report(citizen.id)
    report_service.delete_report(db_session, report_id, citizen.id)

    detail = report_service.get_report_detail_as_admin(db_session, report_id, admin.id)
    assert detail.id == report_id
    assert detail.deleted_at is not None

    with pytest.raises(PermissionDeniedError):
        report_service.get_report_detail_as_admin(db_session, report_id, citizen.id)


# ======================
# FEED
# ======================

def test_listing_pagination_and_category_filter(db_session, citizen, make_report):
    pothole_ids = [make_report(citizen.id, title=f"Pothole {i}") for i in range(15)]
    make_report(citizen.id, title="Tree down", category="Fallen tree")

    first = report_service.list_reports(db_session, category="pothole", offset=0, limit=12)
    second = report_service.list_reports(db_session, category="Pothole", offset=12, limit=12)

    assert first["count"] == 15
    assert first["hasMore"] is True
    assert [r.id for r in first["data"]] == list(reversed(pothole_ids))[:12]
    assert second["hasMore"] is False
    assert [r.id for r in second["data"]] == list(reversed(pothole_ids))[12:]
    assert second["offset"] == 12
    assert second["limite"] == 12


def test_listing_filters(db_session, citizen, make_report):
    make_report(citizen.id, title="Overflowing bins", category="Waste", lat=1.0, lon=2.0)
    make_report(citizen.id, title="Pothole near school", priority="Low")

    assert report_service.list_reports(db_session, category="all")["count"] == 2
    assert report_service.list_reports(db_session, category="")["count"] == 2
    assert report_service.list_reports(db_session, category="Unknown")["count"] == 0
    assert report_service.list_reports(db_session, status="pending")["count"] == 2
    assert report_service.list_reports(db_session, status="Repaired")["count"] == 0
    assert report_service.list_reports(db_session, priority="low")["count"] == 1
    assert report_service.list_reports(db_session, search="BINS")["count"] == 1
    assert report_service.list_reports(db_session, search="bus stop")["count"] == 2
    assert report_service.list_reports(db_session, with_coordinates=True)["count"] == 1


def test_listing_limit_is_capped(db_session, citizen, make_report):
    make_report(citizen.id)

    page = report_service.list_reports(db_session, offset=-5, limit=1000)

    assert page["offset"] == 0
    assert page["limite"] == report_service.MAX_PAGE_SIZE


def test_recent_reports(db_session, citizen, make_report):
    ids = [make_report(citizen.id, title=f"Report {i}") for i in range(5)]

    recent = report_service.get_recent_reports(db_session)

    assert [r.id for r in recent] == list(reversed(ids))[:3]
