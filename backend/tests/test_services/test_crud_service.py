"""
Tests for the generic CRUD service, exercised through the vet directory.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

import repositories.db_models as db_models
from helpers.pagination import make_page_params
from models.exceptions import (
    ConflictException,
    NotFoundException,
    UpstreamFailureException,
    ValidationException,
)
from repositories.query_builder import ResourceFilter
from services.file_store import IncomingFile
from services.vet_service import VetService

PNG = IncomingFile(
    content=b"\x89PNG\r\n\x1a\n" + b"\x00" * 32,
    filename="Front.PNG",
    content_type="image/png",
)


def vet_data(**overrides) -> dict:
    data = {
        "hospital": "Happy Paws Clinic",
        "address": "12 Main Street",
        "phone": "+15551234567",
        "services": ["Surgery"],
    }
    data.update(overrides)
    return data


def failing_commit():
    raise OperationalError("COMMIT", {}, Exception("disk I/O error"))


@pytest.fixture
def service(db_session) -> VetService:
    return VetService(db_session)


class TestCreate:
    def test_create_applies_defaults_and_stamps_creator(self, service, admin_user):
        vet = service.create(vet_data(), admin_user.id)

        assert vet.id is not None
        assert vet.is_active is True
        assert vet.emergency_service is False
        assert vet.rating == 0
        assert vet.created_by_id == admin_user.id
        assert vet.created_by.username == "adminuser"
        assert vet.updated_by_id is None

    def test_create_accepts_camel_case_keys(self, service, admin_user):
        vet = service.create(vet_data(emergencyService=True), admin_user.id)
        assert vet.emergency_service is True

    def test_create_normalizes_email(self, service, admin_user):
        vet = service.create(vet_data(email="  Desk@Clinic.Example.com "), admin_user.id)
        assert vet.email == "desk@clinic.example.com"

    def test_create_reports_every_invalid_field(self, service, admin_user):
        with pytest.raises(ValidationException) as exc_info:
            service.create(vet_data(phone="abc", rating=7, hospital=""), admin_user.id)

        fields = {error["field"] for error in exc_info.value.errors}
        assert {"phone", "rating", "hospital"} <= fields

    def test_create_requires_mandatory_fields(self, service, admin_user):
        with pytest.raises(ValidationException) as exc_info:
            service.create({"hospital": "Only a name"}, admin_user.id)
        fields = {error["field"] for error in exc_info.value.errors}
        assert {"address", "phone"} <= fields


class TestImages:
    def test_create_with_image_stores_descriptor(self, service, admin_user, upload_dir):
        vet = service.create(vet_data(), admin_user.id, image=PNG)

        assert vet.image["original_name"] == "Front.PNG"
        assert vet.image["filename"].endswith(".png")
        assert vet.image["mimetype"] == "image/png"
        assert vet.image["size"] == len(PNG.content)
        assert Path(vet.image["path"]).exists()
        assert Path(vet.image["path"]).parent == upload_dir / "vet"

    def test_invalid_document_removes_stored_image(self, service, admin_user, upload_dir):
        with pytest.raises(ValidationException):
            service.create(vet_data(phone="not a phone"), admin_user.id, image=PNG)

        assert list((upload_dir / "vet").iterdir()) == []

    def test_non_image_is_rejected(self, service, admin_user):
        text = IncomingFile(content=b"hello", filename="notes.txt", content_type="text/plain")
        with pytest.raises(ValidationException):
            service.create(vet_data(), admin_user.id, image=text)

    def test_oversized_image_is_rejected(self, service, admin_user):
        big = IncomingFile(
            content=b"\x00" * (5 * 1024 * 1024 + 1), filename="big.png", content_type="image/png"
        )
        with pytest.raises(ValidationException) as exc_info:
            service.create(vet_data(), admin_user.id, image=big)
        assert "5MB" in exc_info.value.message

    def test_update_replaces_image_and_removes_old_file(self, service, admin_user):
        vet = service.create(vet_data(), admin_user.id, image=PNG)
        old_path = Path(vet.image["path"])

        updated = service.update(vet.id, {}, admin_user.id, image=PNG)

        new_path = Path(updated.image["path"])
        assert new_path != old_path
        assert new_path.exists()
        assert not old_path.exists()

    def test_failed_update_keeps_old_image(self, service, admin_user):
        vet = service.create(vet_data(), admin_user.id, image=PNG)
        old_path = Path(vet.image["path"])

        with pytest.raises(ValidationException):
            service.update(vet.id, {"rating": 9}, admin_user.id, image=PNG)

        assert old_path.exists()
        assert sorted(p.name for p in old_path.parent.iterdir()) == [old_path.name]

    def test_delete_removes_image(self, service, admin_user):
        vet = service.create(vet_data(), admin_user.id, image=PNG)
        path = Path(vet.image["path"])

        service.delete(vet.id)

        assert not path.exists()
        with pytest.raises(NotFoundException):
            service.get_by_id(vet.id)

    def test_write_failure_is_upstream_failure(self, service, admin_user):
        with patch("services.file_store.open", side_effect=OSError("disk full"), create=True):
            with pytest.raises(UpstreamFailureException):
                service.create(vet_data(), admin_user.id, image=PNG)

    def test_failed_commit_removes_stored_image(
        self, service, admin_user, db_session, upload_dir, monkeypatch
    ):
        monkeypatch.setattr(db_session, "commit", failing_commit)

        with pytest.raises(UpstreamFailureException):
            service.create(vet_data(), admin_user.id, image=PNG)

        assert list((upload_dir / "vet").iterdir()) == []

    def test_failed_commit_on_replace_keeps_old_image(
        self, service, admin_user, db_session, monkeypatch
    ):
        vet = service.create(vet_data(), admin_user.id, image=PNG)
        old_path = Path(vet.image["path"])
        monkeypatch.setattr(db_session, "commit", failing_commit)

        with pytest.raises(UpstreamFailureException):
            service.update(vet.id, {}, admin_user.id, image=PNG)

        assert sorted(p.name for p in old_path.parent.iterdir()) == [old_path.name]


class TestUpdate:
    def test_patch_keeps_unsent_fields(self, service, admin_user, test_user):
        vet = service.create(vet_data(rating=3), admin_user.id)

        updated = service.update(vet.id, {"address": "99 New Road"}, test_user.id)

        assert updated.address == "99 New Road"
        assert updated.rating == 3
        assert updated.services == ["Surgery"]
        assert updated.created_by_id == admin_user.id
        assert updated.updated_by_id == test_user.id

    def test_patch_is_validated(self, service, admin_user):
        vet = service.create(vet_data(), admin_user.id)
        with pytest.raises(ValidationException):
            service.update(vet.id, {"website": "ftp://example.com"}, admin_user.id)

    def test_update_missing_entity(self, service, admin_user):
        with pytest.raises(NotFoundException) as exc_info:
            service.update(999, {"address": "Nowhere"}, admin_user.id)
        assert exc_info.value.message == "Vet entry not found"


class TestList:
    def test_limit_is_clamped(self, service, admin_user):
        for i in range(3):
            service.create(vet_data(hospital=f"Clinic {i}"), admin_user.id)

        items, pagination = service.list(None, make_page_params(page=1, limit=1000))

        assert pagination["limit"] == 100
        assert pagination["total"] == 3
        assert pagination["pages"] == 1
        assert len(items) == 3

    def test_pages(self, service, admin_user):
        for i in range(5):
            service.create(vet_data(hospital=f"Clinic {i}"), admin_user.id)

        items, pagination = service.list(None, make_page_params(page=3, limit=2))

        assert len(items) == 1
        assert pagination == {"page": 3, "limit": 2, "total": 5, "pages": 3}

    def test_default_order_is_newest_first(self, service, admin_user):
        first = service.create(vet_data(hospital="First"), admin_user.id)
        second = service.create(vet_data(hospital="Second"), admin_user.id)

        items, _ = service.list(None, make_page_params())
        assert [item.id for item in items] == [second.id, first.id]

    def test_sort_by_name(self, service, admin_user):
        for name in ("Beta Vets", "Alpha Vets", "Gamma Vets"):
            service.create(vet_data(hospital=name), admin_user.id)

        items, _ = service.list(None, make_page_params(sort_by="name", sort_order="asc"))
        assert [item.hospital for item in items] == ["Alpha Vets", "Beta Vets", "Gamma Vets"]

    def test_filter_by_active(self, service, admin_user):
        service.create(vet_data(hospital="Open"), admin_user.id)
        service.create(vet_data(hospital="Closed", is_active=False), admin_user.id)

        items, pagination = service.list(
            ResourceFilter(equals={"is_active": False}), make_page_params()
        )
        assert [item.hospital for item in items] == ["Closed"]
        assert pagination["total"] == 1

    def test_search_matches_any_word(self, service, admin_user):
        service.create(vet_data(hospital="Riverside Animal Hospital"), admin_user.id)
        service.create(vet_data(hospital="Hilltop Vets", address="5 Oak Lane"), admin_user.id)
        service.create(vet_data(hospital="Downtown Clinic"), admin_user.id)

        items, _ = service.search("riverside oak", make_page_params())
        assert sorted(item.hospital for item in items) == [
            "Hilltop Vets",
            "Riverside Animal Hospital",
        ]

    def test_search_treats_wildcards_literally(self, service, admin_user):
        service.create(vet_data(hospital="100% Pets"), admin_user.id)
        service.create(vet_data(hospital="Pets Unlimited"), admin_user.id)

        items, _ = service.search("%", make_page_params())
        assert [item.hospital for item in items] == ["100% Pets"]

    def test_search_leaves_caller_filter_untouched(self, service, admin_user):
        service.create(vet_data(hospital="Riverside Animal Hospital"), admin_user.id)
        filters = ResourceFilter(equals={"is_active": True})

        items, _ = service.search("riverside", make_page_params(), filters)

        assert len(items) == 1
        assert filters.search is None


class TestDelete:
    def test_hard_delete(self, service, admin_user, db_session):
        vet = service.create(vet_data(), admin_user.id)
        service.delete(vet.id)
        assert db_session.get(db_models.VetDirectory, vet.id) is None

    def test_delete_missing(self, service):
        with pytest.raises(NotFoundException):
            service.delete(12345)


def test_unique_violation_becomes_conflict(db_session, admin_user):
    from services.user_service import UserService

    users = UserService(db_session)
    with pytest.raises(ConflictException) as exc_info:
        users.create(
            {"username": "adminuser", "email": "fresh@example.com", "password": "Secret1x"},
            admin_user.id,
        )
    assert exc_info.value.field == "username"
    assert exc_info.value.message == "username already exists"
