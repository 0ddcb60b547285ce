# tests/test_catalog.py

import pytest

from app.errors import ConflictError, NotFoundError, ValidationError
from app.services import catalog as catalog_service
from app.services import tickets as ticket_service


def test_create_and_list_services(session):
    catalog_service.create_service(session, "Virus removal", 80)
    retired = catalog_service.create_service(session, "Backup restore", 60)
    catalog_service.update_service(session, retired.id, {"active": False})

    assert [s.name for s in catalog_service.list_services(session)] == ["Backup restore", "Virus removal"]
    assert [s.name for s in catalog_service.list_services(session, active_only=True)] == ["Virus removal"]


def test_duplicate_name_conflicts(session, service):
    with pytest.raises(ConflictError):
        catalog_service.create_service(session, "Network setup", 10)


def test_rename_to_taken_name_conflicts(session, service):
    other = catalog_service.create_service(session, "Virus removal", 80)
    with pytest.raises(ConflictError):
        catalog_service.update_service(session, other.id, {"name": "Network setup"})


def test_update_requires_changes(session, service):
    with pytest.raises(ValidationError):
        catalog_service.update_service(session, service.id, {})


def test_delete_unused_service(session, service):
    service_id = service.id
    catalog_service.delete_service(session, service_id)

    with pytest.raises(NotFoundError):
        catalog_service.get_service(session, service_id)


def test_delete_service_in_use_conflicts(session, customer, tech, service, availability):
    ticket_service.book_ticket(session, customer.id, tech.id, service.id, "09:00", "t", "d")

    with pytest.raises(ConflictError):
        catalog_service.delete_service(session, service.id)


def test_duplicate_name_lost_race_is_a_conflict(session, service, monkeypatch):
    monkeypatch.setattr(catalog_service, "_name_taken", lambda *args, **kwargs: False)

    with pytest.raises(ConflictError):
        catalog_service.create_service(session, "Network setup", 10)

    monkeypatch.undo()
    assert len(catalog_service.list_services(session)) == 1


def test_update_with_only_nulls_is_rejected(session, service):
    with pytest.raises(ValidationError):
        catalog_service.update_service(session, service.id, {"price": None})
