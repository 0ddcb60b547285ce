# tests/test_tech_routes.py

import pytest

from app.services import tickets as ticket_service
from tests.conftest import auth_headers


@pytest.fixture
def ticket(session, customer, tech, service, availability):
    return ticket_service.book_ticket(session, customer.id, tech.id, service.id, "09:00", "Broken mouse", "Left click")


def test_tech_lists_assigned_tickets(client, tech, other_tech, ticket):
    r = client.get("/tech/tickets", headers=auth_headers(tech))
    assert r.status_code == 200
    assert [t["id"] for t in r.json()] == [ticket.id]

    r = client.get("/tech/tickets", headers=auth_headers(other_tech))
    assert r.json() == []


def test_tech_filters_by_status(client, tech, ticket):
    r = client.get("/tech/tickets?status=in_progress", headers=auth_headers(tech))
    assert r.json() == []

    r = client.get("/tech/tickets?status=open", headers=auth_headers(tech))
    assert len(r.json()) == 1


def test_status_flow_over_http(client, tech, ticket):
    headers = auth_headers(tech)

    r = client.patch(f"/tech/tickets/{ticket.id}/status", json={"status": "in_progress"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["status"] == "in_progress"

    r = client.patch(f"/tech/tickets/{ticket.id}/status", json={"status": "encerrado"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["status"] == "encerrado"

    r = client.patch(f"/tech/tickets/{ticket.id}/status", json={"status": "in_progress"}, headers=headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Ticket not found or closed"


def test_status_back_to_open_is_not_accepted(client, tech, ticket):
    r = client.patch(f"/tech/tickets/{ticket.id}/status", json={"status": "open"}, headers=auth_headers(tech))
    assert r.status_code == 422


def test_unassigned_tech_cannot_change_status(client, other_tech, ticket):
    r = client.patch(f"/tech/tickets/{ticket.id}/status", json={"status": "in_progress"}, headers=auth_headers(other_tech))
    assert r.status_code == 403


def test_tech_adds_service(client, session, tech, ticket):
    from app.models import Service

    extra = Service(name="Mouse replacement", price=25)
    session.add(extra)
    session.commit()
    session.refresh(extra)

    r = client.post(f"/tech/tickets/{ticket.id}/services", json={"service_id": extra.id}, headers=auth_headers(tech))
    assert r.status_code == 200
    assert [s["name"] for s in r.json()["services"]] == ["Network setup", "Mouse replacement"]
    assert r.json()["total"] == 145.0

    r = client.post(f"/tech/tickets/{ticket.id}/services", json={"service_id": extra.id}, headers=auth_headers(tech))
    assert r.status_code == 409


def test_tech_replaces_own_availability(client, tech, availability):
    headers = auth_headers(tech)

    r = client.put("/tech/availability", json={"available_hours": ["07:00", "07:30"]}, headers=headers)
    assert r.status_code == 200
    assert r.json() == {"tech_id": tech.id, "available_hours": ["07:00", "07:30"]}

    r = client.get("/tech/availability", headers=headers)
    assert r.json()["available_hours"] == ["07:00", "07:30"]

    r = client.put("/tech/availability", json={"available_hours": []}, headers=headers)
    assert r.status_code == 422
    r = client.put("/tech/availability", json={"available_hours": ["7:00"]}, headers=headers)
    assert r.status_code == 422
