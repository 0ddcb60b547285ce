# tests/test_client_routes.py

from tests.conftest import auth_headers, make_user


def ticket_payload(tech, service, hour="09:00"):
    return {
        "tech_id": tech.id,
        "service_id": service.id,
        "selected_hour": hour,
        "title": "Wifi keeps dropping",
        "description": "Every afternoon around three",
    }


def test_book_ticket_scenario(client, session, customer, tech, service, availability):
    r = client.post("/client/tickets", json=ticket_payload(tech, service), headers=auth_headers(customer))
    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "open"
    assert body["selected_hour"] == "09:00"
    assert body["client"] == "Carla Client"
    assert body["tech"] == "Tess Tech"
    assert [s["id"] for s in body["services"]] == [service.id]
    assert body["total"] == 120.0

    second = make_user(session, "client", "late@example.com")
    r2 = client.post("/client/tickets", json=ticket_payload(tech, service), headers=auth_headers(second))
    assert r2.status_code == 409
    assert r2.json()["detail"] == "Slot already taken"

    r3 = client.get("/client/tickets", headers=auth_headers(second))
    assert r3.json() == []


def test_booking_errors_map_to_status_codes(client, session, customer, tech, service, availability):
    headers = auth_headers(customer)

    r = client.post("/client/tickets", json=ticket_payload(tech, service, hour="25:00"), headers=headers)
    assert r.status_code == 422

    r = client.post("/client/tickets", json=ticket_payload(tech, service, hour="11:00"), headers=headers)
    assert r.status_code == 422
    assert r.json()["detail"] == "Hour unavailable for this tech"

    payload = ticket_payload(tech, service)
    payload["service_id"] = 999
    r = client.post("/client/tickets", json=payload, headers=headers)
    assert r.status_code == 404

    payload = ticket_payload(tech, service)
    payload["tech_id"] = 999
    r = client.post("/client/tickets", json=payload, headers=headers)
    assert r.status_code == 404

    payload = ticket_payload(tech, service)
    payload["title"] = ""
    r = client.post("/client/tickets", json=payload, headers=headers)
    assert r.status_code == 422


def test_client_sees_only_own_tickets(client, session, customer, other_customer, tech, service, availability):
    r = client.post("/client/tickets", json=ticket_payload(tech, service), headers=auth_headers(customer))
    ticket_id = r.json()["id"]

    mine = client.get("/client/tickets", headers=auth_headers(customer)).json()
    assert [t["id"] for t in mine] == [ticket_id]

    assert client.get(f"/client/tickets/{ticket_id}", headers=auth_headers(customer)).status_code == 200
    assert client.get(f"/client/tickets/{ticket_id}", headers=auth_headers(other_customer)).status_code == 404


def test_browse_techs_slots_and_services(client, customer, tech, service, availability):
    headers = auth_headers(customer)

    techs = client.get("/client/techs", headers=headers).json()
    assert [t["id"] for t in techs] == [tech.id]
    assert techs[0]["available_hours"] == ["09:00", "09:30", "14:00", "14:30"]

    client.post("/client/tickets", json=ticket_payload(tech, service, hour="14:00"), headers=headers)
    slots = client.get(f"/client/techs/{tech.id}/slots", headers=headers).json()
    assert slots == {"tech_id": tech.id, "open_slots": ["09:00", "09:30", "14:30"]}

    services = client.get("/client/services", headers=headers).json()
    assert [s["name"] for s in services] == ["Network setup"]


def test_register_login_and_book_end_to_end(client, tech, service, availability):
    r = client.post("/clients", json={"name": "Fresh Client", "email": "fresh@example.com", "password": "secret123"})
    assert r.status_code == 201

    r = client.post("/auth/login", data={"username": "fresh@example.com", "password": "secret123"})
    headers = {"Authorization": f"Bearer {r.json()['access_token']}"}

    r = client.post("/client/tickets", json=ticket_payload(tech, service, hour="09:30"), headers=headers)
    assert r.status_code == 201
    assert r.json()["client"] == "Fresh Client"
    assert r.json()["created_at"] is not None


def test_blank_profile_name_is_rejected(client, customer):
    r = client.patch("/client/profile", json={"name": "    "}, headers=auth_headers(customer))
    assert r.status_code == 422

    r = client.get("/client/profile", headers=auth_headers(customer))
    assert r.json()["name"] == "Carla Client"


def test_profile_name_is_trimmed(client, customer):
    r = client.patch("/client/profile", json={"name": "  Carla B.  "}, headers=auth_headers(customer))
    assert r.status_code == 200
    assert r.json()["name"] == "Carla B."
