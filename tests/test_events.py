from conftest import signup
from extensions import db
from models import Event


def test_list_events_empty(client):
    r = client.get("/api/events")
    assert r.status_code == 200
    assert r.get_json() == []


def test_create_event_requires_login(client):
    r = client.post("/api/events", json={"title": "T"})
    assert r.status_code == 401
    assert r.get_json() == {"error": "Not logged in"}


def test_create_event_requires_admin(client):
    signup(client)
    r = client.post("/api/events", json={"title": "T"})
    assert r.status_code == 403
    assert r.get_json() == {"error": "Not authorized"}


def test_admin_creates_event(admin_client, client):
    r = admin_client.post(
        "/api/events",
        json={"title": "T", "date": "2025-01-01", "description": "D"},
    )
    assert r.status_code == 200
    event = r.get_json()
    assert isinstance(event["id"], int)
    assert event["title"] == "T"
    assert event["date"] == "2025-01-01"
    assert event["description"] == "D"

    # listing is public
    assert client.get("/api/events").get_json() == [event]


def test_create_event_drops_unknown_fields(admin_client):
    r = admin_client.post("/api/events", json={"title": "T", "role": "admin", "id": 999})
    assert r.status_code == 200
    event = r.get_json()
    assert set(event) == {"id", "title", "date", "description"}
    assert event["id"] != 999
    assert event["date"] is None


def test_list_events_is_capped(app, client):
    with app.app_context():
        db.session.add_all([Event(title=f"E{i}") for i in range(55)])
        db.session.commit()

    events = client.get("/api/events").get_json()
    assert len(events) == 50
    assert events[0]["title"] == "E0"


def test_cors_allows_configured_origin_with_credentials(client):
    r = client.get("/api/events", headers={"Origin": "http://frontend.test"})
    assert r.headers["Access-Control-Allow-Origin"] == "http://frontend.test"
    assert r.headers["Access-Control-Allow-Credentials"] == "true"


def test_cors_ignores_other_origins(client):
    r = client.get("/api/events", headers={"Origin": "http://evil.test"})
    assert "Access-Control-Allow-Origin" not in r.headers
