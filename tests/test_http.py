from datetime import datetime
from fastapi.testclient import TestClient
from app import app
from coordinator import coordinator

client = TestClient(app)


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["timestamp"].endswith("Z")
    datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))


def test_unknown_room_has_no_users():
    response = client.get("/rooms/nowhere/users")
    assert response.status_code == 200
    assert response.json() == {"users": []}


def test_room_users_reflect_membership():
    coordinator.join("A", "r1", "Alice")
    coordinator.join("B", "r1", "Bob")
    coordinator.join("C", "r2", "Carol")

    users = client.get("/rooms/r1/users").json()["users"]
    assert sorted(users, key=lambda user: user["id"]) == [
        {"id": "A", "name": "Alice"},
        {"id": "B", "name": "Bob"},
    ]

    coordinator.disconnect("A")
    coordinator.disconnect("B")
    assert client.get("/rooms/r1/users").json() == {"users": []}


def test_cors_headers_for_browser_origins():
    response = client.get("/health", headers={"Origin": "https://example.com"})
    assert response.headers.get("access-control-allow-origin") in ("*", "https://example.com")
