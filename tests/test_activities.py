"""Tests for activity endpoints."""

from fastapi.testclient import TestClient

from conftest import make_activity


def test_create_activity(client: TestClient):
    response = client.post("/activities", json=make_activity())
    assert response.status_code == 200
    data = response.json()
    assert data["id"]
    assert data["date"] == "2024-03-05"
    assert data["category"] == "academics"
    assert data["duration_hours"] == 2
    assert data["file_ids"] == []
    assert "created_at" in data and "updated_at" in data


def test_create_activity_rejects_unknown_category(client: TestClient):
    response = client.post("/activities", json=make_activity(category="sports"))
    assert response.status_code == 422


def test_create_activity_rejects_negative_duration(client: TestClient):
    response = client.post("/activities", json=make_activity(duration_hours=-1))
    assert response.status_code == 422


def test_list_activities_by_month(client: TestClient):
    client.post("/activities", json=make_activity(date="2024-03-20", name="Late"))
    client.post("/activities", json=make_activity(date="2024-03-01", name="Early"))
    client.post("/activities", json=make_activity(date="2024-04-01", name="Next month"))

    response = client.get("/activities", params={"month": 3, "year": 2024})
    assert response.status_code == 200
    names = [a["name"] for a in response.json()]
    assert names == ["Early", "Late"]


def test_list_activities_requires_period(client: TestClient):
    assert client.get("/activities").status_code == 422


def test_list_activities_invalid_month(client: TestClient):
    response = client.get("/activities", params={"month": 13, "year": 2024})
    assert response.status_code == 422
    assert "Invalid period" in response.json()["detail"]


def test_list_activities_search(client: TestClient):
    client.post("/activities", json=make_activity(name="Budget review", category="finance"))
    client.post("/activities", json=make_activity(name="Orientation day", category="social"))

    response = client.get("/activities", params={"month": 3, "year": 2024, "q": "BUDGET"})
    assert [a["name"] for a in response.json()] == ["Budget review"]

    response = client.get("/activities", params={"month": 3, "year": 2024, "q": "social"})
    assert [a["name"] for a in response.json()] == ["Orientation day"]


def test_update_activity(client: TestClient):
    created = client.post("/activities", json=make_activity()).json()

    response = client.put(
        f"/activities/{created['id']}",
        json=make_activity(name="Renamed", category="documentation", file_ids=["abc"]),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == created["id"]
    assert data["name"] == "Renamed"
    assert data["category"] == "documentation"
    assert data["file_ids"] == ["abc"]


def test_update_activity_not_found(client: TestClient):
    response = client.put("/activities/65f000000000000000000000", json=make_activity())
    assert response.status_code == 404


def test_update_activity_malformed_id(client: TestClient):
    response = client.put("/activities/not-an-id", json=make_activity())
    assert response.status_code == 404


def test_delete_activity(client: TestClient):
    created = client.post("/activities", json=make_activity()).json()

    response = client.delete(f"/activities/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    listed = client.get("/activities", params={"month": 3, "year": 2024}).json()
    assert listed == []

    again = client.delete(f"/activities/{created['id']}")
    assert again.json() == {"success": False}
