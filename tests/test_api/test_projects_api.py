"""
Tests for Projects and Team members API endpoints
"""
from decimal import Decimal

import pytest


@pytest.fixture
def client_id(client):
    return client.post("/api/v1/clients", json={"name": "Acme", "company": "Acme Ltd"}).json()["id"]


@pytest.fixture
def project_id(client, client_id):
    response = client.post("/api/v1/projects", json={"name": "Website", "client_id": client_id})
    assert response.status_code == 201
    return response.json()["id"]


def test_create_project(client, client_id):
    response = client.post("/api/v1/projects", json={
        "name": "Website",
        "client_id": client_id,
        "hourly_rate": "95",
        "start_date": "2024-01-01",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["client_name"] == "Acme"
    assert data["client_company"] == "Acme Ltd"
    assert data["status"] == "planning"
    assert Decimal(data["hourly_rate"]) == Decimal("95")
    assert data["members"] == []


def test_create_without_client_is_400(client):
    response = client.post("/api/v1/projects", json={"name": "Website"})
    assert response.status_code == 400
    assert "client_id" in response.json()["error"]


def test_personal_project(client):
    response = client.post("/api/v1/projects", json={"name": "Side", "personal_project": True})
    assert response.status_code == 201
    assert response.json()["client_id"] is None


def test_list_filters(client, client_id, project_id):
    client.post("/api/v1/projects", json={"name": "Side", "personal_project": True, "status": "active"})

    assert len(client.get("/api/v1/projects").json()) == 2
    by_client = client.get("/api/v1/projects", params={"clientId": client_id}).json()
    assert [p["id"] for p in by_client] == [project_id]
    active = client.get("/api/v1/projects", params={"status": "active"}).json()
    assert [p["name"] for p in active] == ["Side"]


def test_update_and_delete_project(client, project_id):
    response = client.patch(f"/api/v1/projects/{project_id}", json={"status": "on_hold"})
    assert response.status_code == 200
    assert response.json()["status"] == "on_hold"

    assert client.delete(f"/api/v1/projects/{project_id}").json() == {"success": True}
    assert client.get(f"/api/v1/projects/{project_id}").status_code == 404


def test_member_lifecycle(client, project_id):
    roster = client.post("/api/v1/team-members", json={"name": "Sam", "role": "Designer", "hourly_rate": "80"})
    assert roster.status_code == 201
    team_member_id = roster.json()["id"]

    added = client.post(f"/api/v1/projects/{project_id}/members", json={"team_member_id": team_member_id})
    assert added.status_code == 201
    member = added.json()
    assert member["name"] == "Sam"
    assert member["role"] == "Designer"
    assert member["payment_status"] == "pending"

    updated = client.patch(
        f"/api/v1/projects/{project_id}/members/{member['id']}",
        json={"payment_status": "paid"},
    )
    assert updated.json()["payment_status"] == "paid"

    listed = client.get("/api/v1/team-members").json()
    assignment = listed[0]["project_assignments"][0]
    assert assignment["project_name"] == "Website"
    assert assignment["client_name"] == "Acme"

    removed = client.delete(f"/api/v1/projects/{project_id}/members/{member['id']}")
    assert removed.json() == {"success": True}
    assert client.get(f"/api/v1/projects/{project_id}/members").json() == []


def test_member_of_unknown_project_is_404(client):
    response = client.post("/api/v1/projects/999/members", json={"name": "Kim"})
    assert response.status_code == 404
    assert response.json() == {"error": "Project #999 not found"}


def test_team_member_crud(client):
    created = client.post("/api/v1/team-members", json={"name": "Kim"}).json()
    response = client.put(f"/api/v1/team-members/{created['id']}", json={"is_active": False})
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    assert client.delete(f"/api/v1/team-members/{created['id']}").json() == {"success": True}
    assert client.get(f"/api/v1/team-members/{created['id']}").status_code == 404


def test_team_member_name_required(client):
    response = client.post("/api/v1/team-members", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "name is required"}
