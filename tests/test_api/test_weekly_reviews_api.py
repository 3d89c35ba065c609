"""
Tests for Weekly reviews API endpoints
"""


def test_get_before_generation_is_null(client):
    response = client.get("/api/v1/weekly-reviews", params={"weekStart": "2024-01-07"})
    assert response.status_code == 200
    assert response.json() is None


def test_generate(client):
    client.post("/api/v1/tasks", json={"title": "done", "date": "2024-01-08", "status": "done"})
    client.post("/api/v1/daily-logs", json={"date": "2024-01-08", "water_glasses": 4, "exercised": True})
    client.post("/api/v1/daily-logs", json={"date": "2024-01-09", "water_glasses": 6})

    response = client.post("/api/v1/weekly-reviews?weekStart=2024-01-07")
    assert response.status_code == 201
    data = response.json()
    assert data["week_start"] == "2024-01-07"
    assert data["week_end"] == "2024-01-13"
    assert data["tasks_completed"] == 1
    assert data["tasks_rolled_over"] == 0
    assert data["average_water"] == 5.0
    assert data["exercise_days"] == 1

    stored = client.get("/api/v1/weekly-reviews", params={"weekStart": "2024-01-07"}).json()
    assert stored["id"] == data["id"]


def test_week_start_required(client):
    response = client.post("/api/v1/weekly-reviews")
    assert response.status_code == 400
    assert response.json() == {"error": "weekStart is required"}
