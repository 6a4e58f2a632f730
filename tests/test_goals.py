# tests for goals router — filters and crud

import pytest

from tests.conftest import USER_ID, ago


async def _add_goal(mock_db, goal_id, life_area, goal_status):
    await mock_db.goals.insert_one({
        "id": goal_id, "user_id": USER_ID, "title": goal_id, "life_area_id": life_area,
        "status": goal_status, "priority": "low", "progress": 0, "created_at": ago(days=1),
    })


class TestListGoals:
    """GET /goals"""

    async def test_list(self, auth_client):
        resp = await auth_client.get("/goals")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 1
        assert data[0]["lifeAreaId"] == "health"
        assert data[0]["progress"] == 40

    async def test_filters(self, auth_client, mock_db):
        await _add_goal(mock_db, "goal00000002", "career", "completed")
        await _add_goal(mock_db, "goal00000003", "health", "pending")

        resp = await auth_client.get("/goals?lifeArea=health")
        assert {g["id"] for g in resp.json()} == {"goal00000001", "goal00000003"}

        resp = await auth_client.get("/goals?status=completed")
        assert [g["id"] for g in resp.json()] == ["goal00000002"]

        resp = await auth_client.get("/goals?status=all&lifeArea=all")
        assert len(resp.json()) == 3

    async def test_newest_first(self, auth_client, mock_db):
        await _add_goal(mock_db, "goal00000002", "career", "pending")
        resp = await auth_client.get("/goals")
        assert [g["id"] for g in resp.json()] == ["goal00000002", "goal00000001"]


class TestCreateGoal:
    """POST /goals"""

    async def test_create(self, auth_client, mock_db):
        resp = await auth_client.post("/goals", json={
            "title": "Read 12 books",
            "targetDate": "2025-12-31",
            "lifeAreaId": "personal-growth",
            "priority": "medium",
        })
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "pending"
        assert data["progress"] == 0
        assert data["userId"] == USER_ID
        assert mock_db.goals.inserted[0]["life_area_id"] == "personal-growth"

    async def test_create_missing_area(self, auth_client):
        resp = await auth_client.post("/goals", json={"title": "x", "targetDate": "2025-12-31"})
        assert resp.status_code == 422


class TestUpdateGoal:
    """PUT / DELETE /goals/{id}"""

    async def test_update_progress(self, auth_client, mock_db):
        resp = await auth_client.put("/goals/goal00000001", json={"progress": 80, "status": "in-progress"})
        assert resp.status_code == 200
        assert resp.json()["progress"] == 80
        stored = await mock_db.goals.find_one({"id": "goal00000001"})
        assert stored["progress"] == 80

    async def test_progress_out_of_range(self, auth_client):
        resp = await auth_client.put("/goals/goal00000001", json={"progress": 120})
        assert resp.status_code == 422

    async def test_null_title_rejected(self, auth_client, mock_db):
        resp = await auth_client.put("/goals/goal00000001", json={"title": None})
        assert resp.status_code == 422
        stored = await mock_db.goals.find_one({"id": "goal00000001"})
        assert stored["title"] == "Run a 10k"
        assert (await auth_client.get("/goals")).status_code == 200

    async def test_null_area_or_status_rejected(self, auth_client):
        for body in ({"lifeAreaId": None}, {"targetDate": None}, {"status": None}, {"priority": None}):
            resp = await auth_client.put("/goals/goal00000001", json=body)
            assert resp.status_code == 422, body

    async def test_update_missing(self, auth_client):
        resp = await auth_client.put("/goals/none", json={"progress": 10})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Goal not found"

    async def test_delete(self, auth_client, mock_db):
        resp = await auth_client.delete("/goals/goal00000001")
        assert resp.status_code == 204
        assert await mock_db.goals.count_documents({"user_id": USER_ID}) == 0
