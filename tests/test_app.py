# tests for the health check and app configuration
# basic app-level tests

import pytest


class TestHealthCheck:
    """app health and config"""

    async def test_health_check(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["service"] == "journaling-api"

    async def test_openapi_schema(self, client):
        resp = await client.get("/openapi.json")
        assert resp.status_code == 200
        schema = resp.json()
        assert schema["info"]["title"] == "Journaling API"

    async def test_all_resources_registered(self, client):
        resp = await client.get("/openapi.json")
        paths = resp.json()["paths"]
        for path in (
            "/journal/entries", "/journal/analyze", "/transcribe", "/check-ins", "/people", "/finance",
            "/tasks", "/goals", "/wheel-of-life", "/soul-matrix", "/insights", "/nudges", "/recaps",
            "/analytics/correlations", "/analytics/personality-evolution", "/analysis", "/recaps/cards",
        ):
            assert path in paths

    async def test_docs_available(self, client):
        resp = await client.get("/docs")
        assert resp.status_code == 200


class TestIndexes:
    """index setup run on connect"""

    async def test_ensure_indexes(self):
        from unittest.mock import AsyncMock, MagicMock
        from journaling_app.services.db import Database, USER_TIMELINES

        collections = {}

        def collection(name):
            return collections.setdefault(name, MagicMock(create_index=AsyncMock()))

        database = Database()
        database.db = MagicMock()
        database.db.__getitem__.side_effect = collection
        await database.ensure_indexes()

        collections["users"].create_index.assert_awaited_once_with("email", unique=True)
        for name in USER_TIMELINES:
            assert collections[name].create_index.await_count == 2
        assert len(collections) == 12
