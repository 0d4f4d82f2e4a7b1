"""Tests for the application factory and health probes."""

from __future__ import annotations

import httpx
import pytest

from civic_search.config import Settings
from civic_search.database import create_db_engine, init_db, make_session_factory
from civic_search.main import create_app


def _client(app):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
class TestHealthProbes:
    async def test_livez(self):
        async with _client(create_app(Settings(database_url="sqlite://"))) as c:
            resp = await c.get("/livez")
        assert resp.json() == {"status": "ok"}

    async def test_readyz_without_engine_is_unhealthy(self):
        async with _client(create_app(Settings(database_url="sqlite://"))) as c:
            resp = await c.get("/readyz")
        assert resp.status_code == 503
        assert resp.json()["status"] == "unhealthy"

    async def test_readyz_with_database(self):
        app = create_app(Settings(database_url="sqlite://"))
        engine = create_db_engine("sqlite://")
        init_db(engine)
        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)
        try:
            async with _client(app) as c:
                resp = await c.get("/readyz")
        finally:
            engine.dispose()
        assert resp.status_code == 200
        assert resp.json()["checks"] == {"database": "ok"}


def test_search_routes_are_mounted():
    paths = {route.path for route in create_app(Settings(database_url="sqlite://")).routes}
    assert {"/api/v1/search", "/api/v1/search/facets", "/api/v1/issues/{issue_id}"} <= paths


def test_settings_cors_list():
    settings = Settings(cors_origins="http://a.test, http://b.test,")
    assert settings.cors_origins_list == ["http://a.test", "http://b.test"]
