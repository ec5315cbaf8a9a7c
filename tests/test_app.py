"""
System routes and the error envelope for failures outside validation/auth.
"""
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from karibu.core.exceptions import StorageUnavailable, _field_from_loc
from karibu.dependencies.auth import get_current_user
from karibu.main import create_app


@pytest.mark.unit
class TestSystemRoutes:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "OK", "message": "Server is running"}

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "Online"

    def test_unknown_route(self, client):
        response = client.get("/api/inventory")
        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    def test_wrong_method(self, client):
        response = client.delete("/api/procurement")
        assert response.status_code == 405
        assert "error" in response.json()


@pytest.mark.unit
class TestServerErrors:

    @pytest.fixture
    def failing_store(self):
        store = MagicMock()
        store.find_all = AsyncMock(side_effect=StorageUnavailable())
        store.find_by_id = AsyncMock(side_effect=RuntimeError("driver exploded"))
        return store

    @pytest.fixture
    def failing_client(self, failing_store, manager):
        app = create_app(store=failing_store)
        app.dependency_overrides[get_current_user] = lambda: manager
        return TestClient(app, raise_server_exceptions=False)

    def test_storage_failure_is_generic_and_logged(self, failing_client, caplog):
        caplog.set_level(logging.ERROR, logger="karibu")

        response = failing_client.get("/api/procurement")

        assert response.status_code == 500
        assert response.json() == {"error": "Server error"}
        assert any("storage unavailable" in r.getMessage() for r in caplog.records)

    def test_unexpected_failure_hides_details(self, failing_client, caplog):
        caplog.set_level(logging.ERROR, logger="karibu")

        response = failing_client.get("/api/procurement/abc")

        assert response.status_code == 500
        assert response.json() == {"error": "Something went wrong!"}
        assert "driver exploded" not in response.text
        assert any(r.exc_info for r in caplog.records)


@pytest.mark.unit
@pytest.mark.parametrize("loc, field", [
    (("body", 14), "body"),
    (("body", "tonnage"), "tonnage"),
    (("query", "type"), "type"),
    ((), "body"),
])
def test_field_from_loc(loc, field):
    assert _field_from_loc(loc) == field
