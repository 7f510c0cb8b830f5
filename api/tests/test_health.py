from fastapi.testclient import TestClient

from dashboard.core.db import get_database
from dashboard.main import app


def test_healthz() -> None:
    client = TestClient(app)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_healthcheck_does_not_touch_storage() -> None:
    get_database.cache_clear()
    client = TestClient(app)
    response = client.get("/v1/healthcheck")
    assert response.status_code == 200
    assert response.json()["status"] == "available"
    assert get_database()._pool is None
