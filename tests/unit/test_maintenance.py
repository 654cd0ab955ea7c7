"""
Unit tests for the maintenance mode middleware.
"""

from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from foodbuddy.middleware.maintenance import MaintenanceModeMiddleware


def _app(enabled):
    app = FastAPI()
    app.add_middleware(MaintenanceModeMiddleware, enabled=enabled)

    @app.get("/ping")
    async def ping():
        return {"pong": True}

    return app


class TestMaintenanceModeMiddleware:

    def test_every_route_gets_503_page(self):
        client = TestClient(_app(enabled=True))

        for path in ("/ping", "/api/v1/analysis/analyze", "/"):
            response = client.get(path)
            assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
            assert response.headers["content-type"].startswith("text/html")
            assert "maintenance" in response.text

    def test_passes_through_when_disabled(self):
        response = TestClient(_app(enabled=False)).get("/ping")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"pong": True}
