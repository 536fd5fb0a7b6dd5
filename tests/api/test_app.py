"""Tests for the application factory."""

from fastapi.testclient import TestClient

from api.app import API_PREFIX, create_app


class TestCreateApp:

    def test_health_route(self, client):
        response = client.get("/testing")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] is True
        assert body["message"] == "Api working well!"
        assert "X-Request-ID" in response.headers

    def test_unknown_route(self, client):
        response = client.get(f"{API_PREFIX}/nope")
        assert response.status_code == 404
        assert response.json()["message"] == f"Can't find {API_PREFIX}/nope on this server!"

    def test_routers_mounted(self, app):
        paths = {route.path for route in app.routes}
        assert f"{API_PREFIX}/user/signin" in paths
        assert f"{API_PREFIX}/category/get-all" in paths
        assert f"{API_PREFIX}/course/get-all" in paths
        assert f"{API_PREFIX}/order/create" in paths
        assert f"{API_PREFIX}/review/get-review/{{review_id}}" in paths

    def test_cors_allows_configured_origin(self, client):
        response = client.get("/testing", headers={"Origin": "http://localhost:5173"})
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_shutdown_closes_clients(self, settings, services):
        with TestClient(create_app(settings, services)) as client:
            client.get("/testing")

        assert services.redis.closed is True
        assert services.mongo.closed is True
