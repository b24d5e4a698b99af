"""Integration tests for app wiring: health, prefixes, lookups, auth gate and errors."""

from datetime import timedelta

import pytest

from apps.api.config import Settings
from apps.api.main import create_app

pytestmark = pytest.mark.integration


class TestHealth:
    def test_healthz(self, client):
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"

    def test_status_reports_backend(self, client):
        data = client.get("/api/isp/status").get_json()

        assert data["status"] == "operational"
        assert data["backend"] == "mock"
        assert data["schemaSource"] == "memory"


class TestPrefixes:
    def test_legacy_prefix_serves_same_routes(self, client):
        assert client.get("/app-root/api/isp/platforms").get_json()["total"] == 2
        assert client.get("/app-root/api/isp/dictionary/struct/Z10").status_code == 200

    def test_legacy_prefix_can_be_disabled(self):
        app = create_app("testing", Settings(legacy_api_prefix=""))
        client = app.test_client()

        assert client.get("/api/isp/platforms").status_code == 200
        assert client.get("/app-root/api/isp/platforms").status_code == 404

    def test_unknown_route_body(self, client):
        response = client.get("/api/isp/nothing-here")

        assert response.status_code == 404
        assert response.get_json()["code"] == "NOT_FOUND"

    def test_method_not_allowed(self, client):
        response = client.patch("/api/isp/platforms")

        assert response.status_code == 405
        assert response.get_json()["code"] == "METHOD_NOT_ALLOWED"


class TestLookups:
    def test_customer_search(self, client):
        response = client.get("/api/isp/lookup/SA1", query_string={"filter": "mock 3"})

        assert response.status_code == 200
        assert response.get_json() == [{"a1_cod": "000003", "a1_loja": "02", "a1_nome": "Cliente Mock 3"}]

    def test_order_by_id(self, client):
        assert client.get("/api/isp/lookup/Z02/INT001").get_json() == [{"z02_cod": "INT001", "z02_idped": "PED-1001"}]

    def test_unsupported_table(self, client):
        assert client.get("/api/isp/lookup/Z10").get_json() == []


class TestAuthGate:
    """Routes require a bearer JWT when AUTH_REQUIRED is on."""

    def test_public_by_default(self, client):
        assert client.get("/api/isp/platforms").status_code == 200

    def test_missing_token(self, auth_app):
        response = auth_app.test_client().get("/api/isp/platforms")

        assert response.status_code == 401
        assert response.get_json()["code"] == "UNAUTHORIZED"

    def test_invalid_token(self, auth_app):
        response = auth_app.test_client().get(
            "/api/isp/platforms", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 403
        assert response.get_json()["code"] == "INVALID_TOKEN"

    def test_expired_token(self, auth_app, make_token):
        token = make_token({"sub": "user-1"}, expires_in=timedelta(minutes=-5))
        response = auth_app.test_client().get(
            "/api/isp/platforms", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.get_json()["code"] == "TOKEN_EXPIRED"

    def test_valid_token(self, auth_app, make_token):
        token = make_token({"sub": "user-1"})
        response = auth_app.test_client().get(
            "/api/isp/dictionary/struct/Z10", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200

    def test_health_stays_public(self, auth_app):
        assert auth_app.test_client().get("/healthz").status_code == 200
