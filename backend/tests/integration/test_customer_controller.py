"""
Integration tests for the customer and health endpoints using Flask test client.
"""

import uuid
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError


@pytest.mark.integration
@pytest.mark.controllers
@pytest.mark.customer
class TestCustomerEndpoints:
    def test_create_and_get(self, client):
        response = client.post(
            "/api/customers", json={"name": "Grace Hopper", "email": "Grace@Example.com"}
        )

        assert response.status_code == 201
        customer_id = response.get_json()["data"]["id"]

        fetched = client.get(f"/api/customers/{customer_id}")
        assert fetched.status_code == 200
        assert fetched.get_json()["data"] == {
            "id": customer_id,
            "name": "Grace Hopper",
            "email": "grace@example.com",
        }

    def test_duplicate_email(self, client):
        client.post("/api/customers", json={"name": "Ada", "email": "ada@example.com"})

        response = client.post(
            "/api/customers", json={"name": "Ada Two", "email": "ADA@example.com"}
        )

        assert response.status_code == 400
        assert (
            response.get_json()["message"]
            == "Customer with email 'ada@example.com' already exists."
        )

    def test_create_requires_fields(self, client):
        response = client.post("/api/customers", json={"name": ""})

        assert response.status_code == 400
        assert response.get_json()["success"] is False

    def test_create_rejects_non_object_body(self, client):
        response = client.post("/api/customers", json=["x"])

        assert response.status_code == 400
        assert response.get_json()["error"] == "validation"
        assert response.get_json()["message"] == "Request body must be a JSON object"

    def test_search(self, client):
        client.post("/api/customers", json={"name": "Zed", "email": "zed@example.com"})
        client.post("/api/customers", json={"name": "Amy", "email": "amy@zed.org"})
        client.post("/api/customers", json={"name": "Bob", "email": "bob@example.com"})

        response = client.get("/api/customers", query_string={"search": "ZED"})

        assert response.status_code == 200
        assert [c["name"] for c in response.get_json()["data"]] == ["Amy", "Zed"]

        everyone = client.get("/api/customers").get_json()["data"]
        assert [c["name"] for c in everyone] == ["Amy", "Bob", "Zed"]

    def test_unknown_customer(self, client):
        assert client.get(f"/api/customers/{uuid.uuid4()}").status_code == 404
        assert client.get(f"/api/customers/{uuid.uuid4()}/appointments").status_code == 404

    def test_customer_appointments(self, client):
        customer_id = client.post(
            "/api/customers", json={"name": "Ada", "email": "ada@example.com"}
        ).get_json()["data"]["id"]
        client.post(
            "/api/appointments",
            json={
                "customerId": customer_id,
                "startUtc": "2099-05-01T09:00:00Z",
                "endUtc": "2099-05-01T10:00:00Z",
            },
        )

        response = client.get(f"/api/customers/{customer_id}/appointments")

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert len(data) == 1
        assert data[0]["customerId"] == customer_id


@pytest.mark.integration
@pytest.mark.controllers
class TestCrossCuttingBehaviour:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"

    def test_health_reports_database_failure(self, client):
        with patch(
            "sqlalchemy.orm.Session.execute",
            side_effect=OperationalError("SELECT 1", {}, Exception("down")),
        ):
            response = client.get("/health")

        assert response.status_code == 503

    def test_unexpected_error_is_masked(self, client):
        with patch(
            "scheduleit.services.customer_service.CustomerService.search_customers",
            side_effect=RuntimeError("boom"),
        ):
            response = client.get("/api/customers")

        assert response.status_code == 500
        assert response.get_json() == {
            "success": False,
            "message": "An unexpected error occurred.",
            "error": "internal_error",
        }

    def test_cors_headers_for_allowed_origin(self, client):
        response = client.get(
            "/api/customers", headers={"Origin": "http://localhost:5173"}
        )
        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

    def test_no_cors_headers_for_other_origins(self, client):
        response = client.get("/api/customers", headers={"Origin": "http://evil.test"})
        assert "Access-Control-Allow-Origin" not in response.headers

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
