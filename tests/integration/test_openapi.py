"""
Integration tests for OpenAPI documentation.

Verifies OpenAPI schema is correctly generated for all endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from airgo_accounts.api.main import app


@pytest.fixture(scope="module")
def schema() -> dict:
    """OpenAPI schema; generating it does not start the lifespan."""
    response = TestClient(app).get("/openapi.json")
    assert response.status_code == 200
    return response.json()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_openapi_title_and_version(self, schema: dict) -> None:
        assert schema["info"]["title"] == "airgo-accounts"
        assert schema["info"]["version"] == "0.1.0"

    @pytest.mark.parametrize(
        "path,method",
        [
            ("/v1/auth/check-unique", "post"),
            ("/v1/auth/send-otp", "post"),
            ("/v1/auth/verify-otp", "post"),
            ("/v1/auth/register", "post"),
            ("/v1/auth/login", "post"),
            ("/v1/auth/change-password", "post"),
            ("/v1/auth/profile", "get"),
            ("/v1/auth/users", "get"),
            ("/v1/auth/addresses", "get"),
            ("/v1/auth/addresses", "post"),
            ("/v1/auth/addresses/{address_id}", "put"),
            ("/v1/auth/addresses/{address_id}", "delete"),
            ("/health", "get"),
        ],
    )
    def test_endpoint_documented(self, schema: dict, path: str, method: str) -> None:
        assert method in schema["paths"][path]

    def test_register_documents_conflict(self, schema: dict) -> None:
        responses = schema["paths"]["/v1/auth/register"]["post"]["responses"]
        assert "201" in responses
        assert "409" in responses

    def test_bearer_security_scheme(self, schema: dict) -> None:
        schemes = schema["components"]["securitySchemes"]
        assert schemes["HTTPBearer"]["scheme"] == "bearer"
        profile = schema["paths"]["/v1/auth/profile"]["get"]
        assert {"HTTPBearer": []} in profile["security"]

    def test_register_request_schema(self, schema: dict) -> None:
        register = schema["components"]["schemas"]["RegisterRequest"]
        assert {"email", "password", "full_name", "cnic_number", "phone"} <= set(
            register["required"]
        )
        assert "password_hash" not in schema["components"]["schemas"]["ProfileResponse"][
            "properties"
        ]
