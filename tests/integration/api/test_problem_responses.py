"""Integration tests for RFC 7807 problem responses."""

import pytest
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError

from remiwire.core.errors import ConflictError


pytestmark = pytest.mark.integration


failing_router = APIRouter()


@failing_router.get("/domain-conflict")
async def domain_conflict():
    raise ConflictError(
        "Employee ID already registered",
        error_code="employee_id_exists",
        details={"field": "employee_id", "status": 999},
    )


@failing_router.get("/unique-violation")
async def unique_violation():
    raise IntegrityError(
        "INSERT INTO staff ...",
        {},
        Exception("UNIQUE constraint failed: staff.email"),
    )


@failing_router.get("/crash")
async def crash():
    raise RuntimeError("connection pool exhausted at 10.0.0.5")


class TestProblemResponses:
    @pytest.fixture
    async def failing_client(self, app) -> AsyncClient:
        app.include_router(failing_router, prefix="/test")
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as client:
            yield client

    async def test_domain_error_merges_details(self, failing_client):
        response = await failing_client.get("/test/domain-conflict")

        assert response.status_code == 409
        assert response.headers["content-type"] == "application/problem+json"
        body = response.json()
        assert body["type"].endswith("/errors/employee_id_exists")
        assert body["title"] == "Employee Id Exists"
        assert body["instance"] == "/test/domain-conflict"
        assert body["field"] == "employee_id"
        assert body["status"] == 409

    async def test_unhandled_unique_violation_is_a_conflict(self, failing_client):
        response = await failing_client.get("/test/unique-violation")

        assert response.status_code == 409
        body = response.json()
        assert body["type"].endswith("/errors/conflict")
        assert "staff.email" not in response.text

    async def test_unexpected_error_reveals_nothing(self, failing_client):
        response = await failing_client.get("/test/crash")

        assert response.status_code == 500
        body = response.json()
        assert body["type"].endswith("/errors/internal_error")
        assert body["detail"] == "An unexpected error occurred"
        assert "10.0.0.5" not in response.text

    async def test_validation_error_lists_fields(self, client):
        response = await client.post("/api/v1/auth/login", json={"email": "not-an-email"})

        assert response.status_code == 422
        body = response.json()
        fields = {error["field"] for error in body["errors"]}
        assert {"email", "password"} <= fields
