"""
Tests for the health endpoints.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import FakeRegistryClient
from padma_backend.api import health
from padma_backend.core.component_registrar import RegistrationPhase, RegistrationResult
from padma_backend.core.exceptions import ExternalServiceError
from padma_backend.middleware.logging import LoggingMiddleware
from padma_backend.services.registration_service import RegistrationService


def build_app(client: FakeRegistryClient, service: RegistrationService) -> FastAPI:
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
    app.include_router(health.router, prefix="/api/health")

    async def override_client():
        yield client

    app.dependency_overrides[health.get_registry_client] = override_client
    app.dependency_overrides[health.get_registration_service] = lambda: service
    return app


@pytest.fixture
def service() -> RegistrationService:
    return RegistrationService()


def test_health_check(service):
    with TestClient(build_app(FakeRegistryClient(), service)) as http:
        response = http.get("/api/health/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Request-ID"]


def test_ready_reports_cms_and_last_registration(service):
    service.last_result = RegistrationResult(
        phase=RegistrationPhase.NO_OP_DONE,
        desired=["shared.link"],
    )
    client = FakeRegistryClient(known={"shared.link": {"uid": "shared.link"}})

    with TestClient(build_app(client, service)) as http:
        body = http.get("/api/health/ready").json()

    assert body["status"] == "ready"
    assert body["known_components"] == 1
    assert body["registration"]["phase"] == "no_op_done"


def test_ready_reports_unreachable_cms(service):
    client = FakeRegistryClient()
    client.list_error = ExternalServiceError("connection refused", service_name="cms")

    with TestClient(build_app(client, service)) as http:
        body = http.get("/api/health/ready").json()

    assert body["status"] == "not ready"
    assert body["cms"] == "error: connection refused"
    assert body["registration"] is None


def test_request_id_header_is_echoed(service):
    with TestClient(build_app(FakeRegistryClient(), service)) as http:
        response = http.get("/api/health/", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"
