"""Test fixtures for contract testing."""

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from src.app import create_app
from src.config.settings import DashboardSettings


@pytest.fixture
def test_client(tmp_path) -> TestClient:
    """FastAPI test client for contract testing (startup not run)."""
    return TestClient(create_app(DashboardSettings.for_testing(str(tmp_path))))


@pytest.fixture
def openapi_schema(test_client: TestClient) -> Dict[str, Any]:
    """Fetch current OpenAPI schema from the API."""
    response = test_client.get("/openapi.json")
    assert response.status_code == 200, "Failed to fetch OpenAPI schema"
    return response.json()
