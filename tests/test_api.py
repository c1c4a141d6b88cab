# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Tests for the HTTP surface.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from project_health.adapters import InMemoryRecordSource
from project_health.api import get_analyzer
from project_health.config import Settings
from project_health.errors import ANALYSIS_FAILED_PREFIX, DataSourceError
from project_health.main import app
from project_health.service import ProjectHealthAnalyzer


@pytest.fixture
def client_for(fixed_clock):
    """TestClient whose analyzer reads from the given in-memory source."""
    def _client(source):
        app.dependency_overrides[get_analyzer] = lambda: ProjectHealthAnalyzer(source, clock=fixed_clock)
        return TestClient(app)
    yield _client
    app.dependency_overrides.clear()


class TestAnalyzeEndpoint:
    """Test POST /api/v1/project-health/analyze"""

    def test_returns_camel_case_result(self, client_for, make_task, team):
        records = [make_task("t1", due=-2, assignees=["alice"]), make_task("t2", completed=-1)]
        client = client_for(InMemoryRecordSource(records, team))

        response = client.post("/api/v1/project-health/analyze", json={"workspace_id": "ws1"})

        assert response.status_code == 200
        data = response.json()
        assert set(data["summary"]) == {"overallScore", "healthGrade", "status"}
        assert data["metrics"]["taskCompletionRate"] == 50.0
        assert data["metrics"]["overdueTasksCount"] == 1
        assert "distributionScore" in data["metrics"]["workloadDistribution"]
        assert set(data["recommendations"]) == {"immediate", "shortTerm", "longTerm"}
        assert set(data["trends"]) == {"velocityTrend", "qualityTrend", "timelineTrend"}
        assert data["analysisDepth"] == "detailed"

    def test_invalid_parameter_is_400(self, client_for):
        client = client_for(InMemoryRecordSource())

        response = client.post("/api/v1/project-health/analyze", json={"space_id": "S1"})

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error_code"] == "VAL_001"
        assert detail["details"]["parameter"] == "workspace_id"

    def test_data_source_failure_is_502(self, client_for):
        client = client_for(InMemoryRecordSource(records_error=DataSourceError("ClickUp unavailable")))

        response = client.post("/api/v1/project-health/analyze", json={"workspace_id": "ws1"})

        assert response.status_code == 502
        detail = response.json()["detail"]
        assert detail["error_code"] == "ANALYSIS_001"
        assert detail["message"].startswith(ANALYSIS_FAILED_PREFIX)

    def test_missing_token_is_503(self):
        with patch("project_health.api.get_settings", return_value=Settings(clickup_api_token=None)):
            response = TestClient(app).post("/api/v1/project-health/analyze", json={"workspace_id": "ws1"})

        assert response.status_code == 503


class TestOtherEndpoints:
    """Test legacy, health and root endpoints"""

    def test_legacy_summary(self, client_for, make_task):
        client = client_for(InMemoryRecordSource([make_task("t1", due=-2)]))

        response = client.post("/api/v1/project-health/legacy", json={"workspace_id": "ws1"})

        assert response.status_code == 200
        data = response.json()
        assert data["overdueTasksCount"] == 1
        assert isinstance(data["riskFactors"], list)
        assert "velocityTrend" not in data

    def test_health(self):
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self):
        data = TestClient(app).get("/").json()
        assert data["health"] == "/health"
