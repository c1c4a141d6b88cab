# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Pytest configuration and fixtures for all tests.

This file ensures the project root is in the Python path
so that imports work correctly for all test modules, and provides a fixed
reference instant plus factories for task records and metrics.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import pytest for fixtures
import pytest

from project_health.models import (
    AnalysisDepth,
    AnalysisTimeframe,
    DependencyHealth,
    DetailedHealthMetrics,
    QualityIndicators,
    TaskRecord,
    TeamMember,
    TimelineAdherence,
    VelocityDirection,
    VelocityTrend,
    WorkloadDistribution,
)

NOW = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Reference instant every test analysis ends at."""
    return NOW


@pytest.fixture
def fixed_clock():
    return lambda: NOW


@pytest.fixture
def timeframe():
    """30-day (detailed) window ending at NOW."""
    return AnalysisTimeframe.from_depth(AnalysisDepth.DETAILED, now=NOW)


@pytest.fixture
def make_task():
    """
    Build a TaskRecord with times given in days relative to NOW.

    Negative offsets are in the past: ``created=-20`` means created 20 days ago.
    """
    def _make(
        task_id,
        created=-20,
        due=None,
        completed=None,
        status=None,
        assignees=(),
        **kwargs
    ):
        if status is None:
            status = "complete" if completed is not None else "in progress"
        return TaskRecord(
            id=task_id,
            name=f"Task {task_id}",
            status=status,
            assignees=list(assignees),
            created_at=NOW + timedelta(days=created),
            due_date=NOW + timedelta(days=due) if due is not None else None,
            completed_at=NOW + timedelta(days=completed) if completed is not None else None,
            **kwargs
        )
    return _make


@pytest.fixture
def team():
    return [
        TeamMember(id="1", username="alice", email="alice@example.com"),
        TeamMember(id="2", username="bob", email="bob@example.com"),
        TeamMember(id="3", username="carol", email="carol@example.com"),
        TeamMember(id="4", username="dave", email="dave@example.com"),
    ]


@pytest.fixture
def make_metrics():
    """Build DetailedHealthMetrics describing a healthy project, with overrides."""
    def _make(**overrides):
        values = dict(
            overall_score=85.0,
            task_completion_rate=85.0,
            overdue_tasks_count=0,
            blocked_tasks_count=0,
            average_task_age=3.0,
            team_velocity=2.0,
            velocity_trend=VelocityTrend(
                current=2.0, previous=2.0, trend=VelocityDirection.STABLE, confidence=80.0, score=100.0
            ),
            workload_distribution=WorkloadDistribution(),
            dependency_health=DependencyHealth(),
            quality_indicators=QualityIndicators(),
            timeline_adherence=TimelineAdherence(),
        )
        values.update(overrides)
        return DetailedHealthMetrics(**values)
    return _make
