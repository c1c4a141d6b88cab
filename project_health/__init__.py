# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Project health analysis.

Computes a composite health score, risk findings, insights, categorized
recommendations and trend signals from a snapshot of tracker records.
"""

from project_health.config import HealthThresholds, Settings, get_settings
from project_health.errors import (
    DataSourceError,
    HealthAnalysisError,
    InvalidParameterError,
    InvalidTimeframeError,
    ProjectHealthAnalysisError,
)
from project_health.models import (
    AnalysisDepth,
    AnalysisTimeframe,
    DetailedHealthMetrics,
    ProjectHealthAnalysisParams,
    ProjectHealthAnalysisResult,
    ProjectHealthMetrics,
    TaskRecord,
    TeamMember,
)
from project_health.service import ProjectHealthAnalyzer

__all__ = [
    "AnalysisDepth",
    "AnalysisTimeframe",
    "DataSourceError",
    "DetailedHealthMetrics",
    "HealthAnalysisError",
    "HealthThresholds",
    "InvalidParameterError",
    "InvalidTimeframeError",
    "ProjectHealthAnalysisError",
    "ProjectHealthAnalysisParams",
    "ProjectHealthAnalysisResult",
    "ProjectHealthAnalyzer",
    "ProjectHealthMetrics",
    "Settings",
    "TaskRecord",
    "TeamMember",
    "get_settings",
]
