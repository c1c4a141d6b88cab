# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Letter grade and status for the overall score."""

from typing import List, Optional, Tuple

from project_health.config import HealthThresholds
from project_health.models import DetailedHealthMetrics, HealthGrade, HealthStatus, HealthSummary


class SummaryBuilder:
    """Maps the overall score onto non-overlapping grade bands"""

    def __init__(self, thresholds: Optional[HealthThresholds] = None):
        self.thresholds = thresholds or HealthThresholds()

    @property
    def bands(self) -> List[Tuple[float, HealthGrade, HealthStatus]]:
        t = self.thresholds
        return [
            (t.grade_a_min, HealthGrade.A, HealthStatus.EXCELLENT),
            (t.grade_b_min, HealthGrade.B, HealthStatus.GOOD),
            (t.grade_c_min, HealthGrade.C, HealthStatus.FAIR),
            (t.grade_d_min, HealthGrade.D, HealthStatus.POOR),
        ]

    def create_summary(self, metrics: DetailedHealthMetrics) -> HealthSummary:
        score = metrics.overall_score
        for minimum, grade, status in self.bands:
            if score >= minimum:
                return HealthSummary(overall_score=score, health_grade=grade, status=status)
        return HealthSummary(overall_score=score, health_grade=HealthGrade.F, status=HealthStatus.CRITICAL)
