# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Narrative insights derived from metrics and risks."""

from typing import List, Optional

from project_health.config import HealthThresholds
from project_health.models import (
    DetailedHealthMetrics,
    HealthInsights,
    RiskAssessment,
    RiskLevel,
    VelocityDirection,
)


class InsightGenerator:
    """Derives strengths, critical issues and improvement areas"""

    def __init__(self, thresholds: Optional[HealthThresholds] = None):
        self.thresholds = thresholds or HealthThresholds()

    def generate_insights(
        self,
        metrics: DetailedHealthMetrics,
        risks: List[RiskAssessment]
    ) -> HealthInsights:
        t = self.thresholds
        key_strengths: List[str] = []
        critical_issues: List[str] = []
        improvement_areas: List[str] = []

        # Strengths
        if metrics.task_completion_rate >= t.strength_completion_min:
            key_strengths.append(f"High task completion rate ({metrics.task_completion_rate:g}%)")
        velocity = metrics.velocity_trend
        if velocity.trend == VelocityDirection.INCREASING:
            key_strengths.append(
                f"Improving team velocity (+{round(velocity.current - velocity.previous, 1):g} tasks/week)"
            )
        if metrics.workload_distribution.balanced:
            key_strengths.append("Well-balanced team workload distribution")
        if metrics.quality_indicators.quality_score >= t.strength_quality_min:
            key_strengths.append(
                f"High quality standards ({round(metrics.quality_indicators.quality_score)}% quality score)"
            )

        # Critical issues
        for risk in risks:
            if risk.level == RiskLevel.CRITICAL:
                critical_issues.append(risk.description)
        if metrics.overdue_tasks_count > t.critical_overdue_above:
            critical_issues.append(f"High number of overdue tasks ({metrics.overdue_tasks_count})")

        # Improvement areas
        if metrics.timeline_adherence.adherence_score < t.improvement_adherence_below:
            improvement_areas.append("Timeline adherence needs improvement")
        if metrics.dependency_health.health_score < t.improvement_dependency_below:
            improvement_areas.append("Dependency management requires attention")
        if not metrics.workload_distribution.balanced:
            improvement_areas.append("Workload distribution optimization needed")

        return HealthInsights(
            key_strengths=key_strengths,
            critical_issues=critical_issues,
            improvement_areas=improvement_areas,
        )
