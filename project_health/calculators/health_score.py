# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Health score calculator.

Runs the six sub-metric calculators over one snapshot and aggregates their
normalized scores into the overall health score:
- Task completion rate
- Velocity trend
- Workload distribution
- Dependency health
- Quality indicators
- Timeline adherence
"""

import logging
from typing import Dict, List, Optional, Sequence

from project_health.calculators.completion import CompletionCalculator
from project_health.calculators.dependencies import calculate_dependency_health, dependency_findings
from project_health.calculators.quality import calculate_quality_indicators, quality_findings
from project_health.calculators.snapshot import MetricFinding, TaskSnapshot
from project_health.calculators.timeline import calculate_timeline_adherence, timeline_findings
from project_health.calculators.velocity import VelocityCalculator
from project_health.calculators.workload import calculate_workload_distribution, workload_findings
from project_health.config import HealthThresholds
from project_health.errors import InvalidTimeframeError
from project_health.models import AnalysisTimeframe, DetailedHealthMetrics, TaskRecord, TeamMember

logger = logging.getLogger(__name__)

ESCALATION_RECOMMENDATION = "Address high-priority risks immediately to prevent project impact"
HEALTHY_RECOMMENDATIONS = [
    "Maintain current project health with regular monitoring",
    "Consider implementing preventive measures for common risks",
]


class HealthMetricsCalculator:
    """Calculates the detailed health metrics of one snapshot"""

    def __init__(self, thresholds: Optional[HealthThresholds] = None):
        self.thresholds = thresholds or HealthThresholds()

    def calculate_health_score(
        self,
        records: Sequence[TaskRecord],
        team_members: Sequence[TeamMember],
        timeframe: AnalysisTimeframe
    ) -> DetailedHealthMetrics:
        """
        Calculate all sub-metrics and the weighted overall score.

        Args:
            records: Task records; an empty list yields neutral metrics
            team_members: Workspace roster; may be empty
            timeframe: Analysis window, ``end`` must be after ``start``

        Returns:
            Fully populated DetailedHealthMetrics

        Raises:
            InvalidTimeframeError: If the timeframe does not end after it starts
        """
        if timeframe.end <= timeframe.start:
            raise InvalidTimeframeError(
                f"end ({timeframe.end.isoformat()}) must be after start ({timeframe.start.isoformat()})"
            )

        snapshot = TaskSnapshot(records, timeframe, self.thresholds.closed_statuses)

        completion_rate = CompletionCalculator.calculate_completion_rate(snapshot)
        overdue_count = CompletionCalculator.count_overdue_tasks(snapshot)
        velocity = VelocityCalculator.calculate(snapshot, self.thresholds)
        workload = calculate_workload_distribution(snapshot, team_members, self.thresholds)
        dependencies = calculate_dependency_health(snapshot)
        quality = calculate_quality_indicators(snapshot)
        timeline = calculate_timeline_adherence(snapshot)

        overall_score = self.calculate_weighted_score({
            "completion": completion_rate,
            "velocity": velocity.score,
            "workload": workload.distribution_score,
            "dependencies": dependencies.health_score,
            "quality": quality.quality_score,
            "timeline": timeline.adherence_score,
        })

        findings: List[MetricFinding] = [
            *CompletionCalculator.findings(snapshot, completion_rate, overdue_count, self.thresholds),
            *VelocityCalculator.findings(velocity),
            *workload_findings(workload),
            *dependency_findings(dependencies),
            *quality_findings(quality, self.thresholds),
            *timeline_findings(timeline, self.thresholds),
        ]

        severe = (
            overdue_count > self.thresholds.overdue_critical_above
            or overall_score < self.thresholds.grade_d_min
        )

        logger.debug(
            "[HealthMetricsCalculator] %d in scope, %d open, overall score %.1f, %d findings",
            len(snapshot.in_scope), len(snapshot.open), overall_score, len(findings)
        )

        return DetailedHealthMetrics(
            overall_score=overall_score,
            task_completion_rate=completion_rate,
            overdue_tasks_count=overdue_count,
            blocked_tasks_count=dependencies.blocked_tasks,
            average_task_age=CompletionCalculator.calculate_average_task_age(snapshot),
            team_velocity=velocity.current,
            velocity_trend=velocity,
            workload_distribution=workload,
            dependency_health=dependencies,
            quality_indicators=quality,
            timeline_adherence=timeline,
            risk_factors=_unique(f.risk_factor for f in findings),
            recommendations=self._build_recommendations(findings, severe),
        )

    def calculate_weighted_score(self, scores: Dict[str, float]) -> float:
        """
        Weighted sum of the normalized sub-metric scores.

        Args:
            scores: Keys completion, velocity, workload, dependencies, quality, timeline

        Returns:
            Overall score in [0, 100], rounded to one decimal
        """
        weights = self.thresholds.weights
        total = (
            scores["completion"] * weights.completion
            + scores["timeline"] * weights.timeline
            + scores["quality"] * weights.quality
            + scores["workload"] * weights.workload
            + scores["dependencies"] * weights.dependencies
            + scores["velocity"] * weights.velocity
        )
        return round(min(100.0, max(0.0, total)), 1)

    @staticmethod
    def _build_recommendations(findings: List[MetricFinding], severe: bool) -> List[str]:
        if not findings:
            return list(HEALTHY_RECOMMENDATIONS)

        recommendations = [f.recommendation for f in findings]
        if severe:
            recommendations.append(ESCALATION_RECOMMENDATION)
        return _unique(recommendations)


def _unique(items) -> List[str]:
    """Drop repeated strings, keeping first occurrences in order."""
    return list(dict.fromkeys(items))
