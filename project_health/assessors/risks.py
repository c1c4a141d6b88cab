# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Risk assessment over computed health metrics.

Each rule looks at one condition and yields at most one finding, so no two
findings describe the same underlying problem.
"""

import logging
from typing import Callable, List, Optional

from project_health.config import HealthThresholds
from project_health.models import (
    DetailedHealthMetrics,
    RiskAssessment,
    RiskCategory,
    RiskLevel,
    VelocityDirection,
)

logger = logging.getLogger(__name__)


class RiskAssessor:
    """Classifies health metrics into risk findings"""

    def __init__(self, thresholds: Optional[HealthThresholds] = None):
        self.thresholds = thresholds or HealthThresholds()
        self._rules: List[Callable[[DetailedHealthMetrics], Optional[RiskAssessment]]] = [
            self._overall_risk,
            self._overdue_risk,
            self._timeline_risk,
            self._workload_risk,
            self._dependency_risk,
            self._velocity_risk,
            self._quality_risk,
        ]

    def analyze_risks(self, metrics: DetailedHealthMetrics) -> List[RiskAssessment]:
        """
        Analyze risks based on health metrics.

        Returns:
            Findings ordered by severity, most severe first
        """
        risks = [risk for risk in (rule(metrics) for rule in self._rules) if risk is not None]
        # sorted() is stable, rule order breaks ties
        risks = sorted(risks, key=lambda r: r.level.priority, reverse=True)
        logger.debug("[RiskAssessor] %d risks identified", len(risks))
        return risks

    def _overall_risk(self, metrics: DetailedHealthMetrics) -> Optional[RiskAssessment]:
        score = metrics.overall_score
        if score >= self.thresholds.grade_d_min:
            return None
        level = RiskLevel.CRITICAL if score < self.thresholds.overall_critical_below else RiskLevel.HIGH
        return RiskAssessment(
            level=level,
            category=RiskCategory.OVERALL,
            description=f"Overall project health score is {score:g}/100",
            impact="Project delivery is at risk across multiple dimensions",
            recommendation="Escalate project health to stakeholders and agree on a recovery plan",
            confidence=90,
        )

    def _overdue_risk(self, metrics: DetailedHealthMetrics) -> Optional[RiskAssessment]:
        overdue = metrics.overdue_tasks_count
        if overdue > self.thresholds.overdue_critical_above:
            return RiskAssessment(
                level=RiskLevel.CRITICAL,
                category=RiskCategory.OVERDUE,
                description=f"{overdue} tasks are overdue",
                impact=f"{overdue} committed deliverables have missed their due dates",
                recommendation="Triage overdue tasks immediately and reset committed due dates",
                confidence=95,
            )
        if overdue > self.thresholds.overdue_warning_above:
            return RiskAssessment(
                level=RiskLevel.MEDIUM,
                category=RiskCategory.OVERDUE,
                description=f"{overdue} tasks are overdue",
                impact=f"{overdue} committed deliverables have missed their due dates",
                recommendation="Review overdue tasks and re-plan their due dates",
                confidence=90,
            )
        return None

    def _timeline_risk(self, metrics: DetailedHealthMetrics) -> Optional[RiskAssessment]:
        adherence = metrics.timeline_adherence
        score = adherence.adherence_score
        if score >= self.thresholds.adherence_risk_below:
            return None
        level = RiskLevel.HIGH if score < self.thresholds.adherence_high_below else RiskLevel.MEDIUM
        return RiskAssessment(
            level=level,
            category=RiskCategory.TIMELINE,
            description=f"Poor timeline adherence detected (score {score:g}/100)",
            impact=f"{100 - adherence.on_time_delivery:.1f}% of evaluated deliverables were late",
            recommendation="Review project scope, adjust timelines, or increase resources",
            confidence=85,
        )

    def _workload_risk(self, metrics: DetailedHealthMetrics) -> Optional[RiskAssessment]:
        workload = metrics.workload_distribution
        if workload.balanced:
            return None
        overloaded = workload.overloaded_members
        return RiskAssessment(
            level=RiskLevel.MEDIUM,
            category=RiskCategory.WORKLOAD,
            description=f"Unbalanced workload distribution ({len(overloaded)} overloaded members)",
            impact=(
                f"Overloaded: {', '.join(overloaded)}" if overloaded
                else f"{len(workload.underutilized_members)} team members are underutilized"
            ),
            recommendation="Redistribute tasks and balance team workload",
            confidence=90,
        )

    def _dependency_risk(self, metrics: DetailedHealthMetrics) -> Optional[RiskAssessment]:
        dependencies = metrics.dependency_health
        if dependencies.health_score >= self.thresholds.dependency_risk_below:
            return None
        level = (
            RiskLevel.HIGH if dependencies.blocked_tasks > self.thresholds.dependency_high_blocked_above
            else RiskLevel.MEDIUM
        )
        return RiskAssessment(
            level=level,
            category=RiskCategory.DEPENDENCIES,
            description=f"Dependency bottlenecks identified (health {dependencies.health_score:g}/100)",
            impact=f"{dependencies.blocked_tasks} tasks are blocked by dependencies",
            recommendation="Resolve blocking dependencies and review task sequencing",
            confidence=80,
        )

    def _velocity_risk(self, metrics: DetailedHealthMetrics) -> Optional[RiskAssessment]:
        velocity = metrics.velocity_trend
        if velocity.trend != VelocityDirection.DECREASING:
            return None
        if velocity.confidence <= self.thresholds.velocity_risk_min_confidence:
            return None
        return RiskAssessment(
            level=RiskLevel.MEDIUM,
            category=RiskCategory.VELOCITY,
            description=f"Declining team velocity ({velocity.previous:g} -> {velocity.current:g} tasks/week)",
            impact=f"Team velocity has decreased by {abs(velocity.current - velocity.previous):.1f} tasks/week",
            recommendation="Investigate velocity decline causes and implement improvement measures",
            confidence=velocity.confidence,
        )

    def _quality_risk(self, metrics: DetailedHealthMetrics) -> Optional[RiskAssessment]:
        quality = metrics.quality_indicators
        if quality.quality_score >= self.thresholds.quality_risk_below:
            return None
        level = (
            RiskLevel.HIGH if quality.bug_rate > self.thresholds.quality_high_bug_rate_above
            else RiskLevel.MEDIUM
        )
        return RiskAssessment(
            level=level,
            category=RiskCategory.QUALITY,
            description=f"Quality indicators below threshold (score {quality.quality_score:g}/100)",
            impact=(
                f"Bug rate: {quality.bug_rate * 100:.1f}%, "
                f"Rework frequency: {quality.rework_frequency * 100:.1f}%"
            ),
            recommendation="Implement quality improvement processes and increase testing",
            confidence=75,
        )
