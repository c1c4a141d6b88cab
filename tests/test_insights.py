# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Tests for insight generation.
"""

from project_health.assessors import InsightGenerator, RiskAssessor
from project_health.models import (
    DependencyHealth,
    QualityIndicators,
    RiskAssessment,
    RiskCategory,
    RiskLevel,
    TimelineAdherence,
    VelocityDirection,
    VelocityTrend,
    WorkloadDistribution,
)


class TestInsightGenerator:
    """Test strengths, critical issues and improvement areas"""

    def test_key_strengths(self, make_metrics):
        metrics = make_metrics(
            task_completion_rate=85.0,
            velocity_trend=VelocityTrend(
                current=3.0, previous=2.0, trend=VelocityDirection.INCREASING, confidence=80.0, score=100.0
            ),
            quality_indicators=QualityIndicators(quality_score=90.0),
        )
        insights = InsightGenerator().generate_insights(metrics, [])

        assert insights.key_strengths == [
            "High task completion rate (85%)",
            "Improving team velocity (+1 tasks/week)",
            "Well-balanced team workload distribution",
            "High quality standards (90% quality score)",
        ]
        assert insights.critical_issues == []
        assert insights.improvement_areas == []

    def test_critical_issues_from_risks_and_overdue(self, make_metrics):
        metrics = make_metrics(overdue_tasks_count=12)
        risks = RiskAssessor().analyze_risks(metrics)

        insights = InsightGenerator().generate_insights(metrics, risks)

        assert insights.critical_issues == [
            "12 tasks are overdue",
            "High number of overdue tasks (12)",
        ]

    def test_only_critical_risks_become_issues(self, make_metrics):
        risks = [
            RiskAssessment(level=RiskLevel.HIGH, category=RiskCategory.TIMELINE,
                           description="Poor timeline adherence", recommendation="Re-plan"),
            RiskAssessment(level=RiskLevel.CRITICAL, category=RiskCategory.OVERALL,
                           description="Overall project health score is 30/100", recommendation="Escalate"),
        ]
        insights = InsightGenerator().generate_insights(make_metrics(), risks)

        assert insights.critical_issues == ["Overall project health score is 30/100"]

    def test_improvement_areas(self, make_metrics):
        metrics = make_metrics(
            task_completion_rate=40.0,
            timeline_adherence=TimelineAdherence(adherence_score=65.0),
            dependency_health=DependencyHealth(health_score=60.0),
            workload_distribution=WorkloadDistribution(balanced=False),
        )
        insights = InsightGenerator().generate_insights(metrics, [])

        assert insights.improvement_areas == [
            "Timeline adherence needs improvement",
            "Dependency management requires attention",
            "Workload distribution optimization needed",
        ]
        assert "Well-balanced team workload distribution" not in insights.key_strengths
