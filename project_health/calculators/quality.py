# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Quality indicators calculator.

Defect and rework rates over in-scope tasks.
"""

from typing import List

from project_health.calculators.snapshot import MetricFinding, TaskSnapshot
from project_health.config import HealthThresholds
from project_health.models import QualityIndicators


def calculate_quality_indicators(snapshot: TaskSnapshot) -> QualityIndicators:
    """Quality score falls as the defect and rework rates rise."""
    total = len(snapshot.in_scope)
    if total == 0:
        return QualityIndicators()

    bug_rate = sum(1 for task in snapshot.in_scope if task.is_defect) / total
    rework_frequency = sum(1 for task in snapshot.in_scope if task.is_rework) / total
    quality_score = max(0.0, 100.0 - bug_rate * 300 - rework_frequency * 200)

    return QualityIndicators(
        bug_rate=round(bug_rate, 4),
        rework_frequency=round(rework_frequency, 4),
        quality_score=round(quality_score, 1),
    )


def quality_findings(quality: QualityIndicators, thresholds: HealthThresholds) -> List[MetricFinding]:
    if quality.quality_score >= thresholds.quality_risk_below:
        return []
    return [MetricFinding(
        f"Quality indicators below threshold (bug rate {quality.bug_rate * 100:.1f}%, "
        f"rework {quality.rework_frequency * 100:.1f}%)",
        "Implement quality improvement processes and increase testing"
    )]
