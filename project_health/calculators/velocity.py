# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Velocity calculator.

Compares throughput (tasks completed per week) in the analysis window with
the equal-length window right before it.
"""

from typing import List

from project_health.calculators.snapshot import MetricFinding, TaskSnapshot
from project_health.config import HealthThresholds
from project_health.models import AnalysisTimeframe, VelocityDirection, VelocityTrend


class VelocityCalculator:
    """Calculates velocity trend between two consecutive windows"""

    @staticmethod
    def calculate(snapshot: TaskSnapshot, thresholds: HealthThresholds) -> VelocityTrend:
        """
        Calculate velocity for the current and previous window.

        Args:
            snapshot: Partitioned task records
            thresholds: Supplies the relative change treated as stable

        Returns:
            VelocityTrend with per-week throughput, direction and a normalized score
        """
        current_window = snapshot.timeframe
        previous_window = current_window.previous_window()

        current_count = VelocityCalculator._count_completed(snapshot, current_window, end_inclusive=True)
        previous_count = VelocityCalculator._count_completed(snapshot, previous_window, end_inclusive=False)

        weeks = current_window.days / 7
        current = round(current_count / weeks, 1)
        previous = round(previous_count / weeks, 1)

        trend = VelocityCalculator._calculate_trend(current, previous, thresholds.velocity_stable_ratio)
        confidence = min(95.0, 50.0 + 5.0 * (current_count + previous_count))

        return VelocityTrend(
            current=current,
            previous=previous,
            trend=trend,
            confidence=confidence,
            score=VelocityCalculator._calculate_score(current, previous),
        )

    @staticmethod
    def _count_completed(snapshot: TaskSnapshot, window: AnalysisTimeframe, end_inclusive: bool) -> int:
        count = 0
        for task in snapshot.records:
            done_at = task.completed_at
            if done_at is None or done_at < window.start:
                continue
            if done_at < window.end or (end_inclusive and done_at == window.end):
                count += 1
        return count

    @staticmethod
    def _calculate_trend(current: float, previous: float, stable_ratio: float) -> VelocityDirection:
        """
        Calculate trend direction from two throughput values.

        Returns:
            increasing, decreasing or stable
        """
        if previous == 0:
            return VelocityDirection.INCREASING if current > 0 else VelocityDirection.STABLE

        change = (current - previous) / previous
        if change > stable_ratio:
            return VelocityDirection.INCREASING
        elif change < -stable_ratio:
            return VelocityDirection.DECREASING
        else:
            return VelocityDirection.STABLE

    @staticmethod
    def _calculate_score(current: float, previous: float) -> float:
        if previous > 0:
            return round(min(100.0, current / previous * 100), 1)
        return 100.0 if current > 0 else 0.0

    @staticmethod
    def findings(velocity: VelocityTrend) -> List[MetricFinding]:
        if velocity.trend != VelocityDirection.DECREASING:
            return []
        return [MetricFinding(
            "Declining team velocity",
            "Investigate velocity decline causes and implement improvement measures"
        )]
