# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Directional trend labels from the current metrics."""

from typing import Optional

from project_health.config import HealthThresholds
from project_health.models import DetailedHealthMetrics, HealthTrends, TrendDirection, VelocityDirection

VELOCITY_TRENDS = {
    VelocityDirection.INCREASING: TrendDirection.IMPROVING,
    VelocityDirection.DECREASING: TrendDirection.DECLINING,
    VelocityDirection.STABLE: TrendDirection.STABLE,
}


class TrendAnalyzer:
    """Maps sub-metric levels to improving / stable / declining"""

    def __init__(self, thresholds: Optional[HealthThresholds] = None):
        self.thresholds = thresholds or HealthThresholds()

    def analyze_trends(self, metrics: DetailedHealthMetrics) -> HealthTrends:
        t = self.thresholds
        return HealthTrends(
            velocity_trend=VELOCITY_TRENDS[metrics.velocity_trend.trend],
            quality_trend=self._classify(
                metrics.quality_indicators.quality_score, t.quality_improving_min, t.quality_declining_below
            ),
            timeline_trend=self._classify(
                metrics.timeline_adherence.adherence_score, t.timeline_improving_min, t.timeline_declining_below
            ),
        )

    @staticmethod
    def _classify(score: float, improving_min: float, declining_below: float) -> TrendDirection:
        # Improving boundary is inclusive, declining boundary exclusive
        if score >= improving_min:
            return TrendDirection.IMPROVING
        if score < declining_below:
            return TrendDirection.DECLINING
        return TrendDirection.STABLE
