# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Recommendation categorization into action horizons.

Risk recommendations are placed by severity; free-text recommendations go
through an ordered keyword rule table, first matching rule wins.
"""

from typing import Dict, List, Optional

from project_health.config import HealthThresholds, RecommendationHorizon
from project_health.models import CategorizedRecommendations, RiskAssessment, RiskLevel


class RecommendationCategorizer:
    """Buckets recommendations into immediate, short-term and long-term actions"""

    def __init__(self, thresholds: Optional[HealthThresholds] = None):
        self.thresholds = thresholds or HealthThresholds()

    def classify(self, recommendation: str) -> RecommendationHorizon:
        """Horizon of a single free-text recommendation (case-sensitive substring match)."""
        for rule in self.thresholds.recommendation_rules:
            if any(keyword in recommendation for keyword in rule.keywords):
                return rule.horizon
        return self.thresholds.fallback_horizon

    def categorize_recommendations(
        self,
        recommendations: List[str],
        risks: List[RiskAssessment]
    ) -> CategorizedRecommendations:
        """
        Categorize recommendations by time horizon.

        Args:
            recommendations: Free-text recommendations produced with the metrics
            risks: Risk findings; critical ones are immediate, high ones short-term

        Returns:
            CategorizedRecommendations with no empty and no duplicated bucket
        """
        buckets: Dict[str, List[str]] = {"immediate": [], "short_term": [], "long_term": []}

        for risk in risks:
            if risk.level == RiskLevel.CRITICAL:
                buckets["immediate"].append(risk.recommendation)
            elif risk.level == RiskLevel.HIGH:
                buckets["short_term"].append(risk.recommendation)

        for recommendation in recommendations:
            buckets[self.classify(recommendation)].append(recommendation)

        defaults = {
            "immediate": self.thresholds.default_immediate,
            "short_term": self.thresholds.default_short_term,
            "long_term": self.thresholds.default_long_term,
        }
        for horizon, items in buckets.items():
            if not items:
                items.append(defaults[horizon])

        return CategorizedRecommendations(
            immediate=list(dict.fromkeys(buckets["immediate"])),
            short_term=list(dict.fromkeys(buckets["short_term"])),
            long_term=list(dict.fromkeys(buckets["long_term"])),
        )
