# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Assessors that interpret computed health metrics.

Each assessor is a pure function of the metrics (and, for insights and
recommendations, the risk findings).
"""

from project_health.assessors.insights import InsightGenerator
from project_health.assessors.recommendations import RecommendationCategorizer
from project_health.assessors.risks import RiskAssessor
from project_health.assessors.summary import SummaryBuilder
from project_health.assessors.trends import TrendAnalyzer

__all__ = [
    'InsightGenerator',
    'RecommendationCategorizer',
    'RiskAssessor',
    'SummaryBuilder',
    'TrendAnalyzer',
]
