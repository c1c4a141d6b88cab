# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Metric calculators for project health analysis.

Each calculator computes one sub-metric from a task snapshot;
HealthMetricsCalculator combines them into the overall health score.
"""

from project_health.calculators.completion import CompletionCalculator
from project_health.calculators.health_score import HealthMetricsCalculator
from project_health.calculators.snapshot import MetricFinding, TaskSnapshot
from project_health.calculators.velocity import VelocityCalculator

__all__ = [
    'CompletionCalculator',
    'HealthMetricsCalculator',
    'MetricFinding',
    'TaskSnapshot',
    'VelocityCalculator',
]
