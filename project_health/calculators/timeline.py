# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Timeline adherence calculator.

Only tasks whose due date can already be judged are evaluated: completed
tasks with a due date, and open tasks that are past due at the end of the
timeframe.
"""

import statistics
from typing import List

from project_health.calculators.snapshot import MetricFinding, TaskSnapshot
from project_health.config import HealthThresholds
from project_health.models import TimelineAdherence

# Caps on the adherence penalties, in score points
MAX_DELAY_PENALTY = 20.0
MAX_VARIANCE_PENALTY = 10.0


def calculate_timeline_adherence(snapshot: TaskSnapshot) -> TimelineAdherence:
    """
    Calculate on-time delivery weighted down by delay and schedule variance.

    Returns:
        TimelineAdherence; a perfect score when nothing is evaluable yet.
    """
    end = snapshot.timeframe.end
    slips: List[float] = []

    for task in snapshot.in_scope:
        if task.due_date is None:
            continue
        if snapshot.is_completed(task.id):
            if task.completed_at is None:
                continue
            slips.append((task.completed_at - task.due_date).total_seconds() / 86400)
        elif task.due_date < end:
            slips.append((end - task.due_date).total_seconds() / 86400)

    if not slips:
        return TimelineAdherence()

    delays = [max(0.0, slip) for slip in slips]
    late = [delay for delay in delays if delay > 0]

    on_time_delivery = (len(slips) - len(late)) / len(slips) * 100
    average_delay = statistics.mean(late) if late else 0.0
    schedule_variance = statistics.pstdev(delays)

    adherence = (
        on_time_delivery
        - min(average_delay * 2, MAX_DELAY_PENALTY)
        - min(schedule_variance, MAX_VARIANCE_PENALTY)
    )

    return TimelineAdherence(
        on_time_delivery=round(on_time_delivery, 1),
        average_delay=round(average_delay, 1),
        schedule_variance=round(schedule_variance, 1),
        adherence_score=round(min(100.0, max(0.0, adherence)), 1),
    )


def timeline_findings(timeline: TimelineAdherence, thresholds: HealthThresholds) -> List[MetricFinding]:
    if timeline.adherence_score >= thresholds.adherence_risk_below:
        return []
    return [MetricFinding(
        f"Poor timeline adherence ({timeline.adherence_score:g}/100)",
        "Review project scope, adjust timelines, or increase resources"
    )]
