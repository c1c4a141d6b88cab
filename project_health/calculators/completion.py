# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Completion calculator.

Completion rate, overdue count and average age of open tasks.
"""

from typing import List

from project_health.calculators.snapshot import MetricFinding, TaskSnapshot
from project_health.config import HealthThresholds


class CompletionCalculator:
    """Calculates completion-related metrics"""

    @staticmethod
    def calculate_completion_rate(snapshot: TaskSnapshot) -> float:
        """
        Percentage of in-scope tasks completed within the timeframe.

        Returns 0 when there is nothing in scope.
        """
        total = len(snapshot.in_scope)
        if total == 0:
            return 0.0
        return round(len(snapshot.completed_in_window) / total * 100, 1)

    @staticmethod
    def count_overdue_tasks(snapshot: TaskSnapshot) -> int:
        """Open tasks whose due date has passed"""
        end = snapshot.timeframe.end
        return sum(1 for task in snapshot.open if task.due_date is not None and task.due_date < end)

    @staticmethod
    def calculate_average_task_age(snapshot: TaskSnapshot) -> float:
        """Mean age of open tasks in days"""
        if not snapshot.open:
            return 0.0
        end = snapshot.timeframe.end
        total_days = sum((end - task.created_at).total_seconds() / 86400 for task in snapshot.open)
        return round(total_days / len(snapshot.open), 1)

    @staticmethod
    def findings(
        snapshot: TaskSnapshot,
        completion_rate: float,
        overdue_count: int,
        thresholds: HealthThresholds
    ) -> List[MetricFinding]:
        findings = []

        if not snapshot.is_empty and completion_rate < thresholds.low_completion_below:
            findings.append(MetricFinding(
                f"Low task completion rate ({completion_rate:g}%)",
                "Review task breakdown and unblock in-progress work"
            ))

        if overdue_count > thresholds.overdue_critical_above:
            findings.append(MetricFinding(
                f"{overdue_count} overdue tasks",
                "Triage overdue tasks immediately and reset committed due dates"
            ))
        elif overdue_count > thresholds.overdue_warning_above:
            findings.append(MetricFinding(
                f"{overdue_count} overdue tasks",
                "Review overdue tasks and re-plan their due dates"
            ))
        elif overdue_count > 0:
            findings.append(MetricFinding(
                f"{overdue_count} overdue tasks",
                "Follow up on overdue tasks with their assignees"
            ))

        return findings
