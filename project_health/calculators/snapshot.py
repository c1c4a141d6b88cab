# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Task snapshot partitioning shared by the metric calculators.

A snapshot classifies each record once against the analysis timeframe so
every calculator agrees on which tasks are in scope, open or completed.
"""

from typing import Iterable, List, NamedTuple, Set

from project_health.models import AnalysisTimeframe, TaskRecord


class MetricFinding(NamedTuple):
    """A risk flag raised while computing a metric, with its remedy"""
    risk_factor: str
    recommendation: str


class TaskSnapshot:
    """Records partitioned against one analysis timeframe."""

    def __init__(
        self,
        records: Iterable[TaskRecord],
        timeframe: AnalysisTimeframe,
        closed_statuses: Iterable[str]
    ):
        self.timeframe = timeframe
        self.records: List[TaskRecord] = list(records)
        self.closed_statuses = [s.lower() for s in closed_statuses]

        end = timeframe.end
        start = timeframe.start

        # Completed as of the reference instant
        self.completed_ids: Set[str] = {
            r.id for r in self.records
            if r.is_completed(self.closed_statuses)
            and (r.completed_at is None or r.completed_at <= end)
        }

        # In scope: existed by the end and not already finished before the window
        self.in_scope: List[TaskRecord] = [
            r for r in self.records
            if r.created_at <= end
            and not (r.id in self.completed_ids and r.completed_at is not None and r.completed_at < start)
        ]
        self.open: List[TaskRecord] = [r for r in self.in_scope if r.id not in self.completed_ids]
        self.completed_in_window: List[TaskRecord] = [
            r for r in self.in_scope if r.id in self.completed_ids
        ]

    @property
    def is_empty(self) -> bool:
        return not self.in_scope

    def is_completed(self, task_id: str) -> bool:
        return task_id in self.completed_ids
