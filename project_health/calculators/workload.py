# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Workload Distribution Calculator

Measures how evenly open work is spread across the team roster:
- Open task count per roster member
- Overloaded members (well above the team average)
- Underutilized members (well below the average but not idle)
"""

from typing import Dict, List, Sequence, Tuple

from project_health.calculators.snapshot import MetricFinding, TaskSnapshot
from project_health.config import HealthThresholds
from project_health.models import TeamMember, WorkloadDistribution


def calculate_workload_distribution(
    snapshot: TaskSnapshot,
    team_members: Sequence[TeamMember],
    thresholds: HealthThresholds
) -> WorkloadDistribution:
    """
    Calculate workload distribution across the team.

    Args:
        snapshot: Partitioned task records
        team_members: Workspace roster; may be empty when it could not be read
        thresholds: Supplies the deviation ratio and the score used without a roster

    Returns:
        WorkloadDistribution. Without a roster the distribution is reported as
        balanced with a neutral score since balance cannot be judged.
    """
    unassigned = sum(1 for task in snapshot.open if not task.assignees)

    if not team_members:
        return WorkloadDistribution(
            balanced=True,
            unassigned_tasks=unassigned,
            distribution_score=thresholds.unknown_workload_score,
        )

    member_loads: Dict[str, int] = {member.username: 0 for member in team_members}
    for task in snapshot.open:
        for assignee in task.assignees:
            if assignee in member_loads:
                member_loads[assignee] += 1

    avg_load = sum(member_loads.values()) / len(member_loads)
    if avg_load == 0:
        return WorkloadDistribution(
            balanced=True,
            member_loads=member_loads,
            unassigned_tasks=unassigned,
            distribution_score=100.0,
        )

    overloaded, underutilized = _classify_members(member_loads, avg_load, thresholds.workload_deviation_ratio)

    balanced = len(overloaded) == 0 and len(underutilized) <= 1
    score = max(0.0, 100.0 - len(overloaded) * 20 - len(underutilized) * 10)

    return WorkloadDistribution(
        balanced=balanced,
        overloaded_members=overloaded,
        underutilized_members=underutilized,
        member_loads=member_loads,
        unassigned_tasks=unassigned,
        distribution_score=score,
    )


def _classify_members(
    member_loads: Dict[str, int],
    avg_load: float,
    deviation_ratio: float
) -> Tuple[List[str], List[str]]:
    threshold = avg_load * deviation_ratio
    overloaded = []
    underutilized = []
    for username, load in member_loads.items():
        if load > avg_load + threshold:
            overloaded.append(username)
        elif 0 < load < avg_load - threshold:
            underutilized.append(username)
    return overloaded, underutilized


def workload_findings(workload: WorkloadDistribution) -> List[MetricFinding]:
    """Flags raised by the workload distribution"""
    findings = []

    if not workload.balanced:
        findings.append(MetricFinding(
            "Workload imbalance detected",
            "Redistribute tasks and balance team workload"
        ))

    if workload.unassigned_tasks > 0:
        findings.append(MetricFinding(
            f"{workload.unassigned_tasks} open tasks are unassigned",
            "Assign owners to unassigned tasks for better tracking"
        ))

    return findings
