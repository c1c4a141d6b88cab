# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Dependency health calculator.

Blocking links are read from both sides of the relationship: a task's
``blocked_by`` ids and the ``blocking`` ids of the tasks holding it up.
"""

from collections import defaultdict
from typing import Dict, List, Set

from project_health.calculators.snapshot import MetricFinding, TaskSnapshot
from project_health.models import DependencyHealth


def calculate_dependency_health(snapshot: TaskSnapshot) -> DependencyHealth:
    """
    Calculate dependency health as an inverse of blocking density.

    A blocker is resolved once it is completed; unknown blocker ids count as
    unresolved. Tasks sitting on a cycle of open dependencies are reported as
    circular.
    """
    waits_on = _build_wait_graph(snapshot)

    total_dependencies = sum(1 for task in snapshot.in_scope if task.has_dependencies)

    blocked = 0
    for task in snapshot.open:
        unresolved = [b for b in waits_on.get(task.id, ()) if not snapshot.is_completed(b)]
        if unresolved or task.status.strip().lower() == "blocked":
            blocked += 1

    open_ids = {task.id for task in snapshot.open}
    open_graph = {
        task_id: {b for b in blockers if b in open_ids}
        for task_id, blockers in waits_on.items()
        if task_id in open_ids
    }
    circular = len(find_cycle_members(open_graph))

    if not snapshot.open:
        health_score = 100.0
    else:
        blocked_ratio = blocked / len(snapshot.open)
        health_score = max(0.0, 100.0 - blocked_ratio * 100 - circular * 20)

    return DependencyHealth(
        total_dependencies=total_dependencies,
        blocked_tasks=blocked,
        circular_dependencies=circular,
        health_score=round(health_score, 1),
    )


def _build_wait_graph(snapshot: TaskSnapshot) -> Dict[str, Set[str]]:
    """Map each task id to the ids it waits on."""
    waits_on: Dict[str, Set[str]] = defaultdict(set)
    for task in snapshot.records:
        for blocker in task.blocked_by:
            waits_on[task.id].add(blocker)
        for dependent in task.blocking:
            waits_on[dependent].add(task.id)
    return dict(waits_on)


def find_cycle_members(graph: Dict[str, Set[str]]) -> Set[str]:
    """
    Return the nodes that lie on at least one cycle.

    Iterative Tarjan strongly-connected-components; a component is cyclic when
    it has more than one node or a self loop.
    """
    index_of: Dict[str, int] = {}
    lowlink: Dict[str, int] = {}
    on_stack: Set[str] = set()
    stack: List[str] = []
    members: Set[str] = set()
    counter = 0

    for root in sorted(graph):
        if root in index_of:
            continue
        work = [(root, iter(sorted(graph.get(root, ()))))]
        index_of[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)

        while work:
            node, children = work[-1]
            advanced = False
            for child in children:
                if child not in index_of:
                    index_of[child] = lowlink[child] = counter
                    counter += 1
                    stack.append(child)
                    on_stack.add(child)
                    work.append((child, iter(sorted(graph.get(child, ())))))
                    advanced = True
                    break
                if child in on_stack:
                    lowlink[node] = min(lowlink[node], index_of[child])
            if advanced:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index_of[node]:
                component = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                if len(component) > 1 or node in graph.get(node, ()):
                    members.update(component)

    return members


def dependency_findings(dependencies: DependencyHealth) -> List[MetricFinding]:
    findings = []
    if dependencies.blocked_tasks > 0:
        findings.append(MetricFinding(
            f"{dependencies.blocked_tasks} tasks blocked by dependencies",
            "Resolve blocking dependencies and review task sequencing"
        ))
    if dependencies.circular_dependencies > 0:
        findings.append(MetricFinding(
            f"{dependencies.circular_dependencies} tasks in circular dependency chains",
            "Break circular dependency chains urgently"
        ))
    return findings
