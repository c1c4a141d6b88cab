# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
In-memory record source for demos and testing.

Serves a fixed snapshot of records and roster and applies the same scope
and archive filtering a real tracker would.
"""

import logging
from typing import Iterable, List, Optional

from project_health.adapters.base import BaseRecordSource
from project_health.models import ScopeSelector, TaskRecord, TeamMember

logger = logging.getLogger(__name__)


class InMemoryRecordSource(BaseRecordSource):
    """Record source backed by in-memory lists."""

    def __init__(
        self,
        records: Optional[Iterable[TaskRecord]] = None,
        team_members: Optional[Iterable[TeamMember]] = None,
        records_error: Optional[Exception] = None,
        team_error: Optional[Exception] = None
    ):
        """
        Args:
            records: Task records to serve
            team_members: Roster to serve
            records_error: Raised by fetch_records instead of returning data
            team_error: Raised by fetch_team_members instead of returning data
        """
        self.records = list(records or [])
        self.team_members = list(team_members or [])
        self.records_error = records_error
        self.team_error = team_error

    async def fetch_records(
        self,
        scope: ScopeSelector,
        include_archived: bool = False
    ) -> List[TaskRecord]:
        if self.records_error is not None:
            raise self.records_error

        records = [r for r in self.records if include_archived or not r.archived]
        if scope.scope_type == "list":
            records = [r for r in records if r.list_id == scope.scope_id]
        elif scope.scope_type == "space":
            records = [r for r in records if r.space_id == scope.scope_id]

        logger.debug(f"[InMemoryRecordSource] Serving {len(records)} records for {scope.scope_type} {scope.scope_id}")
        return records

    async def fetch_team_members(self, workspace_id: str) -> List[TeamMember]:
        if self.team_error is not None:
            raise self.team_error
        return list(self.team_members)
