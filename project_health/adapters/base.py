# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Base Record Source

Defines the interface for reading task records and the team roster from an
issue tracker.
"""

from abc import ABC, abstractmethod
from typing import List

from project_health.models import ScopeSelector, TaskRecord, TeamMember


class BaseRecordSource(ABC):
    """
    Abstract base class for record sources.

    Sources are read-only: they fetch records from a tracker and transform
    them into TaskRecord/TeamMember models for the analysis pipeline.
    """

    @abstractmethod
    async def fetch_records(
        self,
        scope: ScopeSelector,
        include_archived: bool = False
    ) -> List[TaskRecord]:
        """
        Fetch all in-scope task records.

        Returns:
            List of TaskRecord, including closed tasks

        Raises:
            DataSourceError: On network, authentication or not-found failures
        """
        pass

    @abstractmethod
    async def fetch_team_members(self, workspace_id: str) -> List[TeamMember]:
        """
        Fetch the roster of the workspace.

        Returns:
            List of TeamMember

        Raises:
            DataSourceError: On failure; callers treat the roster as best-effort
        """
        pass
