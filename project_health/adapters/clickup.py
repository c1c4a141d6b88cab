# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
ClickUp Record Source

Reads tasks and the workspace roster from the ClickUp v2 REST API and maps
them into TaskRecord/TeamMember models.

ClickUp API documentation:
https://clickup.com/api
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import httpx

from project_health.adapters.base import BaseRecordSource
from project_health.errors import DataSourceError, ErrorCode
from project_health.models import ScopeSelector, TaskRecord, TeamMember

logger = logging.getLogger(__name__)

DEFAULT_CLICKUP_URL = "https://api.clickup.com/api/v2"

# Guards against a tracker that never reports its last page
MAX_PAGES = 200


class ClickUpRecordSource(BaseRecordSource):
    """
    Async ClickUp API reader.

    Usage:
        async with ClickUpRecordSource(api_token) as source:
            records = await source.fetch_records(scope)
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_CLICKUP_URL,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        defect_tags: Optional[Iterable[str]] = None,
        rework_tags: Optional[Iterable[str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the ClickUp source.

        Args:
            api_token: ClickUp personal or OAuth token
            base_url: ClickUp API base URL
            timeout: Request timeout in seconds
            max_retries: Maximum attempts for retryable failures
            retry_delay: Base delay between retries in seconds
            defect_tags: Tag names marking a task as a defect
            rework_tags: Tag names marking a task as reworked
            transport: Optional httpx transport (used by tests)
        """
        if not api_token:
            raise ValueError("ClickUp requires api_token for authentication")

        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.defect_tags = {t.lower() for t in (defect_tags or ["bug", "defect"])}
        self.rework_tags = {t.lower() for t in (rework_tags or ["rework", "reopened"])}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "ClickUpRecordSource":
        """Enter async context."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context."""
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get HTTP client, creating one if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={
                    "Authorization": self.api_token,
                    "Content-Type": "application/json",
                },
                transport=self._transport,
            )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Make HTTP request with retry logic.

        Client errors (4xx other than 429) are not retried. Server errors,
        rate limiting and transport errors are retried with exponential backoff.

        Raises:
            DataSourceError: On request failure
        """
        client = self._get_client()
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                response = await client.request(method=method, url=path, params=params)
                response.raise_for_status()
                return response.json()

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if 400 <= status < 500 and status != 429:
                    logger.error(f"[ClickUpRecordSource] Client error: {status} - {e.response.text}")
                    raise self._client_error(status, path, e.response.text) from e
                last_error = e

            except httpx.RequestError as e:
                last_error = e

            # Wait before retry
            if attempt < self.max_retries - 1:
                delay = self.retry_delay * (2 ** attempt)
                logger.warning(f"[ClickUpRecordSource] Request failed, retrying in {delay}s: {last_error}")
                await asyncio.sleep(delay)

        logger.error(f"[ClickUpRecordSource] Request failed after {self.max_retries} attempts: {last_error}")
        status_code = last_error.response.status_code if isinstance(last_error, httpx.HTTPStatusError) else None
        raise DataSourceError(
            f"ClickUp request {method} {path} failed after {self.max_retries} attempts: {last_error}",
            status_code=status_code,
        ) from last_error

    @staticmethod
    def _client_error(status: int, path: str, body: str) -> DataSourceError:
        if status == 401:
            return DataSourceError(
                "ClickUp API authentication failed. Check the configured API token.",
                status_code=status,
                error_code=ErrorCode.AUTHENTICATION_ERROR,
            )
        if status == 403:
            return DataSourceError(
                f"ClickUp API returned 403 Forbidden for {path}. "
                "The API token lacks access to the requested workspace, space or list.",
                status_code=status,
                error_code=ErrorCode.AUTHENTICATION_ERROR,
            )
        if status == 404:
            return DataSourceError(
                f"ClickUp resource not found: {path}",
                status_code=status,
                error_code=ErrorCode.NOT_FOUND_ERROR,
            )
        return DataSourceError(
            f"ClickUp API rejected {path} with status {status}: {body[:200]}",
            status_code=status,
        )

    # ==================== Records ====================

    async def fetch_records(
        self,
        scope: ScopeSelector,
        include_archived: bool = False
    ) -> List[TaskRecord]:
        """
        Fetch every task in the scope, page by page.

        List scope reads the list endpoint directly; space and workspace scope
        use the workspace task search, filtered by space when needed.
        """
        params: Dict[str, Any] = {
            "archived": "true" if include_archived else "false",
            "subtasks": "true",
            "include_closed": "true",
            "order_by": "created",
            "reverse": "true",
        }
        if scope.scope_type == "list":
            path = f"/list/{scope.scope_id}/task"
        else:
            path = f"/team/{scope.workspace_id}/task"
            if scope.scope_type == "space":
                params["space_ids[]"] = [scope.scope_id]

        records: List[TaskRecord] = []
        for page in range(MAX_PAGES):
            data = await self._request("GET", path, params={**params, "page": page})
            tasks = data.get("tasks", [])
            records.extend(record for record in map(self._parse_task, tasks) if record is not None)

            logger.debug(
                f"[ClickUpRecordSource] Page {page}: fetched {len(tasks)} tasks "
                f"(total so far={len(records)})"
            )
            if not tasks or data.get("last_page", False):
                break
        else:
            logger.warning(f"[ClickUpRecordSource] Stopped paging {path} after {MAX_PAGES} pages")

        logger.info(
            f"[ClickUpRecordSource] Fetched {len(records)} tasks for {scope.scope_type} {scope.scope_id}"
        )
        return records

    def _parse_task(self, data: Dict[str, Any]) -> Optional[TaskRecord]:
        """Map a ClickUp task; tasks without a creation date are skipped."""
        task_id = str(data["id"])
        status = data.get("status") or {}
        tags = [str(tag.get("name", "")) for tag in data.get("tags") or [] if tag.get("name")]
        tag_set = {tag.lower() for tag in tags}

        blocked_by: List[str] = []
        blocking: List[str] = []
        for dependency in data.get("dependencies") or []:
            waiting = str(dependency.get("task_id", ""))
            depends_on = str(dependency.get("depends_on", ""))
            if waiting == task_id and depends_on:
                blocked_by.append(depends_on)
            elif depends_on == task_id and waiting:
                blocking.append(waiting)

        created_at = self._parse_timestamp(data.get("date_created"))
        if created_at is None:
            logger.warning(f"[ClickUpRecordSource] Skipping task {task_id} without a creation date")
            return None

        return TaskRecord(
            id=task_id,
            name=data.get("name") or "",
            status=status.get("status") or "",
            status_type=status.get("type"),
            assignees=[
                a.get("username") or str(a.get("id"))
                for a in data.get("assignees") or []
            ],
            created_at=created_at,
            due_date=self._parse_timestamp(data.get("due_date")),
            completed_at=(
                self._parse_timestamp(data.get("date_done"))
                or self._parse_timestamp(data.get("date_closed"))
            ),
            blocked_by=blocked_by,
            blocking=blocking,
            is_defect=bool(tag_set & self.defect_tags),
            is_rework=bool(tag_set & self.rework_tags),
            archived=bool(data.get("archived", False)),
            list_id=str((data.get("list") or {}).get("id")) if data.get("list") else None,
            space_id=str((data.get("space") or {}).get("id")) if data.get("space") else None,
            tags=tags,
        )

    @staticmethod
    def _parse_timestamp(value: Any) -> Optional[datetime]:
        """Parse a ClickUp millisecond epoch timestamp."""
        if value in (None, ""):
            return None
        try:
            return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
        except (TypeError, ValueError):
            logger.warning(f"[ClickUpRecordSource] Unparseable timestamp: {value!r}")
            return None

    # ==================== Roster ====================

    async def fetch_team_members(self, workspace_id: str) -> List[TeamMember]:
        """Read the workspace roster from the authorized workspaces listing."""
        data = await self._request("GET", "/team")
        for team in data.get("teams", []):
            if str(team.get("id")) != str(workspace_id):
                continue
            members = []
            for member in team.get("members") or []:
                user = member.get("user") or {}
                if user.get("id") is None:
                    continue
                members.append(TeamMember(
                    id=str(user["id"]),
                    username=user.get("username") or str(user["id"]),
                    email=user.get("email"),
                ))
            logger.info(f"[ClickUpRecordSource] Workspace {workspace_id} has {len(members)} members")
            return members

        raise DataSourceError(
            f"ClickUp workspace {workspace_id} not found among authorized workspaces",
            status_code=404,
            error_code=ErrorCode.NOT_FOUND_ERROR,
        )
