# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Unit tests for the record sources.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from project_health.adapters import ClickUpRecordSource, InMemoryRecordSource
from project_health.errors import DataSourceError, ErrorCode
from project_health.models import ScopeSelector

TOKEN = "pk_test_token"


def ms(instant):
    return str(int(instant.timestamp() * 1000))


def clickup_task(task_id, now, **overrides):
    task = {
        "id": task_id,
        "name": f"Task {task_id}",
        "status": {"status": "in progress", "type": "custom"},
        "date_created": ms(now - timedelta(days=10)),
        "date_closed": None,
        "date_done": None,
        "due_date": None,
        "archived": False,
        "assignees": [{"id": 1, "username": "alice", "email": "alice@example.com"}],
        "tags": [],
        "dependencies": [],
        "list": {"id": "L1"},
        "space": {"id": "S1"},
    }
    task.update(overrides)
    return task


class Recorder:
    """MockTransport handler that serves queued responses and records requests"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        # Fresh copy so a repeated response is never reused across requests
        return httpx.Response(response.status_code, headers=response.headers, content=response.content)


def make_source(handler, **kwargs):
    kwargs.setdefault("retry_delay", 0)
    return ClickUpRecordSource(TOKEN, transport=httpx.MockTransport(handler), **kwargs)


LIST_SCOPE = ScopeSelector(workspace_id="ws1", scope_type="list", scope_id="L1")
SPACE_SCOPE = ScopeSelector(workspace_id="ws1", scope_type="space", scope_id="S1")


class TestClickUpInit:
    """Tests for source initialization."""

    def test_requires_token(self):
        with pytest.raises(ValueError):
            ClickUpRecordSource("")

    def test_trailing_slash_removed(self):
        source = ClickUpRecordSource(TOKEN, base_url="https://api.clickup.com/api/v2/")
        assert source.base_url == "https://api.clickup.com/api/v2"

    @pytest.mark.asyncio
    async def test_context_manager(self):
        source = ClickUpRecordSource(TOKEN)
        assert source._client is None

        async with source:
            assert isinstance(source._client, httpx.AsyncClient)

        assert source._client is None


class TestClickUpRecords:
    """Tests for task fetching and mapping."""

    @pytest.mark.asyncio
    async def test_list_scope_request(self, now):
        handler = Recorder(httpx.Response(200, json={"tasks": [clickup_task("t1", now)], "last_page": True}))

        async with make_source(handler) as source:
            records = await source.fetch_records(LIST_SCOPE)

        assert [r.id for r in records] == ["t1"]
        request = handler.requests[0]
        assert request.url.path == "/api/v2/list/L1/task"
        assert request.headers["Authorization"] == TOKEN
        assert request.url.params["page"] == "0"
        assert request.url.params["archived"] == "false"
        assert request.url.params["include_closed"] == "true"
        assert request.url.params["subtasks"] == "true"

    @pytest.mark.asyncio
    async def test_space_scope_uses_workspace_search(self, now):
        handler = Recorder(httpx.Response(200, json={"tasks": [], "last_page": True}))

        async with make_source(handler) as source:
            await source.fetch_records(SPACE_SCOPE, include_archived=True)

        request = handler.requests[0]
        assert request.url.path == "/api/v2/team/ws1/task"
        assert request.url.params.get_list("space_ids[]") == ["S1"]
        assert request.url.params["archived"] == "true"

    @pytest.mark.asyncio
    async def test_pages_until_last_page(self, now):
        handler = Recorder(
            httpx.Response(200, json={"tasks": [clickup_task("t1", now), clickup_task("t2", now)], "last_page": False}),
            httpx.Response(200, json={"tasks": [clickup_task("t3", now)], "last_page": True}),
        )

        async with make_source(handler) as source:
            records = await source.fetch_records(LIST_SCOPE)

        assert [r.id for r in records] == ["t1", "t2", "t3"]
        assert [r.url.params["page"] for r in handler.requests] == ["0", "1"]

    @pytest.mark.asyncio
    async def test_pages_until_empty_page(self, now):
        handler = Recorder(
            httpx.Response(200, json={"tasks": [clickup_task("t1", now)]}),
            httpx.Response(200, json={"tasks": []}),
        )

        async with make_source(handler) as source:
            records = await source.fetch_records(LIST_SCOPE)

        assert len(records) == 1
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_task_mapping(self, now):
        done_at = now - timedelta(days=2)
        task = clickup_task(
            "t1",
            now,
            status={"status": "shipped", "type": "closed"},
            date_done=ms(done_at),
            date_closed=ms(now - timedelta(days=1)),
            due_date=ms(now - timedelta(days=3)),
            assignees=[{"id": 1, "username": "alice"}, {"id": 2, "username": None}],
            tags=[{"name": "Bug"}, {"name": "frontend"}],
            dependencies=[
                {"task_id": "t1", "depends_on": "t0", "type": 1},
                {"task_id": "t9", "depends_on": "t1", "type": 1},
            ],
        )
        handler = Recorder(httpx.Response(200, json={"tasks": [task], "last_page": True}))

        async with make_source(handler) as source:
            record = (await source.fetch_records(LIST_SCOPE))[0]

        assert record.status == "shipped"
        assert record.status_type == "closed"
        assert record.is_completed([])
        assert record.completed_at == done_at.replace(microsecond=0)
        assert record.due_date is not None
        assert record.assignees == ["alice", "2"]
        assert record.blocked_by == ["t0"]
        assert record.blocking == ["t9"]
        assert record.is_defect is True
        assert record.is_rework is False
        assert record.tags == ["Bug", "frontend"]
        assert record.list_id == "L1"
        assert record.space_id == "S1"

    @pytest.mark.asyncio
    async def test_task_without_creation_date_is_skipped(self, now, caplog):
        tasks = [clickup_task("t1", now), clickup_task("t2", now, date_created=None)]
        handler = Recorder(httpx.Response(200, json={"tasks": tasks, "last_page": True}))

        with caplog.at_level("WARNING", logger="project_health.adapters.clickup"):
            async with make_source(handler) as source:
                records = await source.fetch_records(LIST_SCOPE)

        assert [r.id for r in records] == ["t1"]
        assert any("t2" in record.message for record in caplog.records)

    def test_parse_timestamp(self, now):
        assert ClickUpRecordSource._parse_timestamp(None) is None
        assert ClickUpRecordSource._parse_timestamp("") is None
        assert ClickUpRecordSource._parse_timestamp("not-a-number") is None
        assert ClickUpRecordSource._parse_timestamp(ms(now)) == now


class TestClickUpErrors:
    """Tests for error mapping and retries."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,code", [
        (401, ErrorCode.AUTHENTICATION_ERROR),
        (403, ErrorCode.AUTHENTICATION_ERROR),
        (404, ErrorCode.NOT_FOUND_ERROR),
        (400, ErrorCode.DATA_SOURCE_ERROR),
    ])
    async def test_client_errors_not_retried(self, status, code):
        handler = Recorder(httpx.Response(status, json={"err": "nope"}))

        async with make_source(handler, max_retries=3) as source:
            with pytest.raises(DataSourceError) as exc_info:
                await source.fetch_records(LIST_SCOPE)

        assert exc_info.value.status_code == status
        assert exc_info.value.error_code == code
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_server_error_retried_then_raised(self):
        handler = Recorder(httpx.Response(500, text="boom"))

        async with make_source(handler, max_retries=3) as source:
            with pytest.raises(DataSourceError) as exc_info:
                await source.fetch_records(LIST_SCOPE)

        assert exc_info.value.status_code == 500
        assert len(handler.requests) == 3

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(self, now):
        handler = Recorder(
            httpx.Response(503),
            httpx.Response(200, json={"tasks": [clickup_task("t1", now)], "last_page": True}),
        )

        async with make_source(handler, max_retries=3) as source:
            records = await source.fetch_records(LIST_SCOPE)

        assert len(records) == 1
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_network_error_chained(self):
        handler = Recorder(httpx.ConnectError("connection refused"))

        async with make_source(handler, max_retries=2) as source:
            with pytest.raises(DataSourceError) as exc_info:
                await source.fetch_team_members("ws1")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.status_code is None
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_exponential_backoff(self):
        handler = Recorder(httpx.Response(502))

        with patch("project_health.adapters.clickup.asyncio.sleep", new_callable=AsyncMock) as sleep:
            async with make_source(handler, max_retries=3, retry_delay=1.0) as source:
                with pytest.raises(DataSourceError):
                    await source.fetch_records(LIST_SCOPE)

        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]


class TestClickUpTeamMembers:
    """Tests for roster fetching."""

    @pytest.mark.asyncio
    async def test_selects_workspace(self):
        teams = {"teams": [
            {"id": "other", "members": [{"user": {"id": 9, "username": "zed"}}]},
            {"id": "ws1", "members": [
                {"user": {"id": 1, "username": "alice", "email": "alice@example.com"}},
                {"user": {"id": 2, "username": "bob", "email": None}},
                {"user": {}},
            ]},
        ]}
        handler = Recorder(httpx.Response(200, json=teams))

        async with make_source(handler) as source:
            members = await source.fetch_team_members("ws1")

        assert handler.requests[0].url.path == "/api/v2/team"
        assert [m.username for m in members] == ["alice", "bob"]
        assert members[0].id == "1"
        assert members[0].email == "alice@example.com"

    @pytest.mark.asyncio
    async def test_unknown_workspace(self):
        handler = Recorder(httpx.Response(200, json={"teams": [{"id": "other", "members": []}]}))

        async with make_source(handler) as source:
            with pytest.raises(DataSourceError) as exc_info:
                await source.fetch_team_members("ws1")

        assert exc_info.value.error_code == ErrorCode.NOT_FOUND_ERROR


class TestInMemoryRecordSource:
    """Tests for the in-memory source."""

    @pytest.fixture
    def records(self, make_task):
        return [
            make_task("a", list_id="L1", space_id="S1"),
            make_task("b", list_id="L2", space_id="S1"),
            make_task("c", list_id="L3", space_id="S2"),
            make_task("d", list_id="L1", space_id="S1", archived=True),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("scope,include_archived,expected", [
        (ScopeSelector(workspace_id="ws1", scope_id="ws1"), False, ["a", "b", "c"]),
        (ScopeSelector(workspace_id="ws1", scope_id="ws1"), True, ["a", "b", "c", "d"]),
        (SPACE_SCOPE, False, ["a", "b"]),
        (LIST_SCOPE, True, ["a", "d"]),
    ])
    async def test_scope_and_archive_filtering(self, records, scope, include_archived, expected):
        source = InMemoryRecordSource(records)

        fetched = await source.fetch_records(scope, include_archived=include_archived)

        assert [r.id for r in fetched] == expected

    @pytest.mark.asyncio
    async def test_primed_errors(self, team):
        source = InMemoryRecordSource(team_members=team, team_error=DataSourceError("forbidden"))

        assert await source.fetch_records(LIST_SCOPE) == []
        with pytest.raises(DataSourceError):
            await source.fetch_team_members("ws1")
