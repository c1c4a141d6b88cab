# Project Health - Analysis Router
"""
API endpoints for project health analysis.
"""

import logging
from typing import Any, AsyncIterator, Dict

from fastapi import APIRouter, Body, Depends, HTTPException

from project_health.adapters.clickup import ClickUpRecordSource
from project_health.config import get_settings
from project_health.errors import InvalidParameterError, ProjectHealthAnalysisError
from project_health.service import ProjectHealthAnalyzer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/project-health", tags=["project-health"])


async def get_analyzer() -> AsyncIterator[ProjectHealthAnalyzer]:
    """Analyzer reading from ClickUp, closed after the request."""
    settings = get_settings()
    if not settings.clickup_api_token:
        raise HTTPException(
            status_code=503,
            detail="ClickUp API token is not configured (set PROJECT_HEALTH_CLICKUP_API_TOKEN)"
        )

    async with ClickUpRecordSource(
        api_token=settings.clickup_api_token,
        base_url=settings.clickup_base_url,
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
        retry_delay=settings.retry_delay,
        defect_tags=settings.defect_tags,
        rework_tags=settings.rework_tags,
    ) as source:
        yield ProjectHealthAnalyzer(source, thresholds=settings.thresholds)


def _to_http_error(error: Exception) -> HTTPException:
    if isinstance(error, InvalidParameterError):
        return HTTPException(status_code=400, detail=error.to_dict())
    return HTTPException(status_code=502, detail=error.to_dict())


@router.post("/analyze")
async def analyze_project_health(
    params: Dict[str, Any] = Body(..., description="workspace_id, space_id, list_id, include_archived, analysis_depth"),
    analyzer: ProjectHealthAnalyzer = Depends(get_analyzer)
):
    """
    Analyze the health of a workspace, space or list.

    Returns the full assessment: summary, metrics, risks, insights,
    categorized recommendations and trends.
    """
    try:
        result = await analyzer.analyze_project_health(params)
    except (InvalidParameterError, ProjectHealthAnalysisError) as e:
        logger.error(f"[analyze_project_health] {e.message}")
        raise _to_http_error(e) from e
    return result.model_dump(by_alias=True, mode="json")


@router.post("/legacy")
async def analyze_project_health_legacy(
    params: Dict[str, Any] = Body(..., description="workspace_id, space_id, list_id, include_archived, analysis_depth"),
    analyzer: ProjectHealthAnalyzer = Depends(get_analyzer)
):
    """Flat health metrics summary."""
    try:
        result = await analyzer.analyze_project_health_legacy(params)
    except (InvalidParameterError, ProjectHealthAnalysisError) as e:
        logger.error(f"[analyze_project_health_legacy] {e.message}")
        raise _to_http_error(e) from e
    return result.model_dump(by_alias=True, mode="json")
