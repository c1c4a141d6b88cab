# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Project health service - main entry point for health analysis."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from project_health.adapters.base import BaseRecordSource
from project_health.assessors import (
    InsightGenerator,
    RecommendationCategorizer,
    RiskAssessor,
    SummaryBuilder,
    TrendAnalyzer,
)
from project_health.calculators import HealthMetricsCalculator
from project_health.config import HealthThresholds
from project_health.errors import InvalidParameterError, ProjectHealthAnalysisError
from project_health.models import (
    AnalysisDepth,
    AnalysisTimeframe,
    ProjectHealthAnalysisParams,
    ProjectHealthAnalysisResult,
    ProjectHealthMetrics,
    TaskRecord,
    TeamMember,
)

logger = logging.getLogger(__name__)

ParamsInput = Union[ProjectHealthAnalysisParams, Dict[str, Any]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectHealthAnalyzer:
    """
    Runs the health analysis pipeline over one fetched snapshot.

    The analyzer holds no per-call state, so one instance can serve many
    concurrent analyses.
    """

    def __init__(
        self,
        source: BaseRecordSource,
        thresholds: Optional[HealthThresholds] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the analyzer.

        Args:
            source: Record source the snapshot is read from
            thresholds: Scoring weights and classification thresholds
            clock: Returns the reference instant for the analysis window
        """
        self.source = source
        self.thresholds = thresholds or HealthThresholds()
        self.clock = clock or _utcnow

        self.metrics_calculator = HealthMetricsCalculator(self.thresholds)
        self.risk_assessor = RiskAssessor(self.thresholds)
        self.insight_generator = InsightGenerator(self.thresholds)
        self.recommendation_categorizer = RecommendationCategorizer(self.thresholds)
        self.trend_analyzer = TrendAnalyzer(self.thresholds)
        self.summary_builder = SummaryBuilder(self.thresholds)

    async def analyze_project_health(self, params: ParamsInput) -> ProjectHealthAnalysisResult:
        """
        Analyze the health of a workspace, space or list.

        Args:
            params: Analysis parameters, as a model or a plain dict

        Returns:
            ProjectHealthAnalysisResult

        Raises:
            InvalidParameterError: If a parameter is missing or malformed
            ProjectHealthAnalysisError: If the records could not be fetched
        """
        params = self._validate_params(params)
        scope = params.scope
        timeframe = AnalysisTimeframe.from_depth(params.analysis_depth, now=self.clock())

        logger.info(
            f"[ProjectHealthAnalyzer] Starting {params.analysis_depth.value} analysis for "
            f"{scope.scope_type} {scope.scope_id} ({timeframe.start.isoformat()} - {timeframe.end.isoformat()})"
        )

        records, team_members = await asyncio.gather(
            self._fetch_records(params),
            self._fetch_team_members(params.workspace_id),
        )
        logger.info(
            f"[ProjectHealthAnalyzer] Fetched {len(records)} records and {len(team_members)} team members"
        )

        result = self.assess(records, team_members, timeframe, params.analysis_depth)

        logger.info(
            f"[ProjectHealthAnalyzer] Analysis complete: score={result.summary.overall_score} "
            f"grade={result.summary.health_grade.value} risks={len(result.risks)}"
        )
        return result

    async def analyze_project_health_legacy(self, params: ParamsInput) -> ProjectHealthMetrics:
        """Flat metrics summary for callers of the pre-assessment interface."""
        result = await self.analyze_project_health(params)
        metrics = result.metrics
        return ProjectHealthMetrics(
            overall_score=metrics.overall_score,
            task_completion_rate=metrics.task_completion_rate,
            overdue_tasks_count=metrics.overdue_tasks_count,
            blocked_tasks_count=metrics.blocked_tasks_count,
            average_task_age=metrics.average_task_age,
            team_velocity=metrics.team_velocity,
            risk_factors=metrics.risk_factors,
            recommendations=metrics.recommendations,
        )

    def assess(
        self,
        records: Sequence[TaskRecord],
        team_members: Sequence[TeamMember],
        timeframe: AnalysisTimeframe,
        analysis_depth: AnalysisDepth = AnalysisDepth.DETAILED
    ) -> ProjectHealthAnalysisResult:
        """
        Run the pure part of the pipeline over an already fetched snapshot.

        Raises:
            InvalidTimeframeError: If the timeframe does not end after it starts
        """
        metrics = self.metrics_calculator.calculate_health_score(records, team_members, timeframe)
        risks = self.risk_assessor.analyze_risks(metrics)
        trends = self.trend_analyzer.analyze_trends(metrics)
        insights = self.insight_generator.generate_insights(metrics, risks)
        recommendations = self.recommendation_categorizer.categorize_recommendations(
            metrics.recommendations, risks
        )
        summary = self.summary_builder.create_summary(metrics)

        return ProjectHealthAnalysisResult(
            summary=summary,
            metrics=metrics,
            risks=risks,
            insights=insights,
            recommendations=recommendations,
            trends=trends,
            timeframe=timeframe,
            analysis_depth=analysis_depth,
        )

    @staticmethod
    def _validate_params(params: ParamsInput) -> ProjectHealthAnalysisParams:
        if isinstance(params, ProjectHealthAnalysisParams):
            return params
        if not isinstance(params, dict):
            raise InvalidParameterError("params", f"expected a mapping, got {type(params).__name__}")
        try:
            return ProjectHealthAnalysisParams.model_validate(params)
        except ValidationError as e:
            error = e.errors()[0]
            parameter = ".".join(str(part) for part in error["loc"]) or "params"
            raise InvalidParameterError(parameter, error["msg"]) from e

    async def _fetch_records(self, params: ProjectHealthAnalysisParams) -> List[TaskRecord]:
        try:
            return await self.source.fetch_records(params.scope, include_archived=params.include_archived)
        except Exception as e:
            logger.error(f"[ProjectHealthAnalyzer] Failed to fetch records: {e}")
            raise ProjectHealthAnalysisError(e, stage="fetch_records") from e

    async def _fetch_team_members(self, workspace_id: str) -> List[TeamMember]:
        # Roster only feeds the workload metric; analysis continues without it
        try:
            return await self.source.fetch_team_members(workspace_id)
        except Exception as e:
            logger.warning(f"[ProjectHealthAnalyzer] Team roster unavailable, continuing without it: {e}")
            return []
