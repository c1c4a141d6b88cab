# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Data models for project health analysis.

Input records and the team roster come from an external data source and are
never mutated. Everything the pipeline computes is a frozen model that
serializes to the camelCase JSON shape consumed by the report front end.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Iterable, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from project_health.errors import InvalidTimeframeError


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Interpret naive timestamps as UTC so they compare with aware ones."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class HealthModel(BaseModel):
    """Immutable base for computed analysis models"""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class AnalysisDepth(str, Enum):
    """Lookback breadth requested by the client"""
    BASIC = "basic"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"


DEPTH_DAYS: Dict[AnalysisDepth, int] = {
    AnalysisDepth.BASIC: 7,
    AnalysisDepth.DETAILED: 30,
    AnalysisDepth.COMPREHENSIVE: 90,
}


class RiskLevel(str, Enum):
    """Risk severity, most severe first"""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def priority(self) -> int:
        return {"critical": 4, "high": 3, "medium": 2, "low": 1}[self.value]


class RiskCategory(str, Enum):
    """Condition a risk finding was raised for"""
    OVERALL = "overall"
    OVERDUE = "overdue"
    TIMELINE = "timeline"
    WORKLOAD = "workload"
    DEPENDENCIES = "dependencies"
    VELOCITY = "velocity"
    QUALITY = "quality"


class VelocityDirection(str, Enum):
    """Throughput change between two consecutive windows"""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class TrendDirection(str, Enum):
    """Directional label reported to the client"""
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class HealthGrade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class HealthStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


# External inputs

class TaskRecord(HealthModel):
    """A task/issue snapshot as read from the data source"""
    id: str = Field(..., description="Task identifier")
    name: str = Field("", description="Task title")
    status: str = Field("", description="Raw status text")
    status_type: Optional[str] = Field(None, description="Provider status category (open, custom, done, closed)")
    assignees: List[str] = Field(default_factory=list, description="Assignee usernames")
    created_at: datetime = Field(..., description="Creation timestamp")
    due_date: Optional[datetime] = Field(None, description="Committed due date")
    completed_at: Optional[datetime] = Field(None, description="Completion timestamp")
    blocked_by: List[str] = Field(default_factory=list, description="Ids of tasks this task waits on")
    blocking: List[str] = Field(default_factory=list, description="Ids of tasks this task holds up")
    is_defect: bool = Field(False, description="Task tracks a defect")
    is_rework: bool = Field(False, description="Task was reopened or reworked")
    archived: bool = Field(False, description="Task is archived")
    list_id: Optional[str] = Field(None, description="Containing list")
    space_id: Optional[str] = Field(None, description="Containing space")
    tags: List[str] = Field(default_factory=list, description="Tag names")

    @field_validator("created_at", "due_date", "completed_at")
    @classmethod
    def _normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    def is_completed(self, closed_statuses: Iterable[str]) -> bool:
        """Whether the task is done according to its timestamp, status type or status text."""
        if self.completed_at is not None:
            return True
        if self.status_type and self.status_type.lower() in ("closed", "done"):
            return True
        return self.status.strip().lower() in {s.lower() for s in closed_statuses}

    @property
    def has_dependencies(self) -> bool:
        return bool(self.blocked_by or self.blocking)


class TeamMember(HealthModel):
    """A member of the workspace roster"""
    id: str
    username: str
    email: Optional[str] = None


class AnalysisTimeframe(HealthModel):
    """Window of time the analysis looks at; ``end`` is the reference instant."""
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _normalize(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _check_order(self) -> "AnalysisTimeframe":
        if self.end <= self.start:
            raise InvalidTimeframeError(
                f"end ({self.end.isoformat()}) must be after start ({self.start.isoformat()})"
            )
        return self

    @classmethod
    def from_depth(
        cls,
        depth: AnalysisDepth = AnalysisDepth.DETAILED,
        now: Optional[datetime] = None
    ) -> "AnalysisTimeframe":
        """Build the lookback window for an analysis depth ending at ``now``."""
        end = ensure_utc(now) if now else datetime.now(timezone.utc)
        return cls(start=end - timedelta(days=DEPTH_DAYS[AnalysisDepth(depth)]), end=end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def days(self) -> float:
        return self.duration.total_seconds() / 86400

    def previous_window(self) -> "AnalysisTimeframe":
        """The equal-length window immediately preceding this one."""
        return AnalysisTimeframe(start=self.start - self.duration, end=self.start)


# Request

class ScopeSelector(HealthModel):
    """Resolved scope of the records to analyze"""
    workspace_id: str
    scope_type: Literal["workspace", "space", "list"] = "workspace"
    scope_id: str


class ProjectHealthAnalysisParams(BaseModel):
    """Parameters of a project health analysis request"""
    workspace_id: str = Field(..., description="Workspace to analyze")
    space_id: Optional[str] = Field(None, description="Restrict the analysis to one space")
    list_id: Optional[str] = Field(None, description="Restrict the analysis to one list")
    include_archived: bool = Field(False, description="Include archived tasks")
    analysis_depth: AnalysisDepth = Field(AnalysisDepth.DETAILED, description="Lookback breadth")

    @field_validator("workspace_id")
    @classmethod
    def _require_workspace(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("workspace_id must not be blank")
        return value

    @field_validator("space_id", "list_id")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value.strip() if value else value

    @property
    def scope(self) -> ScopeSelector:
        """Narrowest scope wins: list, then space, then workspace."""
        if self.list_id:
            return ScopeSelector(workspace_id=self.workspace_id, scope_type="list", scope_id=self.list_id)
        if self.space_id:
            return ScopeSelector(workspace_id=self.workspace_id, scope_type="space", scope_id=self.space_id)
        return ScopeSelector(workspace_id=self.workspace_id, scope_type="workspace", scope_id=self.workspace_id)


# Computed metrics

class VelocityTrend(HealthModel):
    current: float = Field(0.0, description="Tasks completed per week in the analysis window")
    previous: float = Field(0.0, description="Tasks completed per week in the preceding window")
    trend: VelocityDirection = VelocityDirection.STABLE
    confidence: float = Field(50.0, description="Confidence in the trend (0-100)")
    score: float = Field(0.0, description="Normalized velocity score (0-100)")


class WorkloadDistribution(HealthModel):
    balanced: bool = True
    overloaded_members: List[str] = Field(default_factory=list)
    underutilized_members: List[str] = Field(default_factory=list)
    member_loads: Dict[str, int] = Field(default_factory=dict, description="Open tasks per roster member")
    unassigned_tasks: int = 0
    distribution_score: float = Field(100.0, description="Balance score (0-100)")


class DependencyHealth(HealthModel):
    total_dependencies: int = 0
    blocked_tasks: int = 0
    circular_dependencies: int = 0
    health_score: float = Field(100.0, description="Dependency health (0-100)")


class QualityIndicators(HealthModel):
    bug_rate: float = 0.0
    rework_frequency: float = 0.0
    quality_score: float = Field(100.0, description="Quality score (0-100)")


class TimelineAdherence(HealthModel):
    on_time_delivery: float = Field(100.0, description="Percentage delivered by the due date")
    average_delay: float = Field(0.0, description="Mean slip of late tasks in days")
    schedule_variance: float = Field(0.0, description="Standard deviation of slip in days")
    adherence_score: float = Field(100.0, description="Timeline adherence (0-100)")


class DetailedHealthMetrics(HealthModel):
    """Complete metric set computed from one snapshot"""
    overall_score: float
    task_completion_rate: float
    overdue_tasks_count: int
    blocked_tasks_count: int
    average_task_age: float
    team_velocity: float
    velocity_trend: VelocityTrend
    workload_distribution: WorkloadDistribution
    dependency_health: DependencyHealth
    quality_indicators: QualityIndicators
    timeline_adherence: TimelineAdherence
    risk_factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class RiskAssessment(HealthModel):
    level: RiskLevel
    category: RiskCategory
    description: str
    impact: str = ""
    recommendation: str
    confidence: Optional[float] = None


# Result

class HealthSummary(HealthModel):
    overall_score: float
    health_grade: HealthGrade
    status: HealthStatus


class HealthInsights(HealthModel):
    key_strengths: List[str] = Field(default_factory=list)
    critical_issues: List[str] = Field(default_factory=list)
    improvement_areas: List[str] = Field(default_factory=list)


class CategorizedRecommendations(HealthModel):
    immediate: List[str] = Field(default_factory=list)
    short_term: List[str] = Field(default_factory=list)
    long_term: List[str] = Field(default_factory=list)


class HealthTrends(HealthModel):
    velocity_trend: TrendDirection
    quality_trend: TrendDirection
    timeline_trend: TrendDirection


class ProjectHealthAnalysisResult(HealthModel):
    """Final assessment returned to the caller"""
    summary: HealthSummary
    metrics: DetailedHealthMetrics
    risks: List[RiskAssessment] = Field(default_factory=list)
    insights: HealthInsights
    recommendations: CategorizedRecommendations
    trends: HealthTrends
    timeframe: AnalysisTimeframe
    analysis_depth: AnalysisDepth


class ProjectHealthMetrics(HealthModel):
    """Flat summary kept for callers of the legacy entry point"""
    overall_score: float
    task_completion_rate: float
    overdue_tasks_count: int
    blocked_tasks_count: int
    average_task_age: float
    team_velocity: float
    risk_factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
