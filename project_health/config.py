# Project Health Configuration
"""
Configuration management for the project health analyzer.

Service settings are read from the environment (``PROJECT_HEALTH_`` prefix)
and an optional ``.env`` file. All scoring weights and classification
thresholds live in ``HealthThresholds`` so the pipeline components can be
constructed with a tuned copy instead of relying on scattered literals.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings

RecommendationHorizon = Literal["immediate", "short_term", "long_term"]


class ScoreWeights(BaseModel):
    """Weights of the six sub-metrics in the overall score"""
    completion: float = Field(0.25, gt=0, description="Task completion rate")
    timeline: float = Field(0.20, gt=0, description="Timeline adherence")
    quality: float = Field(0.20, gt=0, description="Quality indicators")
    workload: float = Field(0.15, gt=0, description="Workload distribution")
    dependencies: float = Field(0.10, gt=0, description="Dependency health")
    velocity: float = Field(0.10, gt=0, description="Velocity trend")

    @model_validator(mode="after")
    def _check_total(self) -> "ScoreWeights":
        total = (
            self.completion + self.timeline + self.quality
            + self.workload + self.dependencies + self.velocity
        )
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Score weights must sum to 1.0, got {total:.4f}")
        return self


class KeywordRule(BaseModel):
    """Routes a free-text recommendation to a horizon when it contains a keyword"""
    keywords: List[str]
    horizon: RecommendationHorizon


class HealthThresholds(BaseModel):
    """Tunable constants shared by every stage of the analysis pipeline."""

    weights: ScoreWeights = Field(default_factory=ScoreWeights)

    # Grade bands, checked top-down
    grade_a_min: float = 90.0
    grade_b_min: float = 80.0
    grade_c_min: float = 70.0
    grade_d_min: float = 60.0

    # Risk rules
    overall_critical_below: float = 40.0
    overdue_critical_above: int = 10
    overdue_warning_above: int = 5
    adherence_risk_below: float = 70.0
    adherence_high_below: float = 50.0
    dependency_risk_below: float = 70.0
    dependency_high_blocked_above: int = 5
    quality_risk_below: float = 60.0
    quality_high_bug_rate_above: float = 0.15
    velocity_risk_min_confidence: float = 70.0

    # Insight rules
    strength_completion_min: float = 80.0
    strength_quality_min: float = 80.0
    improvement_adherence_below: float = 70.0
    improvement_dependency_below: float = 70.0
    critical_overdue_above: int = 10

    # Trend rules: improving at or above, declining strictly below
    quality_improving_min: float = 75.0
    quality_declining_below: float = 60.0
    timeline_improving_min: float = 80.0
    timeline_declining_below: float = 60.0

    # Metric computation
    low_completion_below: float = 50.0
    velocity_stable_ratio: float = 0.10
    workload_deviation_ratio: float = 0.30
    unknown_workload_score: float = 85.0
    closed_statuses: List[str] = Field(
        default_factory=lambda: ["complete", "completed", "closed", "done", "resolved"]
    )

    # Recommendation categorization
    recommendation_rules: List[KeywordRule] = Field(
        default_factory=lambda: [
            KeywordRule(keywords=["immediately", "urgent"], horizon="immediate"),
            KeywordRule(keywords=["review", "implement"], horizon="short_term"),
        ]
    )
    fallback_horizon: RecommendationHorizon = "long_term"
    default_immediate: str = "Continue monitoring project health metrics"
    default_short_term: str = "Review and optimize current processes"
    default_long_term: str = "Establish continuous improvement practices"


class Settings(BaseSettings):
    """Project health service settings."""

    # Service settings
    service_name: str = "Project Health Analyzer"
    service_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8010

    # ClickUp data source
    clickup_api_token: Optional[str] = None
    clickup_base_url: str = "https://api.clickup.com/api/v2"
    request_timeout: float = 30.0  # seconds
    max_retries: int = 3
    retry_delay: float = 1.0  # seconds
    defect_tags: List[str] = Field(default_factory=lambda: ["bug", "defect"])
    rework_tags: List[str] = Field(default_factory=lambda: ["rework", "reopened"])

    thresholds: HealthThresholds = Field(default_factory=HealthThresholds)

    class Config:
        env_prefix = "PROJECT_HEALTH_"
        env_file = ".env"
        env_nested_delimiter = "__"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
