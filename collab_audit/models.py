"""Pydantic models for analyzer artifacts written by the /audit workflow."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

SCHEMA_VERSION = "1.0.0"


class Dimension(str, Enum):
    STRUCTURE = "structure"
    BEST_PRACTICES = "best_practices"
    TOOL_SECURITY = "tool_security"
    COMPLETENESS = "completeness"
    INTEGRATION = "integration"
    DOMAIN_DEPTH = "domain_depth"
    DEPENDENCY_HEALTH = "dependency_health"


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    SUGGESTION = "suggestion"

    @property
    def rank(self) -> int:
        """Sort key: lower is more severe."""
        return SEVERITY_ORDER.index(self)


SEVERITY_ORDER = (Severity.CRITICAL, Severity.WARNING, Severity.SUGGESTION)


class Effort(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Verdict(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    NEEDS_IMPROVEMENT = "NEEDS_IMPROVEMENT"
    POOR = "POOR"
    CRITICAL = "CRITICAL"


class DimensionScores(BaseModel):
    """Per-dimension scores. ``None`` means the analyzer did not score it."""

    model_config = ConfigDict(frozen=True)

    structure: Optional[StrictFloat] = Field(default=None, ge=0, le=10)
    best_practices: Optional[StrictFloat] = Field(default=None, ge=0, le=10)
    tool_security: Optional[StrictFloat] = Field(default=None, ge=0, le=10)
    completeness: Optional[StrictFloat] = Field(default=None, ge=0, le=10)
    integration: Optional[StrictFloat] = Field(default=None, ge=0, le=10)
    domain_depth: Optional[StrictFloat] = Field(default=None, ge=0, le=10)
    dependency_health: Optional[StrictFloat] = Field(default=None, ge=0, le=10)

    def get(self, dimension: Dimension) -> Optional[float]:
        return getattr(self, dimension.value)

    def present(self) -> dict[Dimension, float]:
        """Scored dimensions only, in declaration order."""
        scored: dict[Dimension, float] = {}
        for dimension in Dimension:
            value = self.get(dimension)
            if value is not None:
                scored[dimension] = value
        return scored


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: Severity
    category: StrictStr
    description: StrictStr


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    priority: StrictInt = Field(ge=1)
    action: StrictStr
    effort: Effort
    impact: StrictStr


class ComponentResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: StrictStr
    file_path: StrictStr
    scores: DimensionScores
    issues: list[Issue] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)

    @property
    def critical_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == Severity.CRITICAL)


class AnalysisSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_components: StrictInt = Field(ge=0)
    components_with_issues: StrictInt = Field(ge=0)
    critical_issues: StrictInt = Field(ge=0)
    average_score: Optional[StrictFloat] = Field(default=None, ge=0, le=10)


class Analysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    components: list[ComponentResult]
    summary: AnalysisSummary

    @model_validator(mode="after")
    def _check_summary(self) -> "Analysis":
        count = len(self.components)
        if self.summary.total_components != count:
            raise ValueError(
                f"summary.total_components is {self.summary.total_components} "
                f"but {count} component(s) are present"
            )
        critical = sum(c.critical_count for c in self.components)
        if self.summary.critical_issues != critical:
            raise ValueError(
                f"summary.critical_issues is {self.summary.critical_issues} "
                f"but components contain {critical} critical issue(s)"
            )
        return self


class AnalyzerArtifact(BaseModel):
    """One analyzer's JSON output. Written once, consumed read-only."""

    model_config = ConfigDict(frozen=True)

    analyzer: StrictStr = Field(min_length=1)
    timestamp: StrictStr
    version: StrictStr
    metadata: dict[str, Any]
    analysis: Analysis

    @field_validator("timestamp")
    @classmethod
    def _iso_timestamp(cls, value: str) -> str:
        try:
            datetime.fromisoformat(value)
        except ValueError:
            raise ValueError(f"timestamp {value!r} is not ISO-8601") from None
        return value

    @property
    def components(self) -> list[ComponentResult]:
        return self.analysis.components


def summarize_components(
    components: list[ComponentResult],
    average_score: Optional[float] = None,
) -> AnalysisSummary:
    """Build a summary that satisfies the Analysis invariants by construction."""
    return AnalysisSummary(
        total_components=len(components),
        components_with_issues=sum(1 for c in components if c.issues),
        critical_issues=sum(c.critical_count for c in components),
        average_score=average_score,
    )
