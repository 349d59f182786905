"""Weighted composite scoring and verdict thresholds.

Composite per component: weighted sum of the scored dimensions. When an
analyzer leaves a dimension null, the remaining weights are renormalised so
they still sum to 1.0; a null is never treated as a zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from .errors import EmptyBatch
from .models import AnalyzerArtifact, Dimension, DimensionScores, Verdict

DIMENSION_WEIGHTS: dict[Dimension, float] = {
    Dimension.STRUCTURE: 0.15,
    Dimension.BEST_PRACTICES: 0.20,
    Dimension.TOOL_SECURITY: 0.15,
    Dimension.COMPLETENESS: 0.15,
    Dimension.INTEGRATION: 0.10,
    Dimension.DOMAIN_DEPTH: 0.10,
    Dimension.DEPENDENCY_HEALTH: 0.15,
}

# Lower bound (inclusive) for each verdict, checked top-down.
VERDICT_THRESHOLDS: tuple[tuple[float, Verdict], ...] = (
    (8.0, Verdict.EXCELLENT),
    (7.0, Verdict.GOOD),
    (5.0, Verdict.NEEDS_IMPROVEMENT),
    (3.0, Verdict.POOR),
)


def effective_weights(scores: DimensionScores) -> dict[Dimension, float]:
    """Weights of the scored dimensions, renormalised to sum to 1.0."""
    present = scores.present()
    total = math.fsum(DIMENSION_WEIGHTS[d] for d in present)
    if total == 0:
        return {}
    return {d: DIMENSION_WEIGHTS[d] / total for d in present}


def composite_score(scores: DimensionScores) -> Optional[float]:
    """Weighted composite for one component, or None if nothing was scored."""
    present = scores.present()
    if not present:
        return None
    total_weight = math.fsum(DIMENSION_WEIGHTS[d] for d in present)
    weighted = math.fsum(value * DIMENSION_WEIGHTS[d] for d, value in present.items())
    # Clamp float noise so a perfect score never exceeds the scale
    return min(10.0, max(0.0, weighted / total_weight))


def verdict_for(score: float) -> Verdict:
    for lower, verdict in VERDICT_THRESHOLDS:
        if score >= lower:
            return verdict
    return Verdict.CRITICAL


@dataclass
class ComponentScore:
    analyzer: str
    name: str
    file_path: str
    composite: Optional[float]
    dimensions_scored: list[Dimension] = field(default_factory=list)

    @property
    def verdict(self) -> Optional[Verdict]:
        return verdict_for(self.composite) if self.composite is not None else None

    def to_dict(self) -> dict:
        return {
            "analyzer": self.analyzer,
            "name": self.name,
            "file_path": self.file_path,
            "composite": self.composite,
            "verdict": self.verdict.value if self.verdict else None,
            "dimensions_scored": [d.value for d in self.dimensions_scored],
        }


@dataclass
class ScoreReport:
    components: list[ComponentScore]
    overall: float

    @property
    def verdict(self) -> Verdict:
        return verdict_for(self.overall)

    @property
    def scored(self) -> list[ComponentScore]:
        return [c for c in self.components if c.composite is not None]

    @property
    def unscored(self) -> list[ComponentScore]:
        return [c for c in self.components if c.composite is None]


def aggregate_scores(artifacts: list[AnalyzerArtifact]) -> ScoreReport:
    """Score every component of every artifact and average the composites.

    Components that share a name across analyzers are kept as separate
    entries. Raises EmptyBatch when no component has any scored dimension.
    """
    components: list[ComponentScore] = []
    for artifact in artifacts:
        for component in artifact.components:
            components.append(
                ComponentScore(
                    analyzer=artifact.analyzer,
                    name=component.name,
                    file_path=component.file_path,
                    composite=composite_score(component.scores),
                    dimensions_scored=list(component.scores.present()),
                )
            )

    composites = [c.composite for c in components if c.composite is not None]
    if not composites:
        raise EmptyBatch(
            f"no scored components across {len(artifacts)} artifact(s); overall score is undefined"
        )

    return ScoreReport(components=components, overall=math.fsum(composites) / len(composites))
