"""QA aggregation over one audit directory.

Loads every analyzer artifact, scores and collates them, and emits the
composite artifact next to the inputs. Individual bad files degrade the
result (they are reported), they never abort it. An audit with nothing to
score finishes with status "empty" and no score.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .collation import CollatedRecommendation, IssueCollation, collate_issues, collate_recommendations
from .emitter import new_artifact, write_artifact
from .errors import EmptyBatch
from .history import AuditHistory
from .loader import LoadResult, load_artifacts
from .models import SCHEMA_VERSION, AnalyzerArtifact, Verdict
from .scoring import ScoreReport, aggregate_scores

logger = logging.getLogger(__name__)

AGGREGATOR_NAME = "qa-aggregator"
DEFAULT_OUTPUT_NAME = f"{AGGREGATOR_NAME}.json"


@dataclass
class AuditOutcome:
    audit_id: str
    directory: Path
    load: LoadResult
    scores: Optional[ScoreReport] = None
    issues: IssueCollation = field(default_factory=IssueCollation)
    recommendations: list[CollatedRecommendation] = field(default_factory=list)
    composite: Optional[AnalyzerArtifact] = None
    output_path: Optional[Path] = None
    previous: Optional[dict] = None
    duration_ms: float = 0.0

    @property
    def status(self) -> str:
        return "scored" if self.scores is not None else "empty"

    @property
    def overall(self) -> Optional[float]:
        return self.scores.overall if self.scores else None

    @property
    def verdict(self) -> Optional[Verdict]:
        return self.scores.verdict if self.scores else None

    @property
    def score_delta(self) -> Optional[float]:
        if self.scores is None or not self.previous or self.previous.get("overall_score") is None:
            return None
        return self.scores.overall - self.previous["overall_score"]

    def to_dict(self) -> dict:
        return {
            "audit_id": self.audit_id,
            "directory": str(self.directory),
            "status": self.status,
            "overall_score": self.overall,
            "verdict": self.verdict.value if self.verdict else None,
            "artifacts_loaded": self.load.loaded,
            "artifacts_failed": self.load.failed,
            "no_artifacts": self.load.no_artifacts,
            "warnings": self.load.warnings(),
            "components": [c.to_dict() for c in self.scores.components] if self.scores else [],
            "issue_counts": self.issues.counts_by_name(),
            "issues": [i.to_dict() for i in self.issues.issues],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "previous_score": self.previous.get("overall_score") if self.previous else None,
            "score_delta": self.score_delta,
            "output_path": str(self.output_path) if self.output_path else None,
            "duration_ms": self.duration_ms,
        }


def build_composite_artifact(
    audit_id: str,
    load: LoadResult,
    scores: ScoreReport,
    issues: IssueCollation,
    previous: Optional[dict] = None,
    duration_ms: Optional[float] = None,
) -> AnalyzerArtifact:
    """Derived artifact holding every source component plus the aggregate results."""
    components = [c for artifact in load.artifacts for c in artifact.components]
    metadata: dict = {
        "audit_id": audit_id,
        "scope": "composite",
        "component_count": len(components),
        "sources": [
            {"file": entry.filename, "analyzer": entry.artifact.analyzer}
            for entry in load.entries
            if entry.artifact is not None
        ],
        "failed_files": [
            {"file": entry.filename, "kind": entry.error.kind, "error": str(entry.error)}
            for entry in load.entries
            if entry.error is not None
        ],
        "overall_score": scores.overall,
        "verdict": scores.verdict.value,
        "component_scores": [c.to_dict() for c in scores.components],
        "unscored_components": len(scores.unscored),
        "issue_counts": issues.counts_by_name(),
    }
    if previous and previous.get("overall_score") is not None:
        metadata["previous_audit_id"] = previous["audit_id"]
        metadata["previous_score"] = previous["overall_score"]
        metadata["score_delta"] = scores.overall - previous["overall_score"]
    if duration_ms is not None:
        metadata["duration_ms"] = duration_ms

    return new_artifact(AGGREGATOR_NAME, components, metadata, average_score=scores.overall)


def run_audit(
    audit_dir: "Path | str",
    audit_id: Optional[str] = None,
    expected_version: str = SCHEMA_VERSION,
    output_name: str = DEFAULT_OUTPUT_NAME,
    write: bool = True,
    history: Optional[AuditHistory] = None,
) -> AuditOutcome:
    """Aggregate every artifact in *audit_dir*.

    Args:
        audit_dir: Directory holding one ``<analyzer>.json`` per analyzer.
        audit_id: Defaults to the directory name.
        expected_version: Artifacts declaring another version are skipped.
        output_name: File name of the composite artifact; never read back as input.
        write: Write the composite artifact into *audit_dir*.
        history: When given, the result is recorded and compared with the
            previous scored audit.
    """
    t0 = time.monotonic()
    audit_dir = Path(audit_dir)
    audit_id = audit_id or audit_dir.name

    load = load_artifacts(audit_dir, expected_version=expected_version, exclude=(output_name,))
    outcome = AuditOutcome(audit_id=audit_id, directory=audit_dir, load=load)
    outcome.issues = collate_issues(load.artifacts)
    outcome.recommendations = collate_recommendations(load.artifacts)

    try:
        outcome.scores = aggregate_scores(load.artifacts)
    except EmptyBatch as e:
        logger.warning("Audit %s: %s", audit_id, e)

    if history is not None:
        outcome.previous = history.previous(audit_id)

    if outcome.scores is not None:
        outcome.composite = build_composite_artifact(
            audit_id,
            load,
            outcome.scores,
            outcome.issues,
            previous=outcome.previous,
            duration_ms=(time.monotonic() - t0) * 1000,
        )
        if write:
            try:
                outcome.output_path = write_artifact(audit_dir, outcome.composite, filename=output_name)
            except OSError as e:
                logger.error("Audit %s: could not write composite artifact: %s", audit_id, e)

    if history is not None:
        history.record(
            audit_id,
            outcome.overall,
            outcome.verdict.value if outcome.verdict else None,
            total_components=len(outcome.scores.components) if outcome.scores else 0,
            critical_issues=outcome.issues.counts_by_name()["critical"],
            artifacts_loaded=load.loaded,
            artifacts_failed=load.failed,
        )

    outcome.duration_ms = (time.monotonic() - t0) * 1000
    if outcome.scores is not None:
        logger.info(
            "Audit %s: %.2f (%s) from %d component(s), %d warning(s)",
            audit_id,
            outcome.scores.overall,
            outcome.scores.verdict.value,
            len(outcome.scores.scored),
            load.failed,
        )
    return outcome
