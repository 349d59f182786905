"""Audit artifact aggregation for the /audit workflow.

Analyzer agents each write one JSON artifact per audit. This package
validates those artifacts, loads an audit directory, computes weighted
composite scores and verdicts, collates issues, and emits the composite
artifact.
"""

from .aggregator import AuditOutcome, build_composite_artifact, run_audit
from .collation import collate_issues, collate_recommendations
from .errors import ArtifactError, AuditError, EmptyBatch, ParseError, ReadError, SchemaError, VersionMismatch
from .loader import LoadResult, load_artifacts
from .models import SCHEMA_VERSION, AnalyzerArtifact, ComponentResult, Dimension, Severity, Verdict
from .scoring import DIMENSION_WEIGHTS, aggregate_scores, composite_score, verdict_for
from .validator import parse_artifact, validate_artifact

__all__ = [
    "SCHEMA_VERSION",
    "DIMENSION_WEIGHTS",
    "AnalyzerArtifact",
    "ArtifactError",
    "AuditError",
    "AuditOutcome",
    "ComponentResult",
    "Dimension",
    "EmptyBatch",
    "LoadResult",
    "ParseError",
    "ReadError",
    "SchemaError",
    "Severity",
    "Verdict",
    "VersionMismatch",
    "aggregate_scores",
    "build_composite_artifact",
    "collate_issues",
    "collate_recommendations",
    "composite_score",
    "load_artifacts",
    "parse_artifact",
    "run_audit",
    "validate_artifact",
    "verdict_for",
]
