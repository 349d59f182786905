"""Audit MCP server."""

import logging
from typing import Optional

from fastmcp import FastMCP

from .aggregator import run_audit
from .collation import collate_recommendations, issue_report
from .config import get_audit_dir, get_history_path, list_audit_ids, load_audit_config
from .errors import ArtifactError
from .history import AuditHistory
from .loader import load_artifacts, read_artifact

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

mcp = FastMCP("Collab Intelligence Audit")

config = load_audit_config()


@mcp.tool()
def list_audits() -> dict:
    """List audit ids that have an artifact directory."""
    return {"audits": list_audit_ids(config)}


@mcp.tool()
def validate_artifact_file(path: str) -> dict:
    """Validate one analyzer artifact file.

    Returns:
        {valid, analyzer?, components?, error_kind?, error?}
    """
    try:
        artifact = read_artifact(path, expected_version=config["schema_version"])
    except ArtifactError as e:
        return {"valid": False, "error_kind": e.kind, "error": str(e)}
    return {"valid": True, "analyzer": artifact.analyzer, "components": len(artifact.components)}


@mcp.tool()
def aggregate_audit(audit_id: str, write: bool = True) -> dict:
    """Aggregate all analyzer artifacts of an audit into a composite score.

    An audit with nothing to score returns status "empty" and a null score.
    """
    history = AuditHistory(get_history_path(config)) if config.get("history_enabled", True) else None
    try:
        outcome = run_audit(
            get_audit_dir(audit_id, config),
            audit_id=audit_id,
            expected_version=config["schema_version"],
            output_name=config["output_name"],
            write=write,
            history=history,
        )
    finally:
        if history is not None:
            history.close()
    return outcome.to_dict()


@mcp.tool()
def get_issue_report(audit_id: str, min_severity: Optional[str] = None) -> dict:
    """Collated issues for an audit, most severe first.

    Args:
        audit_id: Audit to report on.
        min_severity: Optional floor: 'critical', 'warning' or 'suggestion'.

    Returns:
        {issues: [...], counts: {critical, warning, suggestion}, warnings}, or
        {error, accepted, warnings} when min_severity is not a known severity.
    """
    load = load_artifacts(
        get_audit_dir(audit_id, config),
        expected_version=config["schema_version"],
        exclude=(config["output_name"],),
    )
    report = issue_report(load.artifacts, min_severity)
    report["warnings"] = load.warnings()
    return report


@mcp.tool()
def get_recommendations(audit_id: str, limit: int = 10) -> dict:
    """Top recommendations across all analyzers, highest priority first."""
    load = load_artifacts(
        get_audit_dir(audit_id, config),
        expected_version=config["schema_version"],
        exclude=(config["output_name"],),
    )
    recs = collate_recommendations(load.artifacts)
    return {"recommendations": [r.to_dict() for r in recs[:limit]], "total": len(recs)}


@mcp.tool()
def get_audit_history(limit: int = 10) -> dict:
    """Recently aggregated audits with their overall scores."""
    history = AuditHistory(get_history_path(config))
    try:
        return {"audits": history.recent(limit=limit)}
    finally:
        history.close()


if __name__ == "__main__":
    mcp.run(transport="sse", port=3104)
