"""Shared fixtures and artifact factories."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

ALL_DIMENSIONS = (
    "structure",
    "best_practices",
    "tool_security",
    "completeness",
    "integration",
    "domain_depth",
    "dependency_health",
)


def make_component(name="audit.md", scores=None, issues=(), recommendations=(), file_path=None):
    """Component dict. Issues are (severity, description) pairs."""
    return {
        "name": name,
        "file_path": file_path or f".claude/commands/{name}",
        "scores": dict(scores) if scores is not None else {d: 8.0 for d in ALL_DIMENSIONS},
        "issues": [
            {"severity": sev, "category": "structure", "description": desc}
            for sev, desc in issues
        ],
        "recommendations": [
            {"priority": p, "action": action, "effort": "low", "impact": "better prompts"}
            for p, action in recommendations
        ],
    }


def make_artifact(analyzer="command-analyzer", components=None, version="1.0.0"):
    """Raw artifact dict with a summary consistent with its components."""
    components = components if components is not None else [make_component()]
    return {
        "analyzer": analyzer,
        "timestamp": "2026-10-18T09:30:00Z",
        "version": version,
        "metadata": {"audit_id": "audit-001", "component_count": len(components), "scope": "full"},
        "analysis": {
            "components": components,
            "summary": {
                "total_components": len(components),
                "components_with_issues": sum(1 for c in components if c["issues"]),
                "critical_issues": sum(
                    1 for c in components for i in c["issues"] if i["severity"] == "critical"
                ),
                "average_score": None,
            },
        },
    }


def write_json(directory: Path, name: str, data) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def audit_dir(tmp_path):
    """Empty audit directory under a project-like artifact root."""
    path = tmp_path / "backlog" / "audit-outputs" / "audit-001"
    path.mkdir(parents=True)
    return path
