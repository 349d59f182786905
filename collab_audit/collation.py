"""Merge issues and recommendations from every component into ordered lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .models import SEVERITY_ORDER, AnalyzerArtifact, Effort, Severity


@dataclass
class CollatedIssue:
    severity: Severity
    category: str
    description: str
    component: str
    file_path: str
    analyzer: str

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "category": self.category,
            "description": self.description,
            "component": self.component,
            "file_path": self.file_path,
            "analyzer": self.analyzer,
        }


@dataclass
class IssueCollation:
    issues: list[CollatedIssue] = field(default_factory=list)

    @property
    def counts(self) -> dict[Severity, int]:
        counts = {severity: 0 for severity in SEVERITY_ORDER}
        for issue in self.issues:
            counts[issue.severity] += 1
        return counts

    def counts_by_name(self) -> dict[str, int]:
        return {severity.value: n for severity, n in self.counts.items()}


def collate_issues(artifacts: list[AnalyzerArtifact]) -> IssueCollation:
    """Critical first, then warning, then suggestion.

    Within a tier the original artifact/component/issue order is preserved.
    Identical issues from different components are all kept.
    """
    merged: list[CollatedIssue] = []
    for artifact in artifacts:
        for component in artifact.components:
            for issue in component.issues:
                merged.append(
                    CollatedIssue(
                        severity=issue.severity,
                        category=issue.category,
                        description=issue.description,
                        component=component.name,
                        file_path=component.file_path,
                        analyzer=artifact.analyzer,
                    )
                )
    # sorted() is stable
    return IssueCollation(issues=sorted(merged, key=lambda i: i.severity.rank))


def filter_issues(collation: IssueCollation, min_severity: Severity) -> IssueCollation:
    """Keep only issues at or above *min_severity*."""
    return IssueCollation(issues=[i for i in collation.issues if i.severity.rank <= min_severity.rank])


@dataclass
class CollatedRecommendation:
    priority: int
    action: str
    effort: Effort
    impact: str
    component: str
    analyzer: str

    def to_dict(self) -> dict:
        return {
            "priority": self.priority,
            "action": self.action,
            "effort": self.effort.value,
            "impact": self.impact,
            "component": self.component,
            "analyzer": self.analyzer,
        }


def collate_recommendations(artifacts: list[AnalyzerArtifact]) -> list[CollatedRecommendation]:
    """All recommendations, highest priority (lowest number) first, stable."""
    merged = [
        CollatedRecommendation(
            priority=rec.priority,
            action=rec.action,
            effort=rec.effort,
            impact=rec.impact,
            component=component.name,
            analyzer=artifact.analyzer,
        )
        for artifact in artifacts
        for component in artifact.components
        for rec in component.recommendations
    ]
    return sorted(merged, key=lambda r: r.priority)


def issue_report(artifacts: list[AnalyzerArtifact], min_severity: Optional[str] = None) -> dict:
    """Collated issues as plain data, optionally floored at *min_severity*.

    An unknown severity name yields ``{error, accepted}`` instead of issues.
    """
    collation = collate_issues(artifacts)
    if min_severity:
        try:
            floor = Severity(min_severity.strip().lower())
        except ValueError:
            return {
                "error": f"unknown severity {min_severity!r}",
                "accepted": [severity.value for severity in SEVERITY_ORDER],
            }
        collation = filter_issues(collation, floor)
    return {
        "issues": [i.to_dict() for i in collation.issues],
        "counts": collation.counts_by_name(),
    }
