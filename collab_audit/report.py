"""Console summary for an aggregated audit."""

from __future__ import annotations

import sys
from typing import TextIO

from .aggregator import AuditOutcome
from .models import Severity, Verdict

# ------------------------------------------------------------------
# ANSI helpers (gracefully degrade when output is not a terminal)
# ------------------------------------------------------------------


class _Colors:
    """ANSI color codes, disabled when output is not a TTY."""

    def __init__(self, stream: TextIO):
        use_color = hasattr(stream, "isatty") and stream.isatty()
        self.GREEN = "\033[32m" if use_color else ""
        self.RED = "\033[31m" if use_color else ""
        self.YELLOW = "\033[33m" if use_color else ""
        self.BOLD = "\033[1m" if use_color else ""
        self.DIM = "\033[2m" if use_color else ""
        self.RESET = "\033[0m" if use_color else ""


def _verdict_color(c: _Colors, verdict: "Verdict | None") -> str:
    if verdict in (Verdict.EXCELLENT, Verdict.GOOD):
        return c.GREEN
    if verdict == Verdict.NEEDS_IMPROVEMENT:
        return c.YELLOW
    return c.RED


def _severity_color(c: _Colors, severity: Severity) -> str:
    return {Severity.CRITICAL: c.RED, Severity.WARNING: c.YELLOW}.get(severity, c.DIM)


def print_summary(outcome: AuditOutcome, stream: TextIO | None = None, max_issues: int = 20) -> None:
    """Print a human-readable summary of *outcome* to *stream* (default: stdout)."""
    out = stream or sys.stdout
    c = _Colors(out)

    out.write(f"\n{c.BOLD}{'=' * 70}{c.RESET}\n")
    out.write(f"{c.BOLD}  Audit {outcome.audit_id}{c.RESET}\n")
    out.write(f"{c.DIM}  {outcome.directory}{c.RESET}\n")
    out.write(f"{c.BOLD}{'=' * 70}{c.RESET}\n\n")

    out.write(f"  Artifacts: {outcome.load.loaded} loaded, {outcome.load.failed} failed\n")
    for warning in outcome.load.warnings():
        out.write(f"  {c.YELLOW}WARN{c.RESET}  {warning}\n")

    if outcome.scores is None:
        reason = "no artifacts found" if outcome.load.no_artifacts else "no scored components"
        out.write(f"\n  {c.BOLD}Result:{c.RESET}  {c.YELLOW}{c.BOLD}EMPTY BATCH{c.RESET} ({reason}; score undefined)\n")
        out.write(f"{c.BOLD}{'=' * 70}{c.RESET}\n")
        return

    out.write("\n")
    for comp in outcome.scores.components:
        if comp.composite is None:
            out.write(f"  {c.DIM}----{c.RESET}  {comp.name:<36s} {'unscored':>8s}  {c.DIM}[{comp.analyzer}]{c.RESET}\n")
            continue
        color = _verdict_color(c, comp.verdict)
        out.write(
            f"  {color}{comp.composite:4.1f}{c.RESET}  {comp.name:<36s} "
            f"{comp.verdict.value:>8s}  {c.DIM}[{comp.analyzer}]{c.RESET}\n"
        )

    counts = outcome.issues.counts
    out.write(f"\n{c.BOLD}{'-' * 70}{c.RESET}\n")
    out.write(
        f"  {c.BOLD}Issues:{c.RESET}   "
        f"{c.RED}{counts[Severity.CRITICAL]} critical{c.RESET}, "
        f"{c.YELLOW}{counts[Severity.WARNING]} warning{c.RESET}, "
        f"{counts[Severity.SUGGESTION]} suggestion\n"
    )
    verdict = outcome.scores.verdict
    out.write(
        f"  {c.BOLD}Score:{c.RESET}    {_verdict_color(c, verdict)}{c.BOLD}"
        f"{outcome.scores.overall:.2f} {verdict.value}{c.RESET}\n"
    )
    if outcome.score_delta is not None:
        out.write(f"  {c.BOLD}Trend:{c.RESET}    {outcome.score_delta:+.2f} vs previous audit\n")
    if outcome.output_path:
        out.write(f"  {c.BOLD}Output:{c.RESET}   {outcome.output_path}\n")
    out.write(f"{c.BOLD}{'=' * 70}{c.RESET}\n")

    shown = outcome.issues.issues[:max_issues]
    if shown:
        out.write(f"\n{c.BOLD}  ISSUES{c.RESET}\n")
        for issue in shown:
            color = _severity_color(c, issue.severity)
            out.write(
                f"  {color}{issue.severity.value:<10s}{c.RESET} {issue.component}: "
                f"{issue.description} {c.DIM}({issue.category}){c.RESET}\n"
            )
        hidden = len(outcome.issues.issues) - len(shown)
        if hidden > 0:
            out.write(f"  {c.DIM}... {hidden} more{c.RESET}\n")
