"""Command-line entry point: ``collab-audit``.

Exit codes:
    0  audit scored / all files valid
    1  one or more files failed validation
    2  empty batch (nothing to score)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .aggregator import run_audit
from .config import get_audit_dir, get_history_path, list_audit_ids, load_audit_config
from .errors import ArtifactError
from .history import AuditHistory
from .loader import read_artifact
from .report import print_summary

logger = logging.getLogger("collab_audit")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_EMPTY = 2


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="collab-audit",
        description="Validate and aggregate /audit analyzer artifacts.",
    )
    parser.add_argument(
        "--project-dir",
        type=Path,
        default=None,
        help="Project root (default: $AUDIT_PROJECT_DIR, $CLAUDE_PROJECT_DIR or cwd).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Enable verbose (DEBUG-level) logging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    agg = sub.add_parser("aggregate", help="Aggregate one audit directory.")
    agg.add_argument("audit_id", nargs="?", default=None, help="Audit id under the artifact root.")
    agg.add_argument("--dir", type=Path, default=None, help="Aggregate this directory instead.")
    agg.add_argument("--no-write", action="store_true", help="Do not write the composite artifact.")
    agg.add_argument("--no-history", action="store_true", help="Do not record the result in history.")
    agg.add_argument("--json", action="store_true", help="Print the outcome as JSON.")
    agg.set_defaults(handler=_cmd_aggregate)

    val = sub.add_parser("validate", help="Validate artifact files.")
    val.add_argument("files", nargs="+", type=Path)
    val.set_defaults(handler=_cmd_validate)

    lst = sub.add_parser("list", help="List audit ids under the artifact root.")
    lst.set_defaults(handler=_cmd_list)

    hist = sub.add_parser("history", help="Show recent aggregated audits.")
    hist.add_argument("--limit", type=int, default=10)
    hist.set_defaults(handler=_cmd_history)

    args = parser.parse_args(argv)
    if args.command == "aggregate" and not args.audit_id and not args.dir:
        parser.error("aggregate: give an audit id or --dir")
    return args


def _setup_logging(verbose: bool, level_name: str = "INFO") -> None:
    level = logging.DEBUG if verbose else getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _cmd_aggregate(args: argparse.Namespace, config: dict) -> int:
    if args.dir:
        audit_dir = args.dir.resolve()
        audit_id = args.audit_id or audit_dir.name
    else:
        audit_id = args.audit_id
        audit_dir = get_audit_dir(audit_id, config)

    history = None
    if config.get("history_enabled", True) and not args.no_history:
        history = AuditHistory(get_history_path(config))
    try:
        outcome = run_audit(
            audit_dir,
            audit_id=audit_id,
            expected_version=config["schema_version"],
            output_name=config["output_name"],
            write=not args.no_write,
            history=history,
        )
    finally:
        if history is not None:
            history.close()

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2))
    else:
        print_summary(outcome)
    return EXIT_OK if outcome.status == "scored" else EXIT_EMPTY


def _cmd_validate(args: argparse.Namespace, config: dict) -> int:
    failed = 0
    for path in args.files:
        try:
            artifact = read_artifact(path, expected_version=config["schema_version"])
        except ArtifactError as e:
            failed += 1
            print(f"FAIL  [{e.kind}] {e}")
            continue
        print(f"OK    {path} ({artifact.analyzer}, {len(artifact.components)} component(s))")
    return EXIT_INVALID if failed else EXIT_OK


def _cmd_list(args: argparse.Namespace, config: dict) -> int:
    for audit_id in list_audit_ids(config):
        print(audit_id)
    return EXIT_OK


def _cmd_history(args: argparse.Namespace, config: dict) -> int:
    history = AuditHistory(get_history_path(config))
    try:
        rows = history.recent(limit=args.limit)
    finally:
        history.close()
    for row in rows:
        score = f"{row['overall_score']:.2f}" if row["overall_score"] is not None else "  -- "
        print(f"{row['audit_id']:<32s} {score}  {row['verdict'] or 'EMPTY'}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Entry point. See module docstring for exit codes."""
    args = _parse_args(argv)
    config = load_audit_config(args.project_dir)
    _setup_logging(args.verbose, config.get("log_level", "INFO"))
    logger.debug("Using artifact root %s", config["artifact_root"])
    return args.handler(args, config)


if __name__ == "__main__":
    sys.exit(main())
