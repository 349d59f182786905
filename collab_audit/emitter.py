"""Artifact construction and atomic writes.

Each analyzer writes exactly one uniquely named file, so no locking is
needed. The write goes to a temp file that then replaces the target:
a reader sees a complete artifact (old or new), never a partial one.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from .models import (
    SCHEMA_VERSION,
    Analysis,
    AnalyzerArtifact,
    ComponentResult,
    summarize_components,
)

_SAFE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def new_artifact(
    analyzer: str,
    components: list[ComponentResult],
    metadata: Optional[dict[str, Any]] = None,
    average_score: Optional[float] = None,
) -> AnalyzerArtifact:
    """Build an artifact with a consistent summary and a current UTC timestamp."""
    return AnalyzerArtifact(
        analyzer=analyzer,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=SCHEMA_VERSION,
        metadata=dict(metadata or {}),
        analysis=Analysis(
            components=list(components),
            summary=summarize_components(components, average_score),
        ),
    )


def artifact_filename(analyzer: str) -> str:
    if not _SAFE_NAME.match(analyzer):
        raise ValueError(f"analyzer name {analyzer!r} is not usable as a file name")
    return f"{analyzer}.json"


def write_artifact(
    directory: "Path | str",
    artifact: AnalyzerArtifact,
    filename: Optional[str] = None,
) -> Path:
    """Write *artifact* as ``<analyzer>.json`` into *directory*. Returns the path."""
    directory = Path(directory)
    name = filename or artifact_filename(artifact.analyzer)
    path = directory / name

    directory.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".json.tmp")
    try:
        tmp.write_text(json.dumps(artifact.model_dump(mode="json"), indent=2) + "\n", encoding="utf-8")
        tmp.replace(path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    return path
