"""Load every analyzer artifact in one audit directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .errors import ArtifactError, ParseError, ReadError
from .models import SCHEMA_VERSION, AnalyzerArtifact
from .validator import parse_artifact

logger = logging.getLogger(__name__)


@dataclass
class LoadedArtifact:
    """Outcome for a single file: exactly one of artifact / error is set."""

    filename: str
    artifact: Optional[AnalyzerArtifact] = None
    error: Optional[ArtifactError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class LoadResult:
    directory: Path
    entries: list[LoadedArtifact] = field(default_factory=list)
    directory_exists: bool = True

    @property
    def artifacts(self) -> list[AnalyzerArtifact]:
        return [e.artifact for e in self.entries if e.artifact is not None]

    @property
    def errors(self) -> list[ArtifactError]:
        return [e.error for e in self.entries if e.error is not None]

    @property
    def loaded(self) -> int:
        return sum(1 for e in self.entries if e.ok)

    @property
    def failed(self) -> int:
        return len(self.entries) - self.loaded

    @property
    def no_artifacts(self) -> bool:
        """True when there was nothing to load at all (missing or empty directory)."""
        return not self.entries

    def warnings(self) -> list[str]:
        return [str(e) for e in self.errors]


def load_artifacts(
    directory: "Path | str",
    expected_version: str = SCHEMA_VERSION,
    exclude: Iterable[str] = (),
) -> LoadResult:
    """Read and validate every ``*.json`` file directly inside *directory*.

    Bad files are logged and recorded, never raised. Subdirectories are not
    searched. Files listed in *exclude* (by name) are skipped.
    """
    directory = Path(directory)
    result = LoadResult(directory=directory)

    if not directory.is_dir():
        logger.warning("No artifacts found: %s is not a directory", directory)
        result.directory_exists = False
        return result

    skipped = set(exclude)
    paths = sorted(p for p in directory.glob("*.json") if p.is_file() and p.name not in skipped)

    for path in paths:
        entry = _load_one(path, expected_version)
        if entry.error is not None:
            logger.warning("Skipping artifact %s", entry.error)
        result.entries.append(entry)

    if not paths:
        logger.warning("No artifacts found in %s", directory)
    else:
        logger.info("Loaded %d artifact(s) from %s (%d failed)", result.loaded, directory, result.failed)
    return result


def read_artifact(path: "Path | str", expected_version: str = SCHEMA_VERSION) -> AnalyzerArtifact:
    """Read and validate one artifact file.

    Raises ReadError when the file cannot be read, ParseError when it is not
    UTF-8 JSON, and SchemaError / VersionMismatch from the validator.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"not UTF-8 text: {e.reason}", str(path)) from e
    except OSError as e:
        raise ReadError(e.strerror or str(e), str(path)) from e
    return parse_artifact(text, path=str(path), expected_version=expected_version)


def _load_one(path: Path, expected_version: str) -> LoadedArtifact:
    try:
        artifact = read_artifact(path, expected_version)
    except ArtifactError as e:
        return LoadedArtifact(path.name, error=e)
    return LoadedArtifact(path.name, artifact=artifact)
