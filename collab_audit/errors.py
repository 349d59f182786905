"""Exception hierarchy for artifact loading and aggregation."""

from __future__ import annotations


class AuditError(Exception):
    """Base class for every error raised by the audit subsystem."""


class ArtifactError(AuditError):
    """A single artifact file could not be turned into an AnalyzerArtifact.

    The loader recovers from these locally: the file is logged and excluded.
    """

    kind = "artifact"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class ReadError(ArtifactError):
    """The file exists but could not be read."""

    kind = "read"


class ParseError(ArtifactError):
    """The file is not valid JSON."""

    kind = "parse"


class SchemaError(ArtifactError):
    """Valid JSON, but not shaped like an AnalyzerArtifact."""

    kind = "schema"

    def __init__(self, message: str, path: str | None = None, location: str = "") -> None:
        super().__init__(message, path)
        self.location = location

    def __str__(self) -> str:
        where = f" at '{self.location}'" if self.location else ""
        prefix = f"{self.path}: " if self.path else ""
        return f"{prefix}{self.message}{where}"


class VersionMismatch(ArtifactError):
    """The artifact declares a schema version this consumer does not know."""

    kind = "version"

    def __init__(self, found: str, expected: str, path: str | None = None) -> None:
        super().__init__(f"unsupported schema version {found!r} (expected {expected!r})", path)
        self.found = found
        self.expected = expected


class EmptyBatch(AuditError):
    """No scored components were available, so the composite score is undefined."""
