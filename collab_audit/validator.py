"""Artifact validation: raw JSON in, AnalyzerArtifact out.

Both functions are pure. Problems surface as distinct exception types so
the caller can decide whether to skip a file or abort the whole audit:

    ParseError       the text is not JSON
    VersionMismatch  the document declares an unknown schema version
    SchemaError      anything else structurally wrong (first problem only)
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from .errors import ParseError, SchemaError, VersionMismatch
from .models import SCHEMA_VERSION, AnalyzerArtifact


def parse_artifact(
    text: str,
    path: str | None = None,
    expected_version: str = SCHEMA_VERSION,
) -> AnalyzerArtifact:
    """Parse JSON text and validate it as an artifact."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})", path) from e
    return validate_artifact(data, expected_version=expected_version, path=path)


def validate_artifact(
    data: Any,
    expected_version: str = SCHEMA_VERSION,
    path: str | None = None,
) -> AnalyzerArtifact:
    """Validate an already-parsed JSON value against the artifact shape."""
    if not isinstance(data, dict):
        raise SchemaError(f"expected a JSON object, got {_json_type(data)}", path)

    # Checked before the full schema so an unknown version is reported as such
    # even when the rest of the document follows a different layout.
    version = data.get("version")
    if isinstance(version, str) and version != expected_version:
        raise VersionMismatch(version, expected_version, path)

    try:
        return AnalyzerArtifact.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        raise SchemaError(_describe(first), path, location=_location(first["loc"])) from None


def _describe(error: dict) -> str:
    if error["type"] == "missing":
        return "missing required field"
    msg = error["msg"]
    # Strip pydantic's "Value error, " prefix for errors raised by our validators
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return msg


def _location(loc: tuple) -> str:
    parts: list[str] = []
    for item in loc:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        elif parts:
            parts.append(f".{item}")
        else:
            parts.append(str(item))
    return "".join(parts)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return type(value).__name__
