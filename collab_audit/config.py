"""Audit configuration loader.

Reads overrides from <project>/.audit/config.json and merges them over the
defaults. A missing or unreadable file means defaults.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from .models import SCHEMA_VERSION

logger = logging.getLogger(__name__)

CONFIG_RELATIVE_PATH = Path(".audit") / "config.json"

DEFAULTS = {
    "artifact_root": "backlog/audit-outputs",
    "schema_version": SCHEMA_VERSION,
    "output_name": "qa-aggregator.json",
    "history_enabled": True,
    "history_db": ".audit/history.db",
    "log_level": "INFO",
}


def get_project_dir() -> Path:
    return Path(os.environ.get("AUDIT_PROJECT_DIR") or os.environ.get("CLAUDE_PROJECT_DIR") or os.getcwd())


def load_audit_config(project_dir: "Path | str | None" = None) -> dict[str, Any]:
    """Load audit configuration with defaults, overridden by the project file."""
    effective = _deep_copy(DEFAULTS)
    root = Path(project_dir) if project_dir else get_project_dir()

    config_path = root / CONFIG_RELATIVE_PATH
    if config_path.exists():
        try:
            override = json.loads(config_path.read_text(encoding="utf-8"))
            if isinstance(override, dict):
                _deep_merge(effective, override)
            else:
                logger.warning("Ignoring %s: expected a JSON object", config_path)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable config %s: %s", config_path, e)

    effective["project_dir"] = str(root)
    return effective


def get_artifact_root(config: Optional[dict[str, Any]] = None) -> Path:
    """Absolute artifact root; relative settings resolve against the project dir."""
    config = config or load_audit_config()
    root = Path(config["artifact_root"])
    if not root.is_absolute():
        root = Path(config["project_dir"]) / root
    return root


def get_audit_dir(audit_id: str, config: Optional[dict[str, Any]] = None) -> Path:
    if not audit_id or "/" in audit_id or "\\" in audit_id or audit_id in (".", ".."):
        raise ValueError(f"invalid audit id: {audit_id!r}")
    return get_artifact_root(config) / audit_id


def get_history_path(config: Optional[dict[str, Any]] = None) -> Path:
    config = config or load_audit_config()
    path = Path(config["history_db"])
    if not path.is_absolute():
        path = Path(config["project_dir"]) / path
    return path


def list_audit_ids(config: Optional[dict[str, Any]] = None) -> list[str]:
    """Audit ids (subdirectory names) under the artifact root, sorted."""
    root = get_artifact_root(config)
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if p.is_dir())


def _deep_copy(d: dict) -> dict:
    """Simple deep copy for JSON-compatible dicts."""
    return json.loads(json.dumps(d))


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base, recursing into nested dicts."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        elif value is not None:
            base[key] = value
