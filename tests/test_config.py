"""Tests for audit configuration loading."""

from __future__ import annotations

import json
import os
from unittest import mock

import pytest

from collab_audit.config import (
    DEFAULTS,
    get_artifact_root,
    get_audit_dir,
    get_history_path,
    list_audit_ids,
    load_audit_config,
)


def _write_config(project, data):
    path = project / ".audit" / "config.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")


def test_defaults_without_config_file(tmp_path):
    config = load_audit_config(tmp_path)
    for key, value in DEFAULTS.items():
        assert config[key] == value
    assert config["project_dir"] == str(tmp_path)


def test_project_file_overrides(tmp_path):
    _write_config(tmp_path, {"artifact_root": "out/audits", "history_enabled": False})
    config = load_audit_config(tmp_path)
    assert config["artifact_root"] == "out/audits"
    assert config["history_enabled"] is False
    assert config["schema_version"] == DEFAULTS["schema_version"]


def test_null_override_keeps_default(tmp_path):
    _write_config(tmp_path, {"output_name": None})
    assert load_audit_config(tmp_path)["output_name"] == DEFAULTS["output_name"]


def test_invalid_config_falls_back_to_defaults(tmp_path):
    _write_config(tmp_path, "{not json")
    assert load_audit_config(tmp_path)["artifact_root"] == DEFAULTS["artifact_root"]


def test_project_dir_from_env(tmp_path):
    _write_config(tmp_path, {"log_level": "DEBUG"})
    with mock.patch.dict(os.environ, {"AUDIT_PROJECT_DIR": str(tmp_path)}):
        config = load_audit_config()
    assert config["log_level"] == "DEBUG"


def test_paths_resolve_against_project(tmp_path):
    config = load_audit_config(tmp_path)
    assert get_artifact_root(config) == tmp_path / "backlog" / "audit-outputs"
    assert get_audit_dir("audit-7", config) == tmp_path / "backlog" / "audit-outputs" / "audit-7"
    assert get_history_path(config) == tmp_path / ".audit" / "history.db"


def test_absolute_artifact_root(tmp_path):
    _write_config(tmp_path, {"artifact_root": str(tmp_path / "elsewhere")})
    assert get_artifact_root(load_audit_config(tmp_path)) == tmp_path / "elsewhere"


@pytest.mark.parametrize("bad", ["", "..", "a/b", "..\\x"])
def test_audit_dir_rejects_path_tricks(tmp_path, bad):
    with pytest.raises(ValueError):
        get_audit_dir(bad, load_audit_config(tmp_path))


def test_list_audit_ids(tmp_path):
    config = load_audit_config(tmp_path)
    assert list_audit_ids(config) == []
    root = get_artifact_root(config)
    for name in ("2026-10-02", "2026-10-01"):
        (root / name).mkdir(parents=True)
    (root / "stray.json").write_text("{}", encoding="utf-8")
    assert list_audit_ids(config) == ["2026-10-01", "2026-10-02"]
