"""Tests for loading an audit directory."""

from __future__ import annotations

import logging

import pytest

from collab_audit.errors import ParseError, ReadError, SchemaError, VersionMismatch
from collab_audit.loader import load_artifacts, read_artifact
from collab_audit.scoring import aggregate_scores

from .conftest import make_artifact, write_json


class TestLoadArtifacts:
    def test_three_valid_one_malformed(self, audit_dir, caplog):
        for name in ("command-analyzer", "agent-analyzer", "skill-analyzer"):
            write_json(audit_dir, f"{name}.json", make_artifact(name))
        (audit_dir / "hook-analyzer.json").write_text('{"analyzer": "hook-analyzer", ', encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="collab_audit.loader"):
            result = load_artifacts(audit_dir)

        assert result.loaded == 3
        assert result.failed == 1
        assert len(result.warnings()) == 1
        assert isinstance(result.errors[0], ParseError)
        assert any("hook-analyzer.json" in r.getMessage() for r in caplog.records)
        assert len(aggregate_scores(result.artifacts).components) == 3

    def test_entries_sorted_by_filename(self, audit_dir):
        for name in ("zeta", "alpha", "mid"):
            write_json(audit_dir, f"{name}.json", make_artifact(name))
        result = load_artifacts(audit_dir)
        assert [e.filename for e in result.entries] == ["alpha.json", "mid.json", "zeta.json"]

    def test_empty_directory_signals_no_artifacts(self, audit_dir):
        result = load_artifacts(audit_dir)
        assert result.no_artifacts
        assert result.directory_exists
        assert result.loaded == 0

    def test_missing_directory_signals_no_artifacts(self, tmp_path):
        result = load_artifacts(tmp_path / "does-not-exist")
        assert result.no_artifacts
        assert not result.directory_exists

    def test_only_invalid_files_is_not_no_artifacts(self, audit_dir):
        (audit_dir / "bad.json").write_text("nope", encoding="utf-8")
        result = load_artifacts(audit_dir)
        assert not result.no_artifacts
        assert result.loaded == 0
        assert result.failed == 1

    def test_error_kinds_recorded(self, audit_dir):
        write_json(audit_dir, "old.json", make_artifact("old", version="0.1.0"))
        write_json(audit_dir, "shape.json", {"analyzer": "shape"})
        result = load_artifacts(audit_dir)
        by_file = {e.filename: e.error for e in result.entries}
        assert isinstance(by_file["old.json"], VersionMismatch)
        assert isinstance(by_file["shape.json"], SchemaError)

    def test_non_utf8_file_is_parse_error(self, audit_dir):
        (audit_dir / "binary.json").write_bytes(b"\xff\xfe\x00garbage")
        result = load_artifacts(audit_dir)
        assert isinstance(result.errors[0], ParseError)

    def test_ignores_subdirectories_and_other_files(self, audit_dir):
        write_json(audit_dir, "command-analyzer.json", make_artifact())
        write_json(audit_dir / "nested", "agent-analyzer.json", make_artifact("agent-analyzer"))
        (audit_dir / "notes.md").write_text("# notes", encoding="utf-8")
        (audit_dir / "partial.json.tmp").write_text("{", encoding="utf-8")
        result = load_artifacts(audit_dir)
        assert [e.filename for e in result.entries] == ["command-analyzer.json"]

    def test_exclude(self, audit_dir):
        write_json(audit_dir, "command-analyzer.json", make_artifact())
        write_json(audit_dir, "qa-aggregator.json", make_artifact("qa-aggregator"))
        result = load_artifacts(audit_dir, exclude=("qa-aggregator.json",))
        assert [a.analyzer for a in result.artifacts] == ["command-analyzer"]


class TestReadArtifact:
    def test_reads_one_file(self, audit_dir):
        path = write_json(audit_dir, "command-analyzer.json", make_artifact())
        assert read_artifact(path).analyzer == "command-analyzer"

    def test_missing_file_is_read_error(self, audit_dir):
        with pytest.raises(ReadError):
            read_artifact(audit_dir / "nope.json")

    def test_non_utf8_file_is_parse_error(self, audit_dir):
        path = audit_dir / "binary.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(ParseError) as exc:
            read_artifact(path)
        assert exc.value.kind == "parse"
