"""Tests for AuditHistory."""

from __future__ import annotations

import pytest

from collab_audit.history import AuditHistory


@pytest.fixture
def history_db(tmp_path):
    """Create an AuditHistory with a temporary DB."""
    h = AuditHistory(db_path=tmp_path / "nested" / "history.db")
    yield h
    h.close()


class TestRecord:
    def test_record_and_get(self, history_db):
        history_db.record("a1", 7.5, "GOOD", total_components=4, critical_issues=1, artifacts_loaded=2)
        row = history_db.get("a1")
        assert row["overall_score"] == 7.5
        assert row["verdict"] == "GOOD"
        assert row["total_components"] == 4
        assert row["critical_issues"] == 1

    def test_rerecord_updates_results(self, history_db):
        history_db.record("a1", 5.0, "NEEDS_IMPROVEMENT")
        history_db.record("a1", 9.0, "EXCELLENT")
        assert len(history_db.recent()) == 1
        assert history_db.get("a1")["overall_score"] == 9.0

    def test_rerecord_keeps_recorded_at(self, history_db):
        history_db.record("a1", 5.0, "NEEDS_IMPROVEMENT", recorded_at=100)
        history_db.record("a1", 6.0, "NEEDS_IMPROVEMENT", recorded_at=300)
        assert history_db.get("a1")["recorded_at"] == 100

    def test_missing_returns_none(self, history_db):
        assert history_db.get("nope") is None


class TestPrevious:
    def test_previous_skips_empty_audits(self, history_db):
        history_db.record("a1", 6.0, "NEEDS_IMPROVEMENT", recorded_at=100)
        history_db.record("a2", None, None, recorded_at=200)
        assert history_db.previous("a3")["audit_id"] == "a1"

    def test_previous_of_recorded_audit_looks_backwards(self, history_db):
        history_db.record("a1", 6.0, "NEEDS_IMPROVEMENT", recorded_at=100)
        history_db.record("a2", 7.0, "GOOD", recorded_at=200)
        history_db.record("a3", 8.0, "EXCELLENT", recorded_at=300)
        assert history_db.previous("a2")["audit_id"] == "a1"

    def test_reaggregating_older_audit_keeps_timeline(self, history_db):
        history_db.record("a1", 6.0, "NEEDS_IMPROVEMENT", recorded_at=1)
        history_db.record("a2", 7.0, "GOOD", recorded_at=2)
        history_db.record("a1", 6.5, "NEEDS_IMPROVEMENT", recorded_at=3)

        assert history_db.previous("a2")["audit_id"] == "a1"
        assert history_db.previous("a3")["audit_id"] == "a2"
        assert [r["audit_id"] for r in history_db.recent()] == ["a2", "a1"]

    def test_no_previous(self, history_db):
        assert history_db.previous("a1") is None


def test_recent_ordering_and_limit(history_db):
    for i in range(5):
        history_db.record(f"a{i}", float(i), "POOR", recorded_at=1000 + i)
    rows = history_db.recent(limit=3)
    assert [r["audit_id"] for r in rows] == ["a4", "a3", "a2"]
