"""Tests for near-duplicate snapshot suppression."""

from canvas_observer.engine.dedupe import SnapshotDeduper, is_near_duplicate


def test_no_previous_is_never_duplicate():
    assert not is_near_duplicate("x" * 1000, None)


def test_threshold_boundary():
    assert is_near_duplicate("x" * 1199, "x" * 1000)
    assert not is_near_duplicate("x" * 1200, "x" * 1000)
    assert is_near_duplicate("x" * 801, "x" * 1000)


def test_custom_threshold():
    assert not is_near_duplicate("x" * 60, "x" * 0, threshold=50)


def test_bytes_payloads():
    assert is_near_duplicate(b"a" * 100, b"b" * 150)


def test_gate_compares_against_last_forwarded():
    deduper = SnapshotDeduper(threshold=200)
    assert deduper.admit("x" * 1000)
    assert not deduper.admit("x" * 1100)
    # Drift accumulates against the last forwarded payload, not the last seen one
    assert not deduper.admit("x" * 1150)
    assert deduper.admit("x" * 1250)
    assert deduper.suppressed == 2


def test_reset_forgets_previous():
    deduper = SnapshotDeduper()
    deduper.admit("x" * 1000)
    deduper.reset()
    assert deduper.admit("x" * 1000)
