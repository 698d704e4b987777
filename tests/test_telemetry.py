"""Tests for sshmux.core.telemetry."""

import pytest

from sshmux.core.telemetry import Telemetry, get_telemetry


def test_timed_records_on_error():
    t = Telemetry()
    with pytest.raises(RuntimeError):
        with t.timed("dial.duration", {"target": "h"}):
            raise RuntimeError("boom")
    metrics = t.get_metrics("dial.duration")
    assert len(metrics) == 1
    assert metrics[0].value >= 0
    assert metrics[0].tags == {"target": "h"}


def test_filter_and_clear():
    t = Telemetry()
    t.record_event("dial.success")
    t.record_event("dial.failure", {"reason": "x"})
    assert [e.name for e in t.get_events()] == ["dial.success", "dial.failure"]
    assert len(t.get_events("dial.failure")) == 1
    t.clear()
    assert t.get_events() == []


def test_global_instance():
    assert get_telemetry() is get_telemetry()
