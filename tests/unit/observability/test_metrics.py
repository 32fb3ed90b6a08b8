"""Tests for Prometheus metrics."""

from prometheus_client import REGISTRY

from herald.observability.metrics import (
    BUFFER_FLUSHES,
    FRAMES_DECODED,
    FRAMES_DROPPED,
    STREAM_EVENTS,
    TURN_DURATION,
    TURNS,
)


def _sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestFrameCounters:
    """Tests for frame counters."""

    def test_counters_exist(self) -> None:
        """Should define the frame counters."""
        assert FRAMES_DECODED is not None
        assert FRAMES_DROPPED is not None

    def test_dropped_increment(self) -> None:
        """Should count dropped frames."""
        before = _sample("herald_frames_dropped_total")
        FRAMES_DROPPED.inc()
        assert _sample("herald_frames_dropped_total") == before + 1


class TestStreamEvents:
    """Tests for STREAM_EVENTS counter."""

    def test_counter_increment_with_kind(self) -> None:
        """Should count events per kind."""
        before = _sample("herald_stream_events_total", {"kind": "content"})
        STREAM_EVENTS.labels(kind="content").inc()
        assert _sample("herald_stream_events_total", {"kind": "content"}) == before + 1


class TestTurnMetrics:
    """Tests for turn outcome metrics."""

    def test_turns_by_outcome(self) -> None:
        """Should count turns per outcome."""
        before = _sample("herald_turns_total", {"outcome": "cancelled"})
        TURNS.labels(outcome="cancelled").inc()
        assert _sample("herald_turns_total", {"outcome": "cancelled"}) == before + 1

    def test_duration_histogram_observe(self) -> None:
        """Should record turn durations."""
        before = _sample("herald_turn_duration_seconds_count", {"outcome": "completed"})
        TURN_DURATION.labels(outcome="completed").observe(0.75)
        after = _sample("herald_turn_duration_seconds_count", {"outcome": "completed"})
        assert after == before + 1

    def test_buffer_flushes_exists(self) -> None:
        """Should define the buffer flush counter."""
        BUFFER_FLUSHES.inc(0)
