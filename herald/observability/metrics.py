"""Prometheus metrics for Herald.

Counts frames, events, buffered deliveries and turn outcomes of the
stream interpreter.
"""

from prometheus_client import Counter, Histogram

# Frame metrics
FRAMES_DECODED = Counter(
    "herald_frames_decoded_total",
    "Total number of event frames decoded from the stream",
)

FRAMES_DROPPED = Counter(
    "herald_frames_dropped_total",
    "Total number of malformed event frames dropped",
)

# Event metrics
STREAM_EVENTS = Counter(
    "herald_stream_events_total",
    "Total number of classified stream events",
    labelnames=["kind"],
)

# Buffer metrics
BUFFER_FLUSHES = Counter(
    "herald_buffer_flushes_total",
    "Total number of buffered text deliveries to the dispatcher",
)

# Turn metrics
TURNS = Counter(
    "herald_turns_total",
    "Total number of turns by terminal outcome",
    labelnames=["outcome"],
)

TURN_DURATION = Histogram(
    "herald_turn_duration_seconds",
    "Wall-clock duration of a streamed turn",
    labelnames=["outcome"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)
