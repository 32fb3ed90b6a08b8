"""Update buffer batching high-frequency text deltas per block."""

from collections.abc import Callable

from herald.interpreter.clock import ScheduledCall, Scheduler
from herald.observability.metrics import BUFFER_FLUSHES

DEFAULT_FLUSH_INTERVAL = 0.05  # ~20 deliveries per second


class UpdateBuffer:
    """Accumulates text deltas and releases them at a bounded rate.

    A flush is scheduled when the first delta arrives and fires at most
    once per interval. Callers force a synchronous flush before every
    full-model update and when the turn ends, so no delta is lost.

    The logical content of a text block is its committed content plus
    ``pending(block_id)``; the pending part alone is never the full value.
    """

    def __init__(
        self,
        deliver: Callable[[str, str], None],
        scheduler: Scheduler,
        interval: float = DEFAULT_FLUSH_INTERVAL,
    ) -> None:
        self._deliver = deliver
        self._scheduler = scheduler
        self._interval = interval
        self._pending: dict[str, str] = {}
        self._scheduled: ScheduledCall | None = None
        self._closed = False

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    @property
    def flush_scheduled(self) -> bool:
        return self._scheduled is not None

    def pending(self, block_id: str) -> str:
        return self._pending.get(block_id, "")

    def queue(self, block_id: str, delta: str) -> None:
        if not delta:
            return
        self._pending[block_id] = self._pending.get(block_id, "") + delta
        self._schedule()

    def reseed(self, block_id: str, text: str) -> None:
        """Replace the pending accumulator for a block with the full text."""
        self._pending[block_id] = text
        self._schedule()

    def discard(self, block_id: str) -> str:
        """Drop the pending accumulator for a block, returning it."""
        return self._pending.pop(block_id, "")

    def flush(self) -> None:
        """Deliver all pending accumulators in one batch and clear them."""
        if self._scheduled is not None:
            self._scheduled.cancel()
            self._scheduled = None

        if not self._pending:
            return

        batch, self._pending = self._pending, {}
        for block_id, delta in batch.items():
            self._deliver(block_id, delta)
        BUFFER_FLUSHES.inc()

    def close(self) -> None:
        """Cancel any scheduled flush and drain what is pending."""
        self.flush()
        self._closed = True

    def _schedule(self) -> None:
        if self._scheduled is None and not self._closed:
            self._scheduled = self._scheduler.call_later(self._interval, self.flush)
