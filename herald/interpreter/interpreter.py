"""Stream interpreter: drives one turn from transport to dispatcher.

Control flow per frame: transport reader -> classifier -> reconciler or
approval handler -> dispatcher. Each turn reaches exactly one terminal
outcome (completed, failed or cancelled) and clears the host's
generating flag exactly once, whatever the exit path.
"""

import asyncio
import time
from typing import Any

from herald.conversation.dispatch import Dispatcher
from herald.conversation.models import MessagePatch, TurnOutcome, TurnRef
from herald.errors import HeraldError, StreamCancelledError, TransportError
from herald.interpreter.approval import ApprovalHandler
from herald.interpreter.arena import TurnArena
from herald.interpreter.buffer import DEFAULT_FLUSH_INTERVAL, UpdateBuffer
from herald.interpreter.clock import AsyncioScheduler, Scheduler
from herald.interpreter.reconciler import ContentReconciler
from herald.observability.logging import get_logger
from herald.observability.metrics import STREAM_EVENTS, TURN_DURATION, TURNS
from herald.protocol.classifier import classify
from herald.protocol.events import (
    ContentEvent,
    StatusEvent,
    StreamEvent,
    TerminalSnapshotEvent,
)
from herald.protocol.requests import StreamRequest
from herald.transport.cancellation import CancellationToken
from herald.transport.reader import TransportReader

logger = get_logger(__name__)


def failure_notice(message: str) -> str:
    """Inline notice appended to the turn text when the agent run fails."""
    return f"\n\n> **Agent run failed**\n> {message}\n"


class StreamInterpreter:
    """Reconstructs the content model of a single turn.

    One interpreter per turn; ``run`` may be called once. ``cancel`` may
    be called from anywhere on the event loop, including from dispatcher
    callbacks.
    """

    def __init__(
        self,
        turn_ref: TurnRef,
        dispatcher: Dispatcher,
        reader: TransportReader,
        *,
        scheduler: Scheduler | None = None,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
        approvals: ApprovalHandler | None = None,
    ) -> None:
        self._turn_ref = turn_ref
        self._dispatcher = dispatcher
        self._reader = reader
        self._scheduler = scheduler or AsyncioScheduler()
        self._approvals = approvals or ApprovalHandler(dispatcher)
        self._token = CancellationToken()

        self._buffer = UpdateBuffer(self._deliver, self._scheduler, flush_interval)
        self._bind(TurnArena())
        self._metadata: dict[str, Any] = {}
        self._task_id: str | None = None
        self._active_author: str | None = None
        self._error_reported = False
        self._protocol_failed = False
        self._started = False
        self._outcome: TurnOutcome | None = None

    @property
    def turn_ref(self) -> TurnRef:
        return self._turn_ref

    @property
    def arena(self) -> TurnArena:
        return self._arena

    @property
    def outcome(self) -> TurnOutcome | None:
        return self._outcome

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    def cancel(self) -> bool:
        """Abort the turn.

        Aborts the transport, flushes pending text synchronously and makes
        the turn end as cancelled. Returns False if the turn already ended
        or was already cancelled.
        """
        if self._outcome is not None or not self._token.cancel():
            return False
        self._buffer.flush()
        logger.info("turn_cancel_requested", message_id=self._turn_ref.message_id)
        return True

    async def run(self, url: str, request: StreamRequest | dict[str, Any]) -> TurnOutcome:
        """Stream one turn into the dispatcher and return its outcome.

        Transport failures are reported through the dispatcher, not
        raised. Cancellation of the calling task is propagated after the
        turn has been finalized as cancelled.
        """
        if self._started:
            raise HeraldError("StreamInterpreter.run may only be called once")
        self._started = True

        payload = request.to_payload() if isinstance(request, StreamRequest) else request
        self._seed()
        self._dispatcher.set_generating(True)
        started_at = time.monotonic()
        logger.info(
            "turn_started",
            session_id=self._turn_ref.session_id,
            message_id=self._turn_ref.message_id,
        )

        consumer = asyncio.create_task(self._consume(url, payload))
        remove_callback = self._token.add_callback(consumer.cancel)
        outcome = TurnOutcome.FAILED
        try:
            await consumer
            outcome = TurnOutcome.FAILED if self._protocol_failed else TurnOutcome.COMPLETED
        except (asyncio.CancelledError, StreamCancelledError):
            outcome = TurnOutcome.CANCELLED
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                # The caller was cancelled, not just this turn
                self._token.cancel()
                raise
        except TransportError as e:
            outcome = TurnOutcome.FAILED
            self._report_error(f"Stream error: {e.message}")
        except Exception as e:
            outcome = TurnOutcome.FAILED
            self._report_error(f"Stream error: {e}")
            raise
        finally:
            remove_callback()
            self._finish(outcome, time.monotonic() - started_at)

        return outcome

    def _bind(self, arena: TurnArena) -> None:
        self._arena = arena
        self._reconciler = ContentReconciler(
            self._turn_ref, arena, self._buffer, self._dispatcher, self._scheduler
        )

    def _seed(self) -> None:
        snapshot = self._dispatcher.get_message(self._turn_ref)
        if snapshot is None:
            return
        self._bind(TurnArena.from_snapshot(snapshot))
        self._metadata = dict(snapshot.metadata)
        self._task_id = snapshot.task_id

    async def _consume(self, url: str, payload: dict[str, Any]) -> None:
        async for frame in self._reader.stream(url, payload, self._token):
            self.handle_payload(frame)

    def handle_payload(self, payload: Any) -> None:
        """Classify one decoded frame and apply it."""
        event = classify(payload)
        STREAM_EVENTS.labels(kind=event.type).inc()
        self.handle_event(event)

    def handle_event(self, event: StreamEvent) -> None:
        task_id = getattr(event, "task_id", None)
        if task_id and task_id != self._task_id:
            self._task_id = task_id
            self._dispatcher.set_task_id(self._turn_ref, task_id)

        if isinstance(event, StatusEvent):
            self._handle_status(event)
        elif isinstance(event, ContentEvent):
            self._handle_content(event)
        elif isinstance(event, TerminalSnapshotEvent):
            for content in event.contents:
                self._handle_content(content)
        else:
            logger.debug("stream_event_unrecognized", kind=event.kind)

    def _handle_content(self, event: ContentEvent) -> None:
        self._publish_active_author(event.active_author_id)
        self._metadata.update(event.metadata)
        if self._reconciler.apply(event):
            self._push_full_update()

    def _handle_status(self, event: StatusEvent) -> None:
        if event.failed:
            message = event.failure_message or ""
            self._protocol_failed = True
            self._arena.text += failure_notice(message)
            self._push_full_update()
            self._report_error(message)
            return

        if event.paused:
            block = self._approvals.open(self._arena, self._turn_ref, event)
            if block is not None:
                self._reconciler.clear_active_target()
                self._push_full_update()

    def _publish_active_author(self, author_id: str | None) -> None:
        if author_id and author_id != self._active_author:
            self._active_author = author_id
            self._dispatcher.set_active_author(author_id)

    def _deliver(self, block_id: str, delta: str) -> None:
        self._dispatcher.queue_text_delta(self._turn_ref, block_id, delta)
        self._arena.commit_delta(block_id, delta)

    def _build_patch(self, cancelled: bool | None = None) -> MessagePatch:
        return MessagePatch(
            text=self._arena.text,
            blocks=[block.model_copy(deep=True) for block in self._arena.ordered_blocks()],
            content_order=self._arena.order,
            metadata=dict(self._metadata),
            cancelled=cancelled,
        )

    def _push_full_update(self) -> None:
        # Streamed deltas must reach the host before the blocks that contain them
        self._buffer.flush()
        self._dispatcher.update_message(self._turn_ref, self._build_patch())

    def _report_error(self, message: str) -> None:
        if self._error_reported:
            return
        self._error_reported = True
        logger.warning(
            "turn_error_reported",
            message_id=self._turn_ref.message_id,
            error=message,
        )
        self._dispatcher.report_error(message)

    def _finish(self, outcome: TurnOutcome, duration: float) -> None:
        self._outcome = outcome
        try:
            self._buffer.close()
            for block in self._arena.text_blocks():
                self._dispatcher.commit_text(self._turn_ref, block.id)
            self._reconciler.finalize_active()
            cancelled = True if outcome == TurnOutcome.CANCELLED else None
            self._dispatcher.update_message(self._turn_ref, self._build_patch(cancelled))
        finally:
            self._dispatcher.set_generating(False)
            self._dispatcher.set_active_author(None)
            TURNS.labels(outcome=outcome.value).inc()
            TURN_DURATION.labels(outcome=outcome.value).observe(duration)
            logger.info(
                "turn_finished",
                session_id=self._turn_ref.session_id,
                message_id=self._turn_ref.message_id,
                outcome=outcome.value,
                blocks=len(self._arena),
            )
