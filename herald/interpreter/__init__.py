"""Turn interpretation: reconciliation, buffering, approvals and the driver."""

from herald.interpreter.approval import ApprovalHandler, approval_block_id
from herald.interpreter.arena import TurnArena
from herald.interpreter.buffer import DEFAULT_FLUSH_INTERVAL, UpdateBuffer
from herald.interpreter.clock import AsyncioScheduler, ManualScheduler, Scheduler
from herald.interpreter.interpreter import StreamInterpreter, failure_notice
from herald.interpreter.reconciler import ContentReconciler

__all__ = [
    "ApprovalHandler",
    "approval_block_id",
    "AsyncioScheduler",
    "ContentReconciler",
    "DEFAULT_FLUSH_INTERVAL",
    "failure_notice",
    "ManualScheduler",
    "Scheduler",
    "StreamInterpreter",
    "TurnArena",
    "UpdateBuffer",
]
