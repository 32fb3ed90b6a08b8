"""Dispatcher abstract interface.

The dispatcher is the only boundary between the stream interpreter and
the host's state sink. The interpreter receives one at construction and
never reaches into host storage any other way.

Host contract:
- A text block is displayed as its ``content`` followed by any text
  streamed to it through ``queue_text_delta``.
- ``update_message`` carrying a block supersedes streamed text for that
  block, because the interpreter always sends the composed content.
- ``commit_text`` folds streamed text into the block's content.

Operations are synchronous: the sink is an in-process state container
and is called from timer callbacks.
"""

from abc import ABC, abstractmethod

from herald.conversation.models import MessagePatch, MessageSnapshot, TurnRef


class Dispatcher(ABC):
    """Abstract interface to the host state sink."""

    @abstractmethod
    def update_message(self, turn_ref: TurnRef, patch: MessagePatch) -> None:
        """Apply a full-model patch to the turn's message."""
        pass

    @abstractmethod
    def get_message(self, turn_ref: TurnRef) -> MessageSnapshot | None:
        """Return a snapshot of the turn's message, if it exists."""
        pass

    @abstractmethod
    def queue_text_delta(self, turn_ref: TurnRef, block_id: str, delta: str) -> None:
        """Stream a text delta to a block."""
        pass

    @abstractmethod
    def commit_text(self, turn_ref: TurnRef, block_id: str) -> None:
        """Fold streamed text for a block into its committed content."""
        pass

    @abstractmethod
    def clear_pending_text(self, turn_ref: TurnRef, block_id: str) -> None:
        """Drop streamed text for a block without committing it."""
        pass

    @abstractmethod
    def set_generating(self, generating: bool) -> None:
        """Set whether a turn is currently generating."""
        pass

    @abstractmethod
    def set_active_author(self, author_id: str | None) -> None:
        """Publish the agent currently producing content."""
        pass

    @abstractmethod
    def set_task_id(self, turn_ref: TurnRef, task_id: str) -> None:
        """Record the far end's task id for the turn's conversation."""
        pass

    @abstractmethod
    def report_error(self, message: str) -> None:
        """Surface an error to the host."""
        pass
