"""In-memory implementation of Dispatcher."""

from herald.conversation.dispatch import Dispatcher
from herald.conversation.models import MessagePatch, MessageSnapshot, TurnRef


class InMemoryDispatcher(Dispatcher):
    """In-memory host state sink for testing and embedding.

    Keeps messages per session, streamed text per block, the generating
    flag, the active author, task ids and an error log. Snapshots are
    deep-copied in both directions so the interpreter and the host never
    share mutable blocks.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._messages: dict[TurnRef, MessageSnapshot] = {}
        self._streaming: dict[tuple[TurnRef, str], str] = {}
        self.task_ids: dict[str, str] = {}
        self.generating: bool = False
        self.generating_history: list[bool] = []
        self.active_author: str | None = None
        self.errors: list[str] = []

    def add_message(self, turn_ref: TurnRef, snapshot: MessageSnapshot | None = None) -> None:
        """Create the placeholder message a turn streams into."""
        self._messages[turn_ref] = (snapshot or MessageSnapshot()).model_copy(deep=True)

    def update_message(self, turn_ref: TurnRef, patch: MessagePatch) -> None:
        """Apply a patch; blocks carried by the patch supersede streamed text."""
        message = self._messages.get(turn_ref)
        if message is None:
            return

        if patch.text is not None:
            message.text = patch.text
        if patch.blocks is not None:
            message.blocks = [block.model_copy(deep=True) for block in patch.blocks]
            for block in patch.blocks:
                self._streaming.pop((turn_ref, block.id), None)
        if patch.content_order is not None:
            message.content_order = list(patch.content_order)
        if patch.metadata is not None:
            message.metadata = dict(patch.metadata)
        if patch.cancelled is not None:
            message.cancelled = patch.cancelled

    def get_message(self, turn_ref: TurnRef) -> MessageSnapshot | None:
        """Return a deep copy of the stored message."""
        message = self._messages.get(turn_ref)
        if message is None:
            return None
        return message.model_copy(deep=True)

    def queue_text_delta(self, turn_ref: TurnRef, block_id: str, delta: str) -> None:
        """Accumulate streamed text for a block."""
        key = (turn_ref, block_id)
        self._streaming[key] = self._streaming.get(key, "") + delta

    def commit_text(self, turn_ref: TurnRef, block_id: str) -> None:
        """Append streamed text to the block's content."""
        streamed = self._streaming.pop((turn_ref, block_id), None)
        if not streamed:
            return
        message = self._messages.get(turn_ref)
        if message is None:
            return
        block = message.get_block(block_id)
        if block is not None:
            block.content = block.content + streamed

    def clear_pending_text(self, turn_ref: TurnRef, block_id: str) -> None:
        """Drop streamed text for a block."""
        self._streaming.pop((turn_ref, block_id), None)

    def set_generating(self, generating: bool) -> None:
        self.generating = generating
        self.generating_history.append(generating)

    def set_active_author(self, author_id: str | None) -> None:
        self.active_author = author_id

    def set_task_id(self, turn_ref: TurnRef, task_id: str) -> None:
        self.task_ids[turn_ref.session_id] = task_id
        message = self._messages.get(turn_ref)
        if message is not None:
            message.task_id = task_id

    def report_error(self, message: str) -> None:
        self.errors.append(message)

    def streamed_text(self, turn_ref: TurnRef, block_id: str) -> str:
        """Return text streamed to a block and not yet committed."""
        return self._streaming.get((turn_ref, block_id), "")

    def displayed_text(self, turn_ref: TurnRef, block_id: str) -> str:
        """Return what a renderer would show for a block."""
        message = self._messages.get(turn_ref)
        if message is None:
            return ""
        block = message.get_block(block_id)
        committed = block.content if block is not None else ""
        return committed + self.streamed_text(turn_ref, block_id)
