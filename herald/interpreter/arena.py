"""Turn-scoped block collection.

One arena is owned by each turn. It holds the blocks, their
first-appearance order and the accumulated plain-text projection.
Blocks enter the arena only through ``add``, which appends them to the
order, so every block id appears in the order exactly once.
"""

from collections.abc import Iterator

from herald.conversation.models import AnyBlock, MessageSnapshot, TextBlock


class TurnArena:
    """Owned, ordered content blocks of a single turn."""

    def __init__(self) -> None:
        self._blocks: dict[str, AnyBlock] = {}
        self._order: list[str] = []
        self.text: str = ""

    @classmethod
    def from_snapshot(cls, snapshot: MessageSnapshot) -> "TurnArena":
        """Seed from the host's message, e.g. when a turn resumes after approval."""
        arena = cls()
        arena.text = snapshot.text
        by_id = {block.id: block.model_copy(deep=True) for block in snapshot.blocks}
        for block_id in snapshot.content_order:
            block = by_id.pop(block_id, None)
            if block is not None:
                arena.add(block)
        for block in by_id.values():
            arena.add(block)
        return arena

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks

    def __len__(self) -> int:
        return len(self._blocks)

    @property
    def order(self) -> list[str]:
        return list(self._order)

    def get(self, block_id: str) -> AnyBlock | None:
        return self._blocks.get(block_id)

    def add(self, block: AnyBlock) -> None:
        """Insert a new block at the end of the order."""
        if block.id in self._blocks:
            raise ValueError(f"Block already exists: {block.id}")
        self._blocks[block.id] = block
        self._order.append(block.id)

    def ordered_blocks(self) -> list[AnyBlock]:
        return [self._blocks[block_id] for block_id in self._order]

    def text_blocks(self) -> Iterator[TextBlock]:
        for block_id in self._order:
            block = self._blocks[block_id]
            if isinstance(block, TextBlock):
                yield block

    def last_block(self) -> AnyBlock | None:
        if not self._order:
            return None
        return self._blocks[self._order[-1]]

    def last_non_text_id(self) -> str | None:
        for block_id in reversed(self._order):
            if not isinstance(self._blocks[block_id], TextBlock):
                return block_id
        return None

    def commit_delta(self, block_id: str, delta: str) -> None:
        """Record text that has been delivered to the host."""
        block = self._blocks.get(block_id)
        if isinstance(block, TextBlock):
            block.content += delta

    def replace_text(self, old: str, new: str) -> None:
        """Swap the last occurrence of ``old`` in the projection for ``new``."""
        if not old:
            self.text += new
            return
        index = self.text.rfind(old)
        if index >= 0:
            self.text = self.text[:index] + new + self.text[index + len(old):]
