"""Content reconciliation engine.

Decides, for every part of a content event, whether it creates a block,
appends to one, or replaces a block's content, and resolves which block
a free text fragment belongs to.

Text identity is resolved in two tiers:

1. Stable identity. Events carrying an ``invocation_id`` map to exactly
   one text block, ``text_<invocation_id>``.
2. Heuristic fallback for producers that omit the identifier. Existing
   text blocks are matched by content (duplicate, revised snapshot,
   prefix growth) and otherwise the fragment goes to the active text
   target, a pointer anchored at the start of the turn or right after
   the most recent non-text block and scoped by author.

Every content comparison reads the composed view of a block, its
committed content plus whatever is still pending in the update buffer.
"""

from herald.conversation.dispatch import Dispatcher
from herald.conversation.models import (
    ImageBlock,
    ImageStatus,
    TextBlock,
    TextStatus,
    ThinkingBlock,
    ThinkingStatus,
    ToolInvocationBlock,
    ToolStatus,
    TurnRef,
)
from herald.interpreter.arena import TurnArena
from herald.interpreter.buffer import UpdateBuffer
from herald.interpreter.clock import Scheduler
from herald.observability.logging import get_logger
from herald.protocol.events import (
    ContentEvent,
    ImagePart,
    TextPart,
    ThinkingPart,
    ToolResultPart,
    ToolUsePart,
)

logger = get_logger(__name__)

TEXT_RUN_PREFIX = "textrun"
ANONYMOUS_AUTHOR = "anon"

# Shorter overlaps are too likely to be common words to imply identity
SNAPSHOT_MIN_OVERLAP = 5

TERMINAL_TOOL_STATUSES = frozenset({ToolStatus.SUCCESS, ToolStatus.FAILED})


def tool_block_id(call_id: str) -> str:
    return f"tool_{call_id}"


def thinking_block_id(thinking_id: str) -> str:
    return f"thinking_{thinking_id}"


def stable_text_block_id(invocation_id: str) -> str:
    return f"text_{invocation_id}"


def image_block_id(image_id: str) -> str:
    return f"image_{image_id}"


def _fold(author: str | None) -> str | None:
    return author.lower() if author else None


def authors_compatible(a: str | None, b: str | None) -> bool:
    """Unknown authors are compatible with anyone; known ones compare case-insensitively."""
    return not a or not b or a.lower() == b.lower()


class ContentReconciler:
    """Applies content events to a turn arena."""

    def __init__(
        self,
        turn_ref: TurnRef,
        arena: TurnArena,
        buffer: UpdateBuffer,
        dispatcher: Dispatcher,
        scheduler: Scheduler,
    ) -> None:
        self._turn_ref = turn_ref
        self._arena = arena
        self._buffer = buffer
        self._dispatcher = dispatcher
        self._scheduler = scheduler
        self._active_target_id: str | None = None
        self._active_target_author: str | None = None

    @property
    def active_target_id(self) -> str | None:
        return self._active_target_id

    def clear_active_target(self) -> None:
        """Make the next unidentified text fragment start a new block."""
        self._active_target_id = None
        self._active_target_author = None

    def composed(self, block: TextBlock) -> str:
        """Logical content of a text block: committed plus pending."""
        return block.content + self._buffer.pending(block.id)

    def apply(self, event: ContentEvent) -> bool:
        """Apply every part of an event.

        Returns True when the change needs a full-model update; pure text
        appends travel through the update buffer only.
        """
        changed = False
        for part in event.parts:
            if isinstance(part, TextPart):
                changed |= self._apply_text(part.text, event)
            elif isinstance(part, ToolUsePart):
                changed |= self._start_tool(part, event.author)
            elif isinstance(part, ToolResultPart):
                changed |= self._apply_tool_result(part)
            elif isinstance(part, ThinkingPart):
                changed |= self._apply_thinking(part, event.author)
            elif isinstance(part, ImagePart):
                changed |= self._add_image(part, event.author)

        if not event.partial:
            self.finalize_active()
            changed = True
        return changed

    def finalize_active(self) -> bool:
        """Complete every text and thinking block still active."""
        changed = False
        for block in self._arena.ordered_blocks():
            if isinstance(block, TextBlock) and block.status == TextStatus.ACTIVE:
                block.status = TextStatus.COMPLETED
                changed = True
            elif isinstance(block, ThinkingBlock) and block.status == ThinkingStatus.ACTIVE:
                block.status = ThinkingStatus.COMPLETED
                changed = True
        return changed

    # Text

    def _apply_text(self, text: str, event: ContentEvent) -> bool:
        if not text:
            return False
        if event.invocation_id:
            return self._apply_stable_text(text, event)
        return self._apply_heuristic_text(text, event.partial, event.author)

    def _apply_stable_text(self, text: str, event: ContentEvent) -> bool:
        block_id = stable_text_block_id(event.invocation_id or "")
        block = self._arena.get(block_id)

        if block is None:
            block = TextBlock(
                id=block_id,
                status=TextStatus.ACTIVE if event.partial else TextStatus.COMPLETED,
                author=event.author,
            )
            self._arena.add(block)
            self._append(block, text)
            return True

        if not isinstance(block, TextBlock):
            logger.warning("text_block_id_conflict", block_id=block_id, kind=block.kind)
            return False

        changed = False
        if event.author and block.author != event.author:
            block.author = event.author
            changed = True

        if event.partial:
            self._append(block, text)
            return changed

        current = self.composed(block)
        if text.startswith(current):
            # Strict growth, including an identical snapshot
            self._append(block, text[len(current):])
        elif current and current in text:
            # Revised snapshot with a prefix added
            self._reseed(block, current, text)
        else:
            self._replace(block, current, text)
        block.status = TextStatus.COMPLETED
        return True

    def _apply_heuristic_text(self, text: str, partial: bool, author: str | None) -> bool:
        for block in list(self._arena.text_blocks()):
            current = self.composed(block)

            if current == text:
                return False

            if not partial and len(current) > SNAPSHOT_MIN_OVERLAP and current in text:
                if text.startswith(current):
                    self._append(block, text[len(current):])
                else:
                    self._reseed(block, current, text)
                block.status = TextStatus.COMPLETED
                if author:
                    block.author = author
                return True

            if current and text.startswith(current) and authors_compatible(block.author, author):
                self._append(block, text[len(current):])
                return False

        target_id = self._resolve_active_target(author)
        target = self._arena.get(target_id)

        if target is None:
            target = TextBlock(
                id=target_id,
                status=TextStatus.ACTIVE if partial else TextStatus.COMPLETED,
                author=author,
            )
            self._arena.add(target)
            self._append(target, text)
            return True

        if not isinstance(target, TextBlock):
            logger.warning("text_block_id_conflict", block_id=target_id, kind=target.kind)
            return False

        current = self.composed(target)
        delta = text
        if not partial and current and text.startswith(current):
            delta = text[len(current):]
        self._append(target, delta)

        if not partial and target.status == TextStatus.ACTIVE:
            target.status = TextStatus.COMPLETED
            return True
        return False

    def _resolve_active_target(self, author: str | None) -> str:
        target_id = self._active_target_id
        if target_id is not None and target_id in self._arena:
            cached = _fold(self._active_target_author)
            if author and cached and _fold(author) != cached:
                target_id = None
        else:
            target_id = None

        if target_id is not None:
            return target_id

        message_id = self._turn_ref.message_id
        last_non_text = self._arena.last_non_text_id()
        if last_non_text:
            target_id = f"{TEXT_RUN_PREFIX}_after_{last_non_text}"
        else:
            target_id = f"{TEXT_RUN_PREFIX}_start_{message_id}"
            last = self._arena.last_block()
            if isinstance(last, TextBlock) and authors_compatible(last.author, author):
                target_id = last.id

        existing = self._arena.get(target_id)
        if isinstance(existing, TextBlock) and _fold(existing.author) != _fold(author):
            segment = author or ANONYMOUS_AUTHOR
            base = f"{TEXT_RUN_PREFIX}_{segment}_{message_id}_{self._scheduler.now_ms()}"
            target_id = base
            suffix = 1
            while target_id in self._arena:
                target_id = f"{base}_{suffix}"
                suffix += 1

        self._active_target_id = target_id
        self._active_target_author = author
        return target_id

    def _append(self, block: TextBlock, delta: str) -> None:
        if not delta:
            return
        self._buffer.queue(block.id, delta)
        self._arena.text += delta

    def _reseed(self, block: TextBlock, current: str, text: str) -> None:
        self._dispatcher.clear_pending_text(self._turn_ref, block.id)
        block.content = ""
        self._buffer.reseed(block.id, text)
        self._arena.replace_text(current, text)

    def _replace(self, block: TextBlock, current: str, text: str) -> None:
        self._buffer.discard(block.id)
        self._dispatcher.clear_pending_text(self._turn_ref, block.id)
        block.content = text
        self._arena.replace_text(current, text)

    # Tools

    def _start_tool(self, part: ToolUsePart, author: str | None) -> bool:
        block_id = tool_block_id(part.call_id)
        if block_id in self._arena:
            return False

        self._arena.add(
            ToolInvocationBlock(
                id=block_id,
                status=ToolStatus.WORKING,
                name=part.name,
                args=dict(part.args),
                author=author,
            )
        )
        self.clear_active_target()
        return True

    def _apply_tool_result(self, part: ToolResultPart) -> bool:
        block = self._arena.get(tool_block_id(part.call_id))
        if not isinstance(block, ToolInvocationBlock):
            logger.debug("tool_result_without_call", call_id=part.call_id)
            return False

        existing = block.content
        incremental = block.status == ToolStatus.WORKING and existing not in part.content
        if incremental:
            block.content = existing + part.content
        elif part.content:
            block.content = part.content

        if block.status not in TERMINAL_TOOL_STATUSES:
            if part.is_error or part.status == ToolStatus.FAILED.value:
                block.status = ToolStatus.FAILED
            elif part.status == ToolStatus.WORKING.value:
                block.status = ToolStatus.WORKING
            else:
                block.status = ToolStatus.SUCCESS
        block.expanded = block.status == ToolStatus.WORKING
        return True

    # Thinking

    def _apply_thinking(self, part: ThinkingPart, author: str | None) -> bool:
        block_id = thinking_block_id(part.thinking_id)
        block = self._arena.get(block_id)

        if isinstance(block, ThinkingBlock):
            self.clear_active_target()
            if part.completed:
                block.content = part.content
                block.status = ThinkingStatus.COMPLETED
                block.expanded = False
            elif block.status == ThinkingStatus.ACTIVE:
                block.content += part.content
            return True

        if block is not None:
            logger.warning("thinking_block_id_conflict", block_id=block_id, kind=block.kind)
            return False

        self._arena.add(
            ThinkingBlock(
                id=block_id,
                status=ThinkingStatus.COMPLETED if part.completed else ThinkingStatus.ACTIVE,
                content=part.content,
                thinking_type=part.thinking_type,
                author=author,
                expanded=not part.completed,
            )
        )
        self.clear_active_target()
        return True

    # Images

    def _add_image(self, part: ImagePart, author: str | None) -> bool:
        block_id = image_block_id(part.image_id)
        if block_id in self._arena:
            return False

        self._arena.add(
            ImageBlock(
                id=block_id,
                status=ImageStatus.LOADED,
                url=part.url,
                revised_prompt=part.revised_prompt,
                author=author,
            )
        )
        self.clear_active_target()
        return True
