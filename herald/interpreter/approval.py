"""Human-in-the-loop approval sub-protocol.

A paused task ("input required") materializes one approval block per
task. Resolving it records the decision and builds the follow-up
request that resumes the conversation.
"""

from herald.conversation.dispatch import Dispatcher
from herald.conversation.models import (
    ApprovalDecision,
    ApprovalRequestBlock,
    ApprovalStatus,
    MessagePatch,
    ToolInvocationBlock,
    TurnRef,
)
from herald.errors import ApprovalError
from herald.interpreter.arena import TurnArena
from herald.interpreter.reconciler import tool_block_id
from herald.observability.logging import get_logger
from herald.protocol.events import StatusEvent
from herald.protocol.requests import StreamRequest, build_approval_request

logger = get_logger(__name__)

UNKNOWN_TOOL = "Unknown Tool"


def approval_block_id(task_id: str | None, message_id: str) -> str:
    return f"approval_{task_id or message_id}"


class ApprovalHandler:
    """Opens approval blocks on pause and resolves them on decision."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def open(
        self,
        arena: TurnArena,
        turn_ref: TurnRef,
        event: StatusEvent,
    ) -> ApprovalRequestBlock | None:
        """Add an approval block for a paused task.

        Returns None when the task already has one.
        """
        block_id = approval_block_id(event.task_id, turn_ref.message_id)
        if block_id in arena:
            return None

        tool_name, tool_input = UNKNOWN_TOOL, {}
        for call_id in event.gated_tool_call_ids:
            tool = arena.get(tool_block_id(call_id))
            if isinstance(tool, ToolInvocationBlock):
                tool_name = tool.name or UNKNOWN_TOOL
                tool_input = dict(tool.args)
                break

        prompt = event.input_prompt or "Human input required."
        block = ApprovalRequestBlock(
            id=block_id,
            status=ApprovalStatus.PENDING,
            content=prompt,
            prompt=prompt,
            tool_name=tool_name,
            tool_input=tool_input,
            task_id=event.task_id,
            gated_tool_call_ids=list(event.gated_tool_call_ids),
        )
        arena.add(block)
        logger.info(
            "approval_requested",
            block_id=block_id,
            task_id=event.task_id,
            tool_name=tool_name,
            gated=len(block.gated_tool_call_ids),
        )
        return block

    def resolve(
        self,
        turn_ref: TurnRef,
        context_id: str | None,
        block_id: str,
        decision: ApprovalDecision,
    ) -> StreamRequest:
        """Mark an approval block decided and build the follow-up request.

        The decision is irreversible. The request continues the
        conversation by context id; the task id is only echoed inside
        the approval data parts.

        Raises:
            ApprovalError: The block is missing, not an approval, or
                already decided
        """
        snapshot = self._dispatcher.get_message(turn_ref)
        if snapshot is None:
            raise ApprovalError(f"Message not found: {turn_ref.message_id}", block_id)

        block = snapshot.get_block(block_id)
        if not isinstance(block, ApprovalRequestBlock):
            raise ApprovalError(f"Approval block not found: {block_id}", block_id)
        if block.status == ApprovalStatus.DECIDED:
            raise ApprovalError(f"Approval already decided: {block_id}", block_id)

        block.status = ApprovalStatus.DECIDED
        block.decision = decision
        block.expanded = False
        self._dispatcher.update_message(turn_ref, MessagePatch(blocks=snapshot.blocks))

        logger.info(
            "approval_resolved",
            block_id=block_id,
            decision=decision.value,
            task_id=block.task_id,
        )
        return build_approval_request(
            context_id,
            decision,
            tool_call_ids=list(block.gated_tool_call_ids),
            tool_name=block.tool_name,
            task_id=block.task_id,
        )
