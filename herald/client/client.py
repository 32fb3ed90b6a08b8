"""Herald stream client.

Sends user messages and approval decisions to an A2A agent endpoint and
streams each reply into a host through a Dispatcher.

Usage:
    from herald.client import HeraldClient
    from herald.conversation import InMemoryDispatcher
    from herald.conversation.models import TurnRef

    dispatcher = InMemoryDispatcher()
    turn = TurnRef(session_id="s1", message_id="m1")
    dispatcher.add_message(turn)

    async with HeraldClient("http://localhost:8000/a2a", dispatcher) as client:
        outcome = await client.send_message(turn, context_id="ctx-1", text="Hello!")
"""

from typing import Any

import httpx

from herald.config import get_settings
from herald.config.models import StreamConfig
from herald.conversation.dispatch import Dispatcher
from herald.conversation.models import ApprovalDecision, TurnOutcome, TurnRef
from herald.errors import ApprovalError, HeraldError
from herald.interpreter.approval import ApprovalHandler
from herald.interpreter.clock import Scheduler
from herald.interpreter.interpreter import StreamInterpreter
from herald.observability.logging import get_logger
from herald.protocol.requests import Attachment, StreamRequest, build_message_request
from herald.transport.reader import TransportReader

logger = get_logger(__name__)


class HeraldClientError(HeraldError):
    """Base exception for client errors."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class TurnInProgressError(HeraldClientError):
    """Raised when a turn is started while another one is still streaming."""


class HeraldClient:
    """Async client streaming agent turns into a dispatcher.

    At most one turn streams at a time. The client owns its HTTP client
    unless one is passed in.

    Attributes:
        endpoint_url: URL of the agent's JSON-RPC stream endpoint
        dispatcher: Host sink receiving every content update
    """

    def __init__(
        self,
        endpoint_url: str,
        dispatcher: Dispatcher,
        auth_token: str | None = None,
        config: StreamConfig | None = None,
        scheduler: Scheduler | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            endpoint_url: URL of the agent's stream endpoint
            dispatcher: Host sink for content updates
            auth_token: Optional bearer token
            config: Stream settings (defaults to the loaded configuration)
            scheduler: Flush scheduler (defaults to the event loop)
            http_client: Pre-built HTTP client; the caller keeps ownership
        """
        self.endpoint_url = endpoint_url
        self.dispatcher = dispatcher
        self._config = config or get_settings().stream
        self._scheduler = scheduler
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(
                self._config.read_timeout,
                connect=self._config.connect_timeout,
            ),
        )
        self._reader = TransportReader(
            self._client,
            frame_prefix=self._config.frame_prefix,
            auth_token=auth_token,
        )
        self._approvals = ApprovalHandler(dispatcher)
        self._active: StreamInterpreter | None = None

    async def __aenter__(self) -> "HeraldClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Cancel any active turn and close the HTTP client."""
        self.cancel()
        if self._owns_client:
            await self._client.aclose()

    @property
    def active_turn(self) -> TurnRef | None:
        """The turn currently streaming, if any."""
        return self._active.turn_ref if self._active is not None else None

    # Turns

    async def send_message(
        self,
        turn_ref: TurnRef,
        context_id: str | None,
        text: str,
        attachments: list[Attachment] | tuple[Attachment, ...] = (),
    ) -> TurnOutcome:
        """Send a user message and stream the reply into ``turn_ref``.

        Args:
            turn_ref: Placeholder message the reply streams into
            context_id: Conversation id shared by every turn of a session
            text: User message text
            attachments: Files sent with the message

        Returns:
            Terminal outcome of the turn

        Raises:
            TurnInProgressError: Another turn is still streaming
        """
        request = build_message_request(context_id, text, attachments)
        return await self._run_turn(turn_ref, request)

    async def resolve_approval(
        self,
        turn_ref: TurnRef,
        context_id: str | None,
        block_id: str,
        decision: ApprovalDecision,
    ) -> TurnOutcome:
        """Record an approval decision and stream the agent's follow-up.

        The decision is recorded before the follow-up is sent and stays
        recorded if the follow-up fails. The follow-up streams into the
        same message as the approval block.

        Args:
            turn_ref: Message holding the approval block
            context_id: Conversation id
            block_id: Approval block id
            decision: approve or deny

        Returns:
            Terminal outcome of the follow-up turn

        Raises:
            TurnInProgressError: Another turn is still streaming
            HeraldClientError: The approval cannot be resolved
        """
        self._ensure_idle()
        try:
            request = self._approvals.resolve(turn_ref, context_id, block_id, decision)
        except ApprovalError as e:
            raise HeraldClientError(e.message, details={"block_id": e.block_id}) from e
        return await self._run_turn(turn_ref, request)

    def cancel(self) -> bool:
        """Cancel the active turn. Returns False when nothing is streaming."""
        if self._active is None:
            return False
        return self._active.cancel()

    def _ensure_idle(self) -> None:
        if self._active is not None:
            raise TurnInProgressError(
                f"Turn already streaming: {self._active.turn_ref.message_id}"
            )

    async def _run_turn(self, turn_ref: TurnRef, request: StreamRequest) -> TurnOutcome:
        self._ensure_idle()
        interpreter = StreamInterpreter(
            turn_ref,
            self.dispatcher,
            self._reader,
            scheduler=self._scheduler,
            flush_interval=self._config.flush_interval,
            approvals=self._approvals,
        )
        self._active = interpreter
        logger.debug("turn_request_sent", message_id=turn_ref.message_id, request_id=request.id)
        try:
            return await interpreter.run(self.endpoint_url, request)
        finally:
            self._active = None
