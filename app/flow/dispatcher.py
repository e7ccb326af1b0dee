"""
app/flow/dispatcher.py

Purpose: Central message dispatcher

- Receives normalized messages from the webhook
- Routes to the handler for the sender's current state
- Applies and validates the resulting state transition
- Echo mode short-circuits the flow and mirrors the text back
"""

from typing import Awaitable, Callable, Dict, Optional

from app.core.exceptions import InvalidTransitionError
from app.core.logging import get_logger, LogContext
from app.flow.context import FlowContext
from app.flow.handlers.groups import handle_connected
from app.flow.handlers.pairing import handle_pairing_reply
from app.flow.handlers.permission import handle_idle, handle_permission_reply
from app.flow.states import ConversationState, is_valid_transition
from app.models.session import UserSession
from app.schemas.webhook import InboundMessage
from app.services.baileys_service import PairingConnector
from app.services.session_service import SessionStore
from app.services.whatsapp_service import WhatsAppService
from utils.constants import GENERIC_ERROR_MESSAGE
from utils.validation_utils import sanitize_input

logger = get_logger(__name__)

StateHandler = Callable[[FlowContext, UserSession], Awaitable[ConversationState]]

# State to handler mapping
STATE_HANDLERS: Dict[ConversationState, StateHandler] = {
    ConversationState.IDLE: handle_idle,
    ConversationState.WAITING_FOR_PERMISSION: handle_permission_reply,
    ConversationState.WAITING_FOR_PAIRING: handle_pairing_reply,
    ConversationState.CONNECTED: handle_connected,
}


class ConversationFlow:
    """
    Drives the per-user pairing conversation.

    Collaborators are injected so the webhook, tests and any other caller
    share nothing but what they pass in.
    """

    def __init__(
        self,
        store: SessionStore,
        messenger: WhatsAppService,
        connector: PairingConnector,
        echo_mode: bool = False,
        fallback_pairing_code: str = "TEST123"
    ):
        self.store = store
        self.messenger = messenger
        self.connector = connector
        self.echo_mode = echo_mode
        self.fallback_pairing_code = fallback_pairing_code

    async def dispatch_message(self, message: InboundMessage) -> Optional[ConversationState]:
        """
        Main dispatcher for an inbound WhatsApp message

        Args:
            message: Normalized message

        Returns:
            The sender's state after handling, or None in echo mode

        Raises:
            MessagingError: if the reply could not be sent
        """
        logger.info(f"Received message from {message.sender}: {sanitize_input(message.text, 100)}")

        if self.echo_mode:
            await self.messenger.send_message(
                message.phone_number_id,
                message.sender,
                self.messenger.format_echo_message(message.text)
            )
            return None

        async with self.store.lock(message.phone):
            session = await self.store.get_or_create(message.phone)

            with LogContext(phone=message.phone, state=session.state.value):
                ctx = FlowContext(
                    message=message,
                    messenger=self.messenger,
                    connector=self.connector,
                    fallback_pairing_code=self.fallback_pairing_code
                )
                next_state = await self.route_to_handler(ctx, session)
                self.apply_transition(session, next_state)

            session.touch()
            await self.store.set(session)

        return session.state

    async def route_to_handler(self, ctx: FlowContext, session: UserSession) -> ConversationState:
        handler = STATE_HANDLERS.get(session.state)

        if handler is None:
            # Reset state if something went wrong
            logger.warning(f"Unknown state: {session.state}, resetting to IDLE")
            session.state = ConversationState.IDLE
            await ctx.reply(GENERIC_ERROR_MESSAGE)
            return ConversationState.IDLE

        logger.debug(f"Calling handler: {handler.__name__}")
        return await handler(ctx, session)

    @staticmethod
    def apply_transition(session: UserSession, next_state: ConversationState):
        if not is_valid_transition(session.state, next_state):
            raise InvalidTransitionError(
                f"Invalid state transition: {session.state.value} -> {next_state.value}"
            )

        if session.state != next_state:
            logger.info(f"State updated: {session.state.value} -> {next_state.value}")
        session.state = next_state
