"""
app/flow/handlers/pairing.py

Handles: WAITING_FOR_PAIRING

- Requests a pairing code from the connector and sends it with
  linking instructions
- Connector failures fall back to FALLBACK_PAIRING_CODE; the user stays
  in WAITING_FOR_PAIRING and can still finish linking
- "done"/"סיימתי" moves on to the group count, anything else
  gets a reminder
"""

from app.flow.context import FlowContext
from app.flow.states import ConversationState
from app.models.session import UserSession
from utils.constants import (
    PAIRING_DONE_KEYWORDS,
    PAIRING_CODE_MESSAGE,
    PAIRING_FALLBACK_MESSAGE,
    PAIRING_REMINDER_MESSAGE,
    ALREADY_REGISTERED_MESSAGE
)
from utils.validation_utils import matches_keyword
from app.core.logging import get_logger

logger = get_logger(__name__)


async def request_pairing_code(ctx: FlowContext, session: UserSession) -> ConversationState:
    """
    Links the sender's WhatsApp through the pairing connector.

    Returns:
        Always WAITING_FOR_PAIRING
    """
    try:
        result = await ctx.connector.connect_with_pairing_code(session.phone_number)
    except Exception as e:
        logger.error(f"Error connecting to WhatsApp: {e}", exc_info=True)
        await ctx.reply(PAIRING_FALLBACK_MESSAGE.format(code=ctx.fallback_pairing_code))
        session.pairing_code = ctx.fallback_pairing_code
        return ConversationState.WAITING_FOR_PAIRING

    # The session only records what the user was actually sent
    if result.already_registered:
        await ctx.reply(ALREADY_REGISTERED_MESSAGE)
        session.pairing_code = None
    else:
        await ctx.reply(PAIRING_CODE_MESSAGE.format(code=result.code))
        session.pairing_code = result.code

    session.session_handle = result.session_id
    return ConversationState.WAITING_FOR_PAIRING


async def handle_pairing_reply(ctx: FlowContext, session: UserSession) -> ConversationState:
    """
    Waits for the user to confirm they entered the pairing code.
    """
    if matches_keyword(ctx.message.text, PAIRING_DONE_KEYWORDS):
        logger.info("User confirmed pairing")
        from app.flow.handlers.groups import report_group_count
        return await report_group_count(ctx, session)

    await ctx.reply(PAIRING_REMINDER_MESSAGE)
    return ConversationState.WAITING_FOR_PAIRING
