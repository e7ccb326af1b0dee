"""
app/flow/handlers/permission.py

Handles: IDLE and WAITING_FOR_PERMISSION

- Any message from an idle user gets the permission prompt
- "yes"/"כן" starts device pairing
- Anything else is a refusal and returns the user to IDLE
"""

from app.flow.context import FlowContext
from app.flow.states import ConversationState
from app.models.session import UserSession
from utils.constants import (
    PERMISSION_KEYWORDS,
    PERMISSION_PROMPT_MESSAGE,
    PERMISSION_DENIED_MESSAGE
)
from utils.validation_utils import matches_keyword
from app.core.logging import get_logger

logger = get_logger(__name__)


async def handle_idle(ctx: FlowContext, session: UserSession) -> ConversationState:
    """
    Asks the user for permission to link their WhatsApp.
    """
    logger.info("Asking for permission to connect")
    await ctx.reply(PERMISSION_PROMPT_MESSAGE)
    return ConversationState.WAITING_FOR_PERMISSION


async def handle_permission_reply(ctx: FlowContext, session: UserSession) -> ConversationState:
    """
    Processes the answer to the permission prompt.

    Args:
        ctx: Flow context for the inbound message
        session: Sender's session

    Returns:
        WAITING_FOR_PAIRING when permission was given, IDLE otherwise
    """
    if matches_keyword(ctx.message.text, PERMISSION_KEYWORDS):
        logger.info("Permission granted")
        from app.flow.handlers.pairing import request_pairing_code
        return await request_pairing_code(ctx, session)

    logger.info("Permission denied")
    await ctx.reply(PERMISSION_DENIED_MESSAGE)
    session.pairing_code = None
    return ConversationState.IDLE
