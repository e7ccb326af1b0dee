"""
app/flow/handlers/groups.py

Handles: CONNECTED

- Reports how many groups the linked account belongs to
- A failed lookup is reported to the user; the next message retries
"""

from app.flow.context import FlowContext
from app.flow.states import ConversationState
from app.models.session import UserSession
from utils.constants import GROUP_COUNT_MESSAGE, GROUPS_UNAVAILABLE_MESSAGE
from app.core.logging import get_logger

logger = get_logger(__name__)


async def report_group_count(ctx: FlowContext, session: UserSession) -> ConversationState:
    try:
        groups = await ctx.connector.get_groups()
    except Exception as e:
        logger.warning(f"Error getting groups: {e}", exc_info=True)
        await ctx.reply(GROUPS_UNAVAILABLE_MESSAGE)
        return ConversationState.CONNECTED

    logger.info(f"Reporting {len(groups)} groups")
    await ctx.reply(GROUP_COUNT_MESSAGE.format(count=len(groups)))
    return ConversationState.CONNECTED


async def handle_connected(ctx: FlowContext, session: UserSession) -> ConversationState:
    """Any message from a linked user gets the current group count."""
    return await report_group_count(ctx, session)
