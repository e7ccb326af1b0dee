"""
app/api/webhook.py

Purpose: WhatsApp Cloud API webhook endpoint

- GET: answers Meta's verification handshake
- POST: receives message events and passes them to the flow dispatcher
- Every recognized event is acknowledged with 200 EVENT_RECEIVED, even
  when processing fails, so the platform never retries a delivery
"""

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse
from typing import Any, Dict, Optional

from app.api.deps import get_conversation_flow
from app.core.config import settings
from app.core.errors import acknowledge_always
from app.core.logging import get_logger
from app.flow.dispatcher import ConversationFlow
from app.schemas.webhook import is_business_account_event, parse_cloud_api_message
from utils.constants import EVENT_RECEIVED

logger = get_logger(__name__)
router = APIRouter()


@router.get("/webhook/whatsapp")
async def verify_webhook(
    mode: Optional[str] = Query(None, alias="hub.mode"),
    token: Optional[str] = Query(None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(None, alias="hub.challenge"),
):
    """
    Webhook verification handshake

    - 200 with the challenge echoed verbatim when mode is "subscribe" and
      the token matches WEBHOOK_VERIFY_TOKEN
    - 403 when both are present but do not match
    - 400 when mode or token is missing
    """
    if mode and token:
        if mode == "subscribe" and token == settings.WEBHOOK_VERIFY_TOKEN:
            logger.info("WEBHOOK_VERIFIED")
            return PlainTextResponse(challenge or "")

        logger.warning("Webhook verification failed: token mismatch")
        return PlainTextResponse("Forbidden", status_code=403)

    return PlainTextResponse("Bad Request", status_code=400)


@acknowledge_always
async def process_webhook_event(flow: ConversationFlow, payload: Dict[str, Any]):
    message = parse_cloud_api_message(payload)
    if message is None:
        logger.debug("Event carries no inbound message")
        return None

    return await flow.dispatch_message(message)


@router.post("/webhook/whatsapp")
async def handle_webhook(
    request: Request,
    flow: ConversationFlow = Depends(get_conversation_flow),
):
    """
    Receives Cloud API events

    Events whose "object" is not whatsapp_business_account get a 404.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    if not is_business_account_event(payload):
        logger.warning("Unrecognized webhook event")
        return PlainTextResponse("Not Found", status_code=404)

    await process_webhook_event(flow, payload)

    return PlainTextResponse(EVENT_RECEIVED)
