"""
app/api/deps.py

Purpose: Request-time access to lifetime-scoped collaborators

- The session store, messenger and pairing connector are built once in
  the app lifespan and kept on app.state
- Routes receive them through Depends, so tests can swap in fakes via
  app.dependency_overrides
"""

from fastapi import Depends, Request

from app.core.config import settings
from app.flow.dispatcher import ConversationFlow
from app.services.baileys_service import PairingConnector
from app.services.session_service import SessionStore
from app.services.whatsapp_service import WhatsAppService


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_messenger(request: Request) -> WhatsAppService:
    return request.app.state.messenger


def get_connector(request: Request) -> PairingConnector:
    return request.app.state.connector


def get_conversation_flow(
    store: SessionStore = Depends(get_session_store),
    messenger: WhatsAppService = Depends(get_messenger),
    connector: PairingConnector = Depends(get_connector),
) -> ConversationFlow:
    return ConversationFlow(
        store=store,
        messenger=messenger,
        connector=connector,
        echo_mode=settings.ECHO_MODE,
        fallback_pairing_code=settings.FALLBACK_PAIRING_CODE
    )
