"""
app/flow/context.py

Purpose: Per-message context handed to flow handlers

- The inbound message being handled
- The collaborators a handler may use (messenger, pairing connector)
- reply(): the one outbound message a transition may send
"""

from dataclasses import dataclass

from app.schemas.webhook import InboundMessage
from app.services.baileys_service import PairingConnector
from app.services.whatsapp_service import WhatsAppService


@dataclass
class FlowContext:
    message: InboundMessage
    messenger: WhatsAppService
    connector: PairingConnector
    fallback_pairing_code: str

    async def reply(self, text: str):
        """Sends ``text`` back to the sender from the receiving business number."""
        await self.messenger.send_message(
            self.message.phone_number_id,
            self.message.sender,
            text
        )
