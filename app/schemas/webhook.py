"""
app/schemas/webhook.py

Purpose: WhatsApp Cloud API webhook payload schemas and parsers

- Recognizes the whatsapp_business_account event discriminator
- Pulls the first inbound message out of the fixed nested path
- Normalizes it into InboundMessage for the flow dispatcher
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime

from utils.validation_utils import normalize_sender_id

WHATSAPP_BUSINESS_ACCOUNT = "whatsapp_business_account"


class InboundMessage(BaseModel):
    """
    Normalized inbound message for internal processing
    """
    phone: str = Field(..., description="Sender phone number, digits only")
    sender: str = Field(..., description="Sender id exactly as delivered; replies go here")
    phone_number_id: str = Field(..., description="Business phone-number id that received the message")
    text: str = Field("", description="Message text body (empty for non-text messages)")
    message_id: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "phone": "972501234567",
                "sender": "972501234567",
                "phone_number_id": "123456789",
                "text": "yes",
                "message_id": "wamid.abc123"
            }
        }


def is_business_account_event(payload: Any) -> bool:
    """True when the payload carries the Cloud API account discriminator."""
    return isinstance(payload, dict) and payload.get("object") == WHATSAPP_BUSINESS_ACCOUNT


def _first(items: Any) -> Optional[Dict[str, Any]]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


def parse_cloud_api_message(payload: Dict[str, Any]) -> Optional[InboundMessage]:
    """
    Extracts the first message of a Cloud API webhook event

    Cloud API format (JSON):
    {
        "object": "whatsapp_business_account",
        "entry": [{
            "id": "123456789",
            "changes": [{
                "value": {
                    "metadata": {"phone_number_id": "123456789"},
                    "messages": [{
                        "from": "972501234567",
                        "id": "wamid.abc123",
                        "text": {"body": "yes"}
                    }]
                },
                "field": "messages"
            }]
        }]
    }

    Returns None for status updates and other events without a message.
    """
    entry = _first(payload.get("entry"))
    change = _first(entry.get("changes")) if entry else None
    value = change.get("value") if change else None
    if not isinstance(value, dict):
        return None

    message = _first(value.get("messages"))
    if not message or not message.get("from"):
        return None

    metadata = value.get("metadata") or {}
    phone_number_id = metadata.get("phone_number_id")
    if not phone_number_id:
        return None

    text = message.get("text") or {}
    sender = str(message["from"])

    return InboundMessage(
        phone=normalize_sender_id(sender),
        sender=sender,
        phone_number_id=str(phone_number_id),
        text=text.get("body") or "",
        message_id=message.get("id")
    )
