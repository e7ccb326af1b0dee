"""
app/models/session.py

Purpose: Conversation session model

- Keyed by sender phone number (digits only)
- Current conversation state
- Pairing code and linked-device handle
- Interaction timestamps used for TTL expiry
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from app.flow.states import ConversationState
from utils.time_utils import utcnow


class UserSession(BaseModel):
    phone_number: str
    state: ConversationState = ConversationState.IDLE
    pairing_code: Optional[str] = None
    session_handle: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    last_interaction: datetime = Field(default_factory=utcnow)

    def touch(self) -> None:
        self.last_interaction = utcnow()

    def to_document(self) -> Dict[str, Any]:
        """Mongo document form; the enum is stored as its string value."""
        return self.model_dump(mode="python") | {"state": self.state.value}

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "UserSession":
        data = {key: value for key, value in document.items() if key != "_id"}
        return cls(**data)
