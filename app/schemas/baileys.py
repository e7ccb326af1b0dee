"""
app/schemas/baileys.py

Purpose: Schemas for the Baileys bridge and the direct control API

- GroupInfo mirrors one entry of the bridge's group listing
- PairingResult is what the connector hands back after a pairing request
- ConnectRequest reads the body of POST /connect
"""

from pydantic import BaseModel, Field, validator
from typing import Any, List, Optional


class GroupInfo(BaseModel):
    """A WhatsApp group the linked device participates in."""
    id: str = Field(..., description="Group JID, e.g. 120363123456789@g.us")
    name: Optional[str] = None
    participants: List[str] = Field(default_factory=list)
    participant_count: int = Field(0, alias="participantCount")
    creation: Optional[int] = None

    class Config:
        populate_by_name = True


class PairingResult(BaseModel):
    """Outcome of asking the bridge to link a phone number."""
    code: Optional[str] = None
    already_registered: bool = Field(False, alias="alreadyRegistered")
    session_id: Optional[str] = Field(None, alias="sessionId")

    class Config:
        populate_by_name = True


class ConnectRequest(BaseModel):
    """
    Body of POST /connect.

    ``phone_number`` is left untyped so that malformed values reach the
    route's digits-only check instead of failing request validation.
    """
    phone_number: Any = Field(None, alias="phoneNumber")

    @validator("phone_number", pre=True)
    def coerce_phone_number(cls, v):
        """JSON clients sometimes send the number as an integer."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @classmethod
    def from_body(cls, body: Any) -> "ConnectRequest":
        """Reads a raw JSON body; anything but an object carries no phone number."""
        if isinstance(body, dict):
            return cls.model_validate(body)
        return cls()

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {"phoneNumber": "972501234567"}
        }
