from pydantic import BaseModel, Field
from typing import Optional, List, Literal

from app.schemas.baileys import GroupInfo


class StatusResponse(BaseModel):
    """
    Envelope used by the root and health endpoints.
    """
    status: Literal["success", "error"]
    message: str


class ErrorResponse(StatusResponse):
    """
    Standard error response structure.
    """
    error: Optional[str] = None


class FailureResponse(BaseModel):
    """
    Error body for the direct control API.
    """
    success: bool = False
    message: str
    error: Optional[str] = None


class ConnectResponse(BaseModel):
    success: bool = True
    pairing_code: str = Field(..., alias="pairingCode")

    class Config:
        populate_by_name = True


class GroupsResponse(BaseModel):
    success: bool = True
    count: int
    groups: List[GroupInfo]


class ConnectionStatusResponse(BaseModel):
    success: bool = True
    is_connected: bool = Field(..., alias="isConnected")

    class Config:
        populate_by_name = True


class DisconnectResponse(BaseModel):
    success: bool = True
    message: str = "Disconnected from WhatsApp"
