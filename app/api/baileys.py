"""
app/api/baileys.py

Purpose: Direct control API for the linked WhatsApp device

- POST /connect     request a pairing code for a phone number
- GET  /groups      list groups of the linked account
- GET  /status      is a device linked
- POST /disconnect  log the linked device out

Failures are surfaced to the caller ({success: false, ...}), unlike the
webhook which always acknowledges.
"""

from fastapi import APIRouter, Body, Depends
from typing import Any

from app.api.deps import get_connector
from app.core.errors import propagate_errors
from app.core.exceptions import NotConnectedError, ValidationError
from app.core.logging import get_logger
from app.schemas.baileys import ConnectRequest
from app.schemas.response import (
    ConnectResponse,
    GroupsResponse,
    ConnectionStatusResponse,
    DisconnectResponse
)
from app.services.baileys_service import PairingConnector
from utils.validation_utils import validate_phone_number

logger = get_logger(__name__)
router = APIRouter()

ALREADY_REGISTERED_CODE = "Already registered, no pairing code needed"


@router.post("/connect", response_model=ConnectResponse)
@propagate_errors("Failed to connect to WhatsApp")
async def connect_with_pairing_code(
    body: Any = Body(None, examples=[{"phoneNumber": "972501234567"}]),
    connector: PairingConnector = Depends(get_connector),
):
    """
    Connect to WhatsApp using a pairing code.

    The phone number must be in international format, digits only.
    """
    phone_number = ConnectRequest.from_body(body).phone_number

    if not phone_number:
        raise ValidationError("Phone number is required")

    if not isinstance(phone_number, str) or not validate_phone_number(phone_number):
        raise ValidationError("Phone number must contain only digits (no +, (), or -)")

    result = await connector.connect_with_pairing_code(phone_number)

    return ConnectResponse(pairing_code=result.code or ALREADY_REGISTERED_CODE)


@router.get("/groups", response_model=GroupsResponse)
@propagate_errors("Failed to get WhatsApp groups")
async def get_groups(connector: PairingConnector = Depends(get_connector)):
    """Get all groups the linked account is a member of."""
    if not await connector.is_connected():
        raise NotConnectedError()

    groups = await connector.get_groups()

    return GroupsResponse(count=len(groups), groups=groups)


@router.get("/status", response_model=ConnectionStatusResponse)
@propagate_errors("Failed to check WhatsApp connection status")
async def get_connection_status(connector: PairingConnector = Depends(get_connector)):
    return ConnectionStatusResponse(is_connected=await connector.is_connected())


@router.post("/disconnect", response_model=DisconnectResponse)
@propagate_errors("Failed to disconnect from WhatsApp")
async def disconnect(connector: PairingConnector = Depends(get_connector)):
    await connector.disconnect()
    return DisconnectResponse()
