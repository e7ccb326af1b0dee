from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_connector, get_messenger, get_session_store
from app.core.config import settings
from app.main import app
from app.schemas.baileys import GroupInfo, PairingResult
from app.schemas.webhook import InboundMessage
from app.services.baileys_service import PairingConnector
from app.services.session_service import InMemorySessionStore
from app.services.whatsapp_service import WhatsAppService

VERIFY_TOKEN = "sectet"
ACCESS_TOKEN = "test-access-token"
PHONE_NUMBER_ID = "123456789"
SENDER = "987654321"


class FakeConnector(PairingConnector):
    """In-process stand-in for the Baileys bridge."""

    def __init__(self):
        self.code = "ABCD1234"
        self.session_id = "session-1"
        self.already_registered = False
        self.connected = True
        self.groups: List[GroupInfo] = [
            GroupInfo(id="1@g.us", name="Family Group", participants=["a@s.whatsapp.net"], participant_count=1),
            GroupInfo(id="2@g.us", name="Work Team"),
        ]
        self.pairing_error: Optional[Exception] = None
        self.groups_error: Optional[Exception] = None
        self.status_error: Optional[Exception] = None
        self.disconnect_error: Optional[Exception] = None
        self.pairing_calls: List[str] = []
        self.disconnected = False

    async def connect_with_pairing_code(self, phone_number: str) -> PairingResult:
        self.pairing_calls.append(phone_number)
        if self.pairing_error:
            raise self.pairing_error
        if self.already_registered:
            return PairingResult(already_registered=True, session_id=self.session_id)
        return PairingResult(code=self.code, session_id=self.session_id)

    async def get_groups(self) -> List[GroupInfo]:
        if self.groups_error:
            raise self.groups_error
        return self.groups

    async def is_connected(self) -> bool:
        if self.status_error:
            raise self.status_error
        return self.connected

    async def disconnect(self) -> None:
        if self.disconnect_error:
            raise self.disconnect_error
        self.disconnected = True
        self.connected = False


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def messenger():
    mock = MagicMock(spec=WhatsAppService)
    mock.send_message = AsyncMock(return_value={})
    mock.format_echo_message = WhatsAppService.format_echo_message
    return mock


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture(autouse=True)
def webhook_settings(monkeypatch):
    monkeypatch.setattr(settings, "WEBHOOK_VERIFY_TOKEN", VERIFY_TOKEN)
    monkeypatch.setattr(settings, "ACCESS_TOKEN", ACCESS_TOKEN)
    monkeypatch.setattr(settings, "ECHO_MODE", False)


@pytest.fixture
def client(connector, messenger, session_store):
    app.dependency_overrides[get_connector] = lambda: connector
    app.dependency_overrides[get_messenger] = lambda: messenger
    app.dependency_overrides[get_session_store] = lambda: session_store

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def make_payload():
    """Builds a Cloud API webhook body carrying one text message."""
    def _make(text: Optional[str] = "Test message", sender: str = SENDER, phone_number_id: str = PHONE_NUMBER_ID):
        message = {"from": sender, "id": "wamid.test"}
        if text is not None:
            message["text"] = {"body": text}
        return {
            "object": "whatsapp_business_account",
            "entry": [
                {
                    "id": "123456789",
                    "changes": [
                        {
                            "value": {
                                "metadata": {"phone_number_id": phone_number_id},
                                "messages": [message],
                            },
                            "field": "messages",
                        }
                    ],
                }
            ],
        }
    return _make


@pytest.fixture
def make_message():
    def _make(text: str, sender: str = SENDER) -> InboundMessage:
        return InboundMessage(
            phone=sender.split("@")[0],
            sender=sender,
            phone_number_id=PHONE_NUMBER_ID,
            text=text
        )
    return _make
