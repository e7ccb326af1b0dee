"""
app/services/baileys_service.py

Purpose: Device pairing through the Baileys bridge

- PairingConnector: what the flow and the control API need from a
  linked-device library (pairing code, groups, status, logout)
- BaileysBridgeConnector: talks to the Node sidecar that runs Baileys
  and owns the WhatsApp socket and its credential files

Bridge HTTP contract:
    POST /pairing   {phoneNumber, authFolder} -> {code, alreadyRegistered, sessionId}
    GET  /groups    -> {groups: {jid: groupMetadata}} | 409 when not linked
    GET  /status    -> {connected: bool}
    POST /logout    -> {success: true}
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import NotConnectedError, PairingError
from app.core.logging import get_logger
from app.schemas.baileys import GroupInfo, PairingResult

logger = get_logger(__name__)


class PairingConnector(ABC):
    """Linked-device operations used by the conversation flow and control API."""

    @abstractmethod
    async def connect_with_pairing_code(self, phone_number: str) -> PairingResult:
        """Starts linking ``phone_number`` and returns the code to type into WhatsApp."""

    @abstractmethod
    async def get_groups(self) -> List[GroupInfo]:
        """Lists the groups of the linked account. Raises NotConnectedError if unlinked."""

    @abstractmethod
    async def is_connected(self) -> bool:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...

    async def close(self) -> None:
        """Releases transport resources."""


def group_from_metadata(jid: str, metadata: Dict[str, Any]) -> GroupInfo:
    """
    Converts one entry of Baileys' groupFetchAllParticipating() into GroupInfo.
    """
    participants = [
        p["id"] if isinstance(p, dict) else str(p)
        for p in metadata.get("participants") or []
    ]
    return GroupInfo(
        id=metadata.get("id") or jid,
        name=metadata.get("subject") or metadata.get("name"),
        participants=participants,
        participant_count=len(participants),
        creation=metadata.get("creation")
    )


class BaileysBridgeConnector(PairingConnector):
    """
    Client for the Baileys bridge sidecar.

    Architecture:
        WaLink <-> BaileysBridgeConnector <-> Bridge (Node.js, Baileys) <-> WhatsApp
    """

    def __init__(
        self,
        bridge_url: Optional[str] = None,
        auth_folder: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.bridge_url = (bridge_url or settings.BAILEYS_BRIDGE_URL).rstrip("/")
        self.auth_folder = Path(auth_folder or settings.BAILEYS_AUTH_FOLDER).resolve()
        self.timeout = timeout if timeout is not None else settings.BAILEYS_BRIDGE_TIMEOUT
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

        # Credential state lives here; the bridge reads and writes it
        self.auth_folder.mkdir(parents=True, exist_ok=True)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.bridge_url}{path}"
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Baileys bridge timeout: {method} {path}")
            raise PairingError("Baileys bridge timeout") from e
        except httpx.HTTPError as e:
            logger.error(f"Baileys bridge unreachable: {method} {path}: {e}")
            raise PairingError(f"Baileys bridge unreachable: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise PairingError("Baileys bridge returned invalid JSON", details=response.text) from e
        if not isinstance(body, dict):
            raise PairingError("Baileys bridge returned an unexpected body", details=body)
        return body

    def _raise_for_status(self, response: httpx.Response, action: str):
        if response.is_success:
            return
        logger.error(f"Baileys bridge error during {action}: {response.status_code} - {response.text}")
        raise PairingError(
            f"Baileys bridge error during {action}: {response.status_code}",
            details=response.text
        )

    async def connect_with_pairing_code(self, phone_number: str) -> PairingResult:
        """
        Asks the bridge to open a socket for ``phone_number`` and request a pairing code.

        Args:
            phone_number: International format, digits only

        Returns:
            PairingResult; ``already_registered`` is set when the stored
            credentials are already linked and no code is needed
        """
        logger.info("Requesting pairing code", extra={"phone": phone_number})

        response = await self._request(
            "POST",
            "/pairing",
            json={"phoneNumber": phone_number, "authFolder": str(self.auth_folder)}
        )
        self._raise_for_status(response, "pairing")

        result = PairingResult.model_validate(self._json(response))
        if not result.code and not result.already_registered:
            raise PairingError("Baileys bridge did not return a pairing code")

        if result.already_registered:
            logger.info("Already registered, no pairing code needed", extra={"phone": phone_number})
        else:
            logger.info(f"Pairing code issued for {phone_number}", extra={"phone": phone_number})

        return result

    async def get_groups(self) -> List[GroupInfo]:
        response = await self._request("GET", "/groups")
        if response.status_code == 409:
            raise NotConnectedError()
        self._raise_for_status(response, "groups")

        groups = self._json(response).get("groups") or {}
        if isinstance(groups, dict):
            return [group_from_metadata(jid, meta) for jid, meta in groups.items()]
        return [GroupInfo.model_validate(group) for group in groups]

    async def is_connected(self) -> bool:
        response = await self._request("GET", "/status")
        self._raise_for_status(response, "status")
        return bool(self._json(response).get("connected", False))

    async def disconnect(self) -> None:
        response = await self._request("POST", "/logout")
        self._raise_for_status(response, "logout")
        logger.info("Disconnected from WhatsApp")

    async def close(self) -> None:
        await self._client.aclose()
