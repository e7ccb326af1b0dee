"""
app/services/session_service.py

Purpose: Session and state storage

- SessionStore interface: get / set / delete keyed by phone number
- In-memory store (default) and MongoDB-backed store
- Per-phone asyncio locks so overlapping messages from one sender
  are processed one at a time
- Optional TTL: stale sessions read as absent and are dropped
"""

import asyncio
import weakref
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from app.core.logging import get_logger, LogContext
from app.flow.states import ConversationState
from app.models.session import UserSession
from utils.time_utils import is_session_expired, utcnow

logger = get_logger(__name__)


class SessionStore(ABC):
    """
    Lifetime-scoped store of conversation sessions.

    Subclasses implement the storage primitives; locking, expiry and
    get-or-create live here.
    """

    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl_seconds = ttl_seconds
        # Entries vanish once no coroutine holds or waits on the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    @abstractmethod
    async def _load(self, phone_number: str) -> Optional[UserSession]:
        ...

    @abstractmethod
    async def set(self, session: UserSession) -> None:
        ...

    @abstractmethod
    async def _remove(self, phone_number: str) -> bool:
        ...

    @abstractmethod
    async def purge_expired(self) -> int:
        """Deletes every expired session. Returns how many were removed."""

    def lock(self, phone_number: str) -> asyncio.Lock:
        """
        Returns the lock guarding one sender's session.

        Usage:
            async with store.lock(phone):
                session = await store.get_or_create(phone)
                ...
                await store.set(session)
        """
        lock = self._locks.get(phone_number)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[phone_number] = lock
        return lock

    def is_expired(self, session: UserSession) -> bool:
        return is_session_expired(session.last_interaction, self.ttl_seconds)

    async def get(self, phone_number: str) -> Optional[UserSession]:
        """
        Returns the live session for a phone number, or None.

        An expired session is deleted and reported as missing.
        """
        session = await self._load(phone_number)
        if session is None:
            return None

        if self.is_expired(session):
            with LogContext(phone=phone_number, state=session.state.value):
                logger.info("Session expired, discarding")
            await self._remove(phone_number)
            return None

        return session

    async def delete(self, phone_number: str) -> bool:
        return await self._remove(phone_number)

    async def get_or_create(self, phone_number: str) -> UserSession:
        session = await self.get(phone_number)
        if session is None:
            session = UserSession(phone_number=phone_number, state=ConversationState.IDLE)
            await self.set(session)
            logger.info("Created new session", extra={"phone": phone_number})
        return session

    async def close(self) -> None:
        """Releases any resources held by the store."""


class InMemorySessionStore(SessionStore):
    """
    Sessions held in a dict for the lifetime of the process.
    """

    def __init__(self, ttl_seconds: Optional[int] = None):
        super().__init__(ttl_seconds)
        self._sessions: Dict[str, UserSession] = {}

    async def _load(self, phone_number: str) -> Optional[UserSession]:
        return self._sessions.get(phone_number)

    async def set(self, session: UserSession) -> None:
        self._sessions[session.phone_number] = session

    async def _remove(self, phone_number: str) -> bool:
        return self._sessions.pop(phone_number, None) is not None

    async def purge_expired(self) -> int:
        expired = [phone for phone, session in self._sessions.items() if self.is_expired(session)]
        for phone in expired:
            await self.delete(phone)

        if expired:
            logger.info(f"Purged {len(expired)} expired sessions")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


class MongoSessionStore(SessionStore):
    """
    Sessions kept in the MongoDB "sessions" collection.

    Locks are per process; running several workers against one collection
    still needs a single worker per sender.
    """

    def __init__(self, collection, ttl_seconds: Optional[int] = None):
        super().__init__(ttl_seconds)
        self.collection = collection

    async def _load(self, phone_number: str) -> Optional[UserSession]:
        document = await self.collection.find_one({"phone_number": phone_number})
        if not document:
            return None

        try:
            return UserSession.from_document(document)
        except PydanticValidationError as e:
            # Unreadable state restarts the conversation
            logger.warning(f"Discarding unreadable session: {e}", extra={"phone": phone_number})
            await self._remove(phone_number)
            return None

    async def set(self, session: UserSession) -> None:
        await self.collection.replace_one(
            {"phone_number": session.phone_number},
            session.to_document(),
            upsert=True
        )

    async def _remove(self, phone_number: str) -> bool:
        result = await self.collection.delete_one({"phone_number": phone_number})
        return result.deleted_count > 0

    async def purge_expired(self) -> int:
        if self.ttl_seconds is None:
            return 0

        cutoff = utcnow() - timedelta(seconds=self.ttl_seconds)
        result = await self.collection.delete_many({"last_interaction": {"$lt": cutoff}})

        if result.deleted_count:
            logger.info(f"Purged {result.deleted_count} expired sessions")
        return result.deleted_count
