"""
app/db/indexes.py

Purpose: Database index management

- Unique index on the session key
- TTL index for automatic cleanup of idle sessions
"""

from typing import Optional

from app.db.mongo import get_sessions_collection
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes(ttl_seconds: Optional[int] = None):
    """
    Creates the session indexes.
    This function is idempotent - safe to run multiple times.

    Args:
        ttl_seconds: Idle lifetime of a session; no TTL index when None
    """
    try:
        sessions = get_sessions_collection()

        # Unique index on phone_number (primary identifier)
        await sessions.create_index("phone_number", unique=True, name="phone_number_unique")
        logger.debug("Created unique index on sessions.phone_number")

        # Index on state for state-based queries
        await sessions.create_index("state", name="state_idx")
        logger.debug("Created index on sessions.state")

        if ttl_seconds is not None:
            # Mongo drops idle sessions on its own; the store also filters on read
            await sessions.create_index(
                "last_interaction",
                expireAfterSeconds=ttl_seconds,
                name="session_ttl_idx"
            )
            logger.debug("Created TTL index on sessions.last_interaction")

        session_indexes = await sessions.index_information()
        logger.info(f"Session indexes ready: {len(session_indexes)}")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise
