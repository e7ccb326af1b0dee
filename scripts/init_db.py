"""
Session collection setup for the MongoDB backend

Run once (or after changing SESSION_TTL_MINUTES) to create indexes:
    python scripts/init_db.py

Drop expired sessions by hand:
    python scripts/init_db.py --purge
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables before settings are read
load_dotenv()

import logging

from app.core.config import settings
from app.db.indexes import create_indexes
from app.db.mongo import connect_to_mongo, close_mongo_connection, get_sessions_collection
from app.services.session_service import MongoSessionStore

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


async def setup_sessions(purge: bool = False):
    logger.info(f"🔌 Connecting to MongoDB: {settings.MONGODB_DB_NAME}")
    await connect_to_mongo()

    try:
        ttl_seconds = settings.session_ttl_seconds
        await create_indexes(ttl_seconds)

        sessions = get_sessions_collection()
        indexes = await sessions.index_information()
        logger.info("📋 sessions indexes:")
        for idx_name in indexes.keys():
            if idx_name != "_id_":
                logger.info(f"  ✅ {idx_name}")

        if ttl_seconds is None:
            logger.info("ℹ️  SESSION_TTL_MINUTES not set, sessions never expire")

        if purge:
            store = MongoSessionStore(sessions, ttl_seconds=ttl_seconds)
            removed = await store.purge_expired()
            logger.info(f"🧹 Removed {removed} expired sessions")

        logger.info(f"📊 Current sessions: {await sessions.count_documents({})}")

    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(setup_sessions(purge="--purge" in sys.argv[1:]))
