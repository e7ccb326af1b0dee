"""
utils/time_utils.py

Purpose: Time and expiry helpers

- Session TTL calculations
- Naive UTC clock shared by the session model and stores
"""

from datetime import datetime, timedelta
from typing import Optional


def utcnow() -> datetime:
    return datetime.utcnow()


def is_session_expired(
    last_interaction: Optional[datetime],
    ttl_seconds: Optional[int],
    now: Optional[datetime] = None
) -> bool:
    """
    Checks if a session has expired based on last interaction time.

    A ttl of None means sessions never expire.
    """
    if ttl_seconds is None:
        return False
    if not last_interaction:
        return True

    expiry_time = last_interaction + timedelta(seconds=ttl_seconds)
    return (now or utcnow()) > expiry_time
