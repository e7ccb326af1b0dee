"""
utils/validation_utils.py

Purpose: Input validation

- Digits-only phone number check for pairing requests
- Sender id (JID) normalization
- Keyword matching for conversational replies
"""

import re
from typing import Iterable

PHONE_NUMBER_PATTERN = re.compile(r"^\d+$")


def validate_phone_number(phone: str) -> bool:
    """
    Validates a phone number for device pairing.

    Baileys expects the number in international format with no "+",
    spaces, parentheses or dashes, e.g. 972501234567.

    Args:
        phone: Phone number string

    Returns:
        True if the number is digits only
    """
    if not phone:
        return False

    return bool(PHONE_NUMBER_PATTERN.match(phone))


def normalize_sender_id(sender: str) -> str:
    """
    Strips the WhatsApp suffix from a sender id.

    "972501234567@c.us" -> "972501234567"
    """
    return sender.split("@")[0]


def matches_keyword(text: str, keywords: Iterable[str]) -> bool:
    """
    Case-insensitive exact match of a reply against accepted keywords.

    Surrounding whitespace is ignored, so "Yes " matches "yes".
    """
    if not text:
        return False

    normalized = text.strip().lower()
    return any(normalized == keyword.lower() for keyword in keywords)


def sanitize_input(text: str, max_length: int = 1000) -> str:
    """
    Trims user input for logging.

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = text[:max_length]
    text = " ".join(text.split())

    return text.strip()
