"""
app/flow/states.py

Purpose: Defines all conversation states

- Enum for each step in the pairing flow
  (IDLE, WAITING_FOR_PERMISSION, WAITING_FOR_PAIRING, CONNECTED)
- Single source of truth for flow stages
- State transition validation
"""

from enum import Enum
from typing import Dict, List


class ConversationState(str, Enum):
    """
    Defines all possible states in the device-pairing conversation.
    Each state represents a specific step in the user journey.
    """

    # Nothing asked yet (or the user declined)
    IDLE = "idle"

    # Permission prompt sent, waiting for "yes"/"כן"
    WAITING_FOR_PERMISSION = "waiting_for_permission"

    # Pairing code sent, waiting for "done"/"סיימתי"
    WAITING_FOR_PAIRING = "waiting_for_pairing"

    # Linked; every message reports the group count
    CONNECTED = "connected"


# Valid state transitions
STATE_TRANSITIONS: Dict[ConversationState, List[ConversationState]] = {
    ConversationState.IDLE: [
        ConversationState.WAITING_FOR_PERMISSION,
    ],
    ConversationState.WAITING_FOR_PERMISSION: [
        ConversationState.WAITING_FOR_PAIRING,
        ConversationState.IDLE,  # Permission denied
    ],
    ConversationState.WAITING_FOR_PAIRING: [
        ConversationState.CONNECTED,
        ConversationState.WAITING_FOR_PAIRING,  # Reminder / retry
    ],
    ConversationState.CONNECTED: [
        ConversationState.CONNECTED,
    ],
}


def is_valid_transition(from_state: ConversationState, to_state: ConversationState) -> bool:
    """
    Checks if a state transition is valid.

    Staying in the same state is always allowed.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is allowed, False otherwise
    """
    if from_state == to_state:
        return True
    allowed_transitions = STATE_TRANSITIONS.get(from_state, [])
    return to_state in allowed_transitions
