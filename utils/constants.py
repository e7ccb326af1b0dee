"""
utils/constants.py

Purpose: Centralized static content

- All user-facing messages
- Accepted reply keywords (English and Hebrew)

(Prevents hardcoding across the codebase)
"""

# ============================================================
# REPLY KEYWORDS
# ============================================================

PERMISSION_KEYWORDS = ("yes", "כן")

PAIRING_DONE_KEYWORDS = ("done", "סיימתי")

# ============================================================
# PERMISSION
# ============================================================

PERMISSION_PROMPT_MESSAGE = (
    "Would you like to connect to your WhatsApp to check how many groups you are "
    'a member of? Reply with "yes" or "כן" to proceed.'
)

PERMISSION_DENIED_MESSAGE = (
    "You denied permission to connect to your WhatsApp. If you change your mind, "
    "send any message to start again."
)

# ============================================================
# PAIRING
# ============================================================

LINKING_INSTRUCTIONS = """1. Open WhatsApp on your phone
2. Go to Settings > Linked Devices
3. Tap on "Link a Device"
4. Enter the pairing code shown above

Once done, reply with "done" or "סיימתי"."""

PAIRING_CODE_MESSAGE = """Please enter this pairing code in your WhatsApp app:

{code}

""" + LINKING_INSTRUCTIONS

PAIRING_FALLBACK_MESSAGE = """There was an error connecting to WhatsApp, but you can still try this test code:

{code}

""" + LINKING_INSTRUCTIONS

ALREADY_REGISTERED_MESSAGE = (
    'This number is already linked to WhatsApp. Reply with "done" or "סיימתי" '
    "to see your groups."
)

PAIRING_REMINDER_MESSAGE = (
    'Please enter the pairing code in your WhatsApp app. Once done, reply with '
    '"done" or "סיימתי".'
)

# ============================================================
# GROUPS
# ============================================================

GROUP_COUNT_MESSAGE = "You are a member of {count} WhatsApp groups."

GROUPS_UNAVAILABLE_MESSAGE = (
    "We couldn't read your WhatsApp groups yet. Make sure the pairing code was "
    "entered, then send any message to check again."
)

# ============================================================
# ERRORS / MISC
# ============================================================

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."

ECHO_PREFIX = "Echo: "

EVENT_RECEIVED = "EVENT_RECEIVED"
