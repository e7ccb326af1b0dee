from typing import Optional, Any


class WaLinkError(Exception):
    """
    Base exception for the WaLink application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(WaLinkError):
    """
    Raised when request input fails validation (e.g. a malformed phone number).
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)


class NotConnectedError(WaLinkError):
    """
    Raised when an operation needs a linked WhatsApp device and there is none.
    """
    def __init__(self, message: str = "Not connected to WhatsApp. Please connect first.", details: Optional[Any] = None):
        super().__init__(message, code="NOT_CONNECTED", status_code=400, details=details)


class InvalidTransitionError(WaLinkError):
    """
    Raised when the conversation flow attempts a transition its table forbids.
    """
    def __init__(self, message: str = "Invalid state transition", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_TRANSITION", status_code=409, details=details)


class ExternalServiceError(WaLinkError):
    """
    Raised when an external service (Graph API, Baileys bridge) fails.
    """
    def __init__(self, message: str = "External service error", code: str = "EXTERNAL_SERVICE_ERROR", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=502, details=details)


class MessagingError(ExternalServiceError):
    """
    Raised when an outbound Cloud API message cannot be delivered.
    """
    def __init__(self, message: str = "Failed to send WhatsApp message", details: Optional[Any] = None):
        super().__init__(message, code="MESSAGING_ERROR", details=details)


class PairingError(ExternalServiceError):
    """
    Raised when the Baileys bridge fails a pairing, groups, status or logout call.
    """
    def __init__(self, message: str = "WhatsApp pairing bridge error", details: Optional[Any] = None):
        super().__init__(message, code="PAIRING_ERROR", details=details)
