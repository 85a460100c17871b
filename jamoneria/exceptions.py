"""Error types raised by the order services."""

from typing import Optional


class JamoneriaError(Exception):
    """Base class for storefront errors."""


class ProcessingError(JamoneriaError):
    """An order could not be persisted during checkout."""


class SessionCreationError(JamoneriaError):
    """The payment provider did not return a usable checkout session."""


class PaymentProviderError(JamoneriaError):
    """Transport or HTTP failure talking to the payment provider."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotificationError(JamoneriaError):
    """A Telegram message could not be delivered."""


class DuplicateOrderError(JamoneriaError):
    """An order with the same order_id already exists."""
