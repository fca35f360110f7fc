"""Exception hierarchy for the notification engine.

Transport-level failures are normalized into ``DeliveryError`` subclasses at
the HTTP boundary so the error classifier can categorize them without
knowing which client library produced them.
"""

from typing import Any, Dict, Optional


class NotifierError(Exception):
    """Base class for all notifier errors."""


class DeliveryError(NotifierError):
    """A channel send failed."""


class BackendConnectionError(DeliveryError):
    """The backend could not be reached (DNS, refused connection, reset)."""


class BackendTimeoutError(DeliveryError):
    """The backend did not answer within the request timeout."""


class BackendHTTPError(DeliveryError):
    """The backend answered with a non-success HTTP status.

    Attributes:
        status_code: HTTP status returned by the backend
        payload: Decoded JSON body, when the body was JSON
    """

    def __init__(
        self,
        status_code: int,
        message: str = "",
        payload: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message or f"Backend returned HTTP {status_code}")
        self.status_code = status_code
        self.payload = payload


class GatewayError(DeliveryError):
    """The payment gateway reported a failure with its own status code.

    Attributes:
        status_code: Gateway status code as a string (e.g. "202")
        details: Raw gateway response
    """

    def __init__(
        self,
        status_code: str,
        message: str = "",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message or f"Payment gateway status {status_code}")
        self.status_code = str(status_code)
        self.details = details or {}


class UnknownNotificationTypeError(NotifierError, ValueError):
    """A producer submitted a notification type outside the supported set."""

    def __init__(self, notification_type: Any):
        super().__init__(f"Unknown notification type: {notification_type!r}")
        self.notification_type = notification_type


class PreferenceSyncError(NotifierError):
    """Preferences were merged locally but the remote sync failed.

    Attributes:
        preferences: The merged preferences now in effect locally
    """

    def __init__(self, message: str, preferences: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.preferences = preferences or {}
