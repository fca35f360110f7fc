"""Error taxonomy, classification and presentation.

The ``ErrorHandler`` facade lives in ``notifier.errors.handler`` and is
imported from there directly, since it depends on the retry queue.
"""

from notifier.errors.classifier import (
    ErrorClassifier,
    classify_error,
    format_validation_message,
)
from notifier.errors.exceptions import (
    BackendConnectionError,
    BackendHTTPError,
    BackendTimeoutError,
    DeliveryError,
    GatewayError,
    NotifierError,
    PreferenceSyncError,
    UnknownNotificationTypeError,
)
from notifier.errors.models import (
    ClassifiedError,
    ErrorCategory,
    ErrorSeverity,
    PaymentErrorCode,
)
from notifier.errors.presentation import (
    build_toast,
    notification_toast_duration,
    toast_duration,
    toast_status,
    toast_title,
)

__all__ = [
    # Classification
    "ErrorClassifier",
    "classify_error",
    "format_validation_message",
    # Models
    "ClassifiedError",
    "ErrorCategory",
    "ErrorSeverity",
    "PaymentErrorCode",
    # Exceptions
    "NotifierError",
    "DeliveryError",
    "BackendConnectionError",
    "BackendHTTPError",
    "BackendTimeoutError",
    "GatewayError",
    "UnknownNotificationTypeError",
    "PreferenceSyncError",
    # Presentation
    "build_toast",
    "notification_toast_duration",
    "toast_duration",
    "toast_status",
    "toast_title",
]
