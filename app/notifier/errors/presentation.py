"""Alert presentation policy.

Maps classified errors and notification priorities to the title, status and
auto-dismiss duration a UI layer uses when surfacing them. Durations are in
milliseconds; ``None`` means the alert stays until dismissed manually.
"""

from typing import Any, Dict, Optional

from notifier.errors.models import ClassifiedError, ErrorCategory, ErrorSeverity


def toast_title(category: ErrorCategory, severity: ErrorSeverity) -> str:
    if severity == ErrorSeverity.CRITICAL:
        return "Critical Error"
    if severity == ErrorSeverity.HIGH:
        return "Error"
    if category == ErrorCategory.PAYMENT:
        return "Payment Issue"
    if category == ErrorCategory.NETWORK:
        return "Connection Issue"
    if category == ErrorCategory.VALIDATION:
        return "Input Error"
    return "Warning"


def toast_status(severity: ErrorSeverity) -> str:
    if severity in (ErrorSeverity.CRITICAL, ErrorSeverity.HIGH):
        return "error"
    if severity == ErrorSeverity.MEDIUM:
        return "warning"
    return "info"


def toast_duration(severity: ErrorSeverity) -> Optional[int]:
    if severity == ErrorSeverity.CRITICAL:
        return None
    if severity == ErrorSeverity.HIGH:
        return 8000
    if severity == ErrorSeverity.MEDIUM:
        return 6000
    return 4000


def notification_toast_duration(priority: Any) -> Optional[int]:
    """Auto-dismiss duration for a notification of the given priority.

    Args:
        priority: NotificationPriority or its string value

    Returns:
        Duration in milliseconds, or None for urgent notifications
    """
    value = getattr(priority, "value", priority)
    if value == "urgent":
        return None
    if value == "high":
        return 8000
    if value == "medium":
        return 6000
    return 4000


def build_toast(
    error: ClassifiedError, custom_message: Optional[str] = None
) -> Dict[str, Any]:
    """Build the alert payload for a classified error.

    Args:
        error: The classified error to present
        custom_message: Optional message overriding ``error.user_message``

    Returns:
        Dict with title, description, status, duration and is_closable
    """
    return {
        "title": toast_title(error.category, error.severity),
        "description": custom_message or error.user_message,
        "status": toast_status(error.severity),
        "duration": toast_duration(error.severity),
        "is_closable": True,
    }
