"""Classified error models.

A raw failure (network, HTTP status, payment-gateway code) is normalized into
a ``ClassifiedError`` carrying category, severity, a ready-to-display user
message, retryability and remediation hints.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ErrorCategory(Enum):
    """Error categories, each with its own handling strategy."""

    NETWORK = "network"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    PAYMENT = "payment"
    SERVER = "server"
    CLIENT = "client"


class ErrorSeverity(Enum):
    """Error severity levels.

    Severity drives alert urgency and auto-dismiss duration. CRITICAL errors
    are never auto-dismissed.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class PaymentErrorCode(Enum):
    """Error codes reported by the payment backend."""

    MIDTRANS_TIMEOUT = "MIDTRANS_TIMEOUT"
    PAYMENT_EXPIRED = "PAYMENT_EXPIRED"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    INVALID_CARD = "INVALID_CARD"
    PAYMENT_DECLINED = "PAYMENT_DECLINED"
    NETWORK_ERROR = "NETWORK_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    DUPLICATE_PAYMENT = "DUPLICATE_PAYMENT"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    CURRENCY_NOT_SUPPORTED = "CURRENCY_NOT_SUPPORTED"


class ClassifiedError(BaseModel):
    """A raw failure normalized into category, severity and retryability.

    Attributes:
        category: ErrorCategory the failure belongs to
        severity: ErrorSeverity, drives alert urgency
        code: Short machine string (e.g. NETWORK_ERROR, PAYMENT_DECLINED)
        message: Technical message for logs
        user_message: Human string for display
        is_retryable: Whether the failure may be admitted to the retry queue
        suggested_actions: Ordered remediation hints
        context: Caller-supplied key/value map merged in at classification
        timestamp: When the failure was classified

    Example:
        error = ClassifiedError(
            category=ErrorCategory.NETWORK,
            severity=ErrorSeverity.MEDIUM,
            code="REQUEST_TIMEOUT",
            message="Request timeout",
            user_message="The request is taking longer than expected.",
            is_retryable=True,
        )
    """

    category: ErrorCategory = ErrorCategory.CLIENT
    severity: ErrorSeverity = ErrorSeverity.LOW
    code: str = "UNKNOWN_ERROR"
    message: str = "An unexpected error occurred"
    user_message: str = "Something went wrong. Please try again."
    is_retryable: bool = False
    suggested_actions: List[str] = Field(default_factory=list)
    context: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_critical(self) -> bool:
        """Critical errors must be dismissed manually."""
        return self.severity == ErrorSeverity.CRITICAL
