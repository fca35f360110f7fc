"""Notification engine core models.

Uses Pydantic BaseModel for:
- Runtime validation of producer input
- JSON round-tripping through the persisted state store
- Type safety with proper error messages
"""

import secrets
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from notifier.errors.models import ClassifiedError


class NotificationType(Enum):
    """Kinds of application events the engine delivers."""

    PAYMENT_SUCCESS = "payment_success"
    PAYMENT_FAILED = "payment_failed"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_EXPIRED = "payment_expired"
    INVOICE_CREATED = "invoice_created"
    INVOICE_DUE = "invoice_due"
    INVOICE_OVERDUE = "invoice_overdue"
    VERIFICATION_REQUIRED = "verification_required"
    VERIFICATION_COMPLETE = "verification_complete"
    SYSTEM_MAINTENANCE = "system_maintenance"
    SECURITY_ALERT = "security_alert"


class NotificationPriority(Enum):
    """Notification priority levels.

    URGENT notifications are never auto-dismissed from the UI surface.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class DeliveryChannel(Enum):
    """Delivery transports."""

    IN_APP = "in_app"
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"
    WEBHOOK = "webhook"


class NotificationStatus(Enum):
    """Outcome of one channel send, for observability."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    RETRYING = "retrying"
    SKIPPED = "skipped"


class SubscriptionEvent(Enum):
    """Events pushed to subscribers."""

    NEW_NOTIFICATION = "new_notification"
    NOTIFICATION_DELIVERED = "notification_delivered"
    NOTIFICATION_READ = "notification_read"
    ALL_NOTIFICATIONS_READ = "all_notifications_read"


def generate_notification_id() -> str:
    """Timestamp-prefixed id with a random suffix."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


class Notification(BaseModel):
    """A notification flowing through the engine.

    Attributes:
        id: Unique id (millisecond timestamp + random suffix)
        type: NotificationType
        title: Display title
        message: Display body
        data: Free-form payload carried to channel senders and UI
        priority: Resolved priority
        channels: Delivery channels actually used (minimum 1)
        timestamp: Creation time
        read: Mutated only by mark-as-read operations
        delivered: True once every channel attempt has resolved
        retry_count: Outer send-queue re-queue attempts

    Example:
        notification = Notification(
            type=NotificationType.INVOICE_DUE,
            title="Invoice Due Soon",
            message="Invoice INV-001 is due on 2024-02-01.",
            priority=NotificationPriority.HIGH,
            channels=[DeliveryChannel.IN_APP, DeliveryChannel.EMAIL],
            data={"invoiceNumber": "INV-001"},
        )
    """

    id: str = Field(default_factory=generate_notification_id)
    type: NotificationType
    title: str
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    channels: List[DeliveryChannel] = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    read: bool = False
    delivered: bool = False
    retry_count: int = 0

    def to_record(self) -> Dict[str, Any]:
        """JSON-serializable form used for persistence and retry intents."""
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Notification":
        return cls.model_validate(record)


class Preference(BaseModel):
    """Per-type delivery policy.

    Attributes:
        enabled: Whether the type is delivered at all
        channels: Ordered channels to use when enabled
        priority: Default priority for this type
    """

    enabled: bool = True
    channels: List[DeliveryChannel] = Field(
        default_factory=lambda: [DeliveryChannel.IN_APP], min_length=1
    )
    priority: NotificationPriority = NotificationPriority.MEDIUM


class NotificationResult(BaseModel):
    """Outcome of one channel send.

    Attributes:
        notification_id: Notification that was sent
        channel: Channel used
        status: SENT, FAILED, RETRYING or SKIPPED
        message: Human-readable result message
        error_code: Optional machine error code
        error: Classified failure, for FAILED and RETRYING outcomes
        retry_id: Retry item id when the failure was queued for retry
    """

    notification_id: str
    channel: str
    status: NotificationStatus
    message: str = ""
    error_code: Optional[str] = None
    error: Optional[ClassifiedError] = None
    retry_id: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if delivery was successful."""
        return self.status == NotificationStatus.SENT


class NotificationStats(BaseModel):
    """Counters derived by scanning the notification log."""

    total: int = 0
    unread: int = 0
    today: int = 0
    this_week: int = 0
    by_type: Dict[str, int] = Field(default_factory=dict)
    by_priority: Dict[str, int] = Field(default_factory=dict)
