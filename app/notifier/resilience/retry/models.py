"""Retry queue models.

A retry item pairs one classified error with the action that re-attempts the
failed operation. Actions are either tagged ``RetryIntent`` values, resolved
by a processor registered for their ``operation_type``, or plain zero-argument
callables for in-process use.
"""

import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from notifier.errors.models import ClassifiedError


class RetryResult(Enum):
    """Outcome of one retry attempt.

    Values:
        SUCCESS: Operation completed, remove the item (resolved)
        RETRY: Operation failed, keep the item while attempts remain
        PERMANENT_FAILURE: Operation cannot succeed, drop the item (expired)
    """

    SUCCESS = "success"
    RETRY = "retry"
    PERMANENT_FAILURE = "permanent_failure"


@dataclass
class RetryIntent:
    """Serializable description of an operation to re-attempt.

    Fields:
        operation_type: Namespace identifier (e.g. "notifications.channel.resend")
        payload: Data needed to rebuild the operation

    Example:
        intent = RetryIntent(
            operation_type="notifications.channel.resend",
            payload={"channel": "email", "notification": notification_json},
        )
    """

    operation_type: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate required fields."""
        if not self.operation_type:
            raise ValueError("operation_type is required")
        if not isinstance(self.payload, dict):
            raise ValueError("payload must be a dictionary")


RetryAction = Union[RetryIntent, Callable[[], Any]]


def _generate_item_id() -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


@dataclass
class RetryItem:
    """One queued, retryable failure with its attempt bookkeeping.

    Fields:
        error: The classified failure that admitted this item
        action: RetryIntent or callable re-attempting the operation
        max_attempts: Category-dependent attempt limit
        attempts: Attempts made so far
        next_retry_at: When the item is next due
        last_error: Message from the most recent failed attempt
    """

    error: ClassifiedError
    action: RetryAction
    max_attempts: int
    next_retry_at: datetime
    id: str = field(default_factory=_generate_item_id)
    attempts: int = 0
    last_error: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def operation_type(self) -> str:
        if isinstance(self.action, RetryIntent):
            return self.action.operation_type
        return getattr(self.action, "__name__", "callable")

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.max_attempts
