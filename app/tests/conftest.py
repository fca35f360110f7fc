"""Shared fixtures for notifier tests."""

from typing import Any, Dict, List, Optional

import pytest

from notifier.configuration import (
    BackendSettings,
    DeliverySettings,
    RetrySettings,
    Settings,
    StoreSettings,
)
from notifier.errors.models import ClassifiedError, ErrorCategory, ErrorSeverity
from notifier.notifications.models import (
    DeliveryChannel,
    Notification,
    NotificationPriority,
    NotificationType,
)
from notifier.persistence import InMemoryKeyValueStore


@pytest.fixture
def settings_factory():
    """Factory for Settings with overridden sections.

    Example:
        settings = settings_factory(delivery={"channel_timeout_seconds": 1})
    """
    def _factory(
        backend: Optional[Dict[str, Any]] = None,
        delivery: Optional[Dict[str, Any]] = None,
        retry: Optional[Dict[str, Any]] = None,
        store: Optional[Dict[str, Any]] = None,
        **fields: Any,
    ) -> Settings:
        return Settings(
            backend=BackendSettings().model_copy(update=backend or {}),
            delivery=DeliverySettings().model_copy(update=delivery or {}),
            retry=RetrySettings().model_copy(update=retry or {}),
            store=StoreSettings().model_copy(update=store or {}),
            **fields,
        )

    return _factory


@pytest.fixture
def settings(settings_factory):
    return settings_factory()


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def notification_factory():
    """Factory for Notification instances."""

    def _factory(
        type: NotificationType = NotificationType.PAYMENT_SUCCESS,
        title: str = "Payment Successful",
        message: str = "Your payment of 150000 has been processed successfully.",
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        channels: Optional[List[DeliveryChannel]] = None,
        data: Optional[Dict[str, Any]] = None,
        **fields: Any,
    ) -> Notification:
        return Notification(
            type=type,
            title=title,
            message=message,
            priority=priority,
            channels=channels or [DeliveryChannel.IN_APP],
            data=data or {},
            **fields,
        )

    return _factory


@pytest.fixture
def classified_error_factory():
    """Factory for ClassifiedError instances."""

    def _factory(
        category: ErrorCategory = ErrorCategory.NETWORK,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        code: str = "NETWORK_ERROR",
        is_retryable: bool = True,
        **fields: Any,
    ) -> ClassifiedError:
        return ClassifiedError(
            category=category,
            severity=severity,
            code=code,
            is_retryable=is_retryable,
            **fields,
        )

    return _factory
