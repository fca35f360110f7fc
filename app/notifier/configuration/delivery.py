"""Delivery queue and notification log settings."""

from pydantic import Field

from notifier.configuration.base import InfrastructureSettings


class DeliverySettings(InfrastructureSettings):
    """Send queue and channel fan-out configuration.

    Environment Variables:
        DELIVERY_QUEUE_INTERVAL_SECONDS: Queue drain sweep interval (default: 10)
        DELIVERY_CHANNEL_TIMEOUT_SECONDS: Upper bound for one channel send (default: 5)
        DELIVERY_MAX_WORKERS: Threads used for channel fan-out (default: 5)
        DELIVERY_QUEUE_MAX_ATTEMPTS: Re-queue attempts after a systemic
            dispatch failure (default: 3)
        DELIVERY_QUEUE_RETRY_DELAY_SECONDS: Re-queue delay unit, multiplied
            by the attempt number (default: 5)
    """

    queue_interval_seconds: int = Field(
        default=10,
        alias="DELIVERY_QUEUE_INTERVAL_SECONDS",
        description="Interval between queue drain sweeps (seconds)",
    )
    channel_timeout_seconds: float = Field(
        default=5.0,
        alias="DELIVERY_CHANNEL_TIMEOUT_SECONDS",
        description="Maximum time to wait for a single channel send (seconds)",
    )
    max_workers: int = Field(
        default=5,
        alias="DELIVERY_MAX_WORKERS",
        description="Thread pool size for channel fan-out",
    )
    queue_max_attempts: int = Field(
        default=3,
        alias="DELIVERY_QUEUE_MAX_ATTEMPTS",
        description="Re-queue attempts for notifications whose dispatch failed",
    )
    queue_retry_delay_seconds: int = Field(
        default=5,
        alias="DELIVERY_QUEUE_RETRY_DELAY_SECONDS",
        description="Re-queue delay unit (seconds), multiplied by attempt number",
    )


class StoreSettings(InfrastructureSettings):
    """Persisted notification log configuration.

    Environment Variables:
        STORE_BACKEND: 'memory' or 'file' (default: memory)
        STORE_PATH: JSON file used by the file backend
        STORE_MAX_NOTIFICATIONS: Log capacity, oldest evicted first (default: 100)
        STORE_RETENTION_DAYS: Age after which notifications are purged (default: 30)
        STORE_PURGE_INTERVAL_SECONDS: Purge job interval (default: 86400)
    """

    backend: str = Field(
        default="memory",
        alias="STORE_BACKEND",
        description="Key-value backend: 'memory' or 'file'",
    )
    path: str = Field(
        default=".notifier/state.json",
        alias="STORE_PATH",
        description="State file used by the file backend",
    )
    max_notifications: int = Field(
        default=100,
        alias="STORE_MAX_NOTIFICATIONS",
        description="Maximum notifications kept in the log",
    )
    retention_days: int = Field(
        default=30,
        alias="STORE_RETENTION_DAYS",
        description="Notifications older than this are purged (days)",
    )
    purge_interval_seconds: int = Field(
        default=86400,
        alias="STORE_PURGE_INTERVAL_SECONDS",
        description="Interval between purge runs (seconds)",
    )
