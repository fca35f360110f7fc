"""Retry queue settings."""

from pydantic import Field

from notifier.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Retry queue configuration for failed channel sends.

    Environment Variables:
        RETRY_ENABLED: Enable the retry queue (default: True)
        RETRY_TICK_INTERVAL_SECONDS: Interval between retry ticks (default: 5)
        RETRY_BASE_DELAY_MS: Base exponential backoff delay (default: 1000ms)
        RETRY_MAX_DELAY_MS: Maximum backoff delay (default: 30000ms)

    Exponential Backoff:
        Delay calculation: min(base_delay * (2 ^ attempts), max_delay)

        Example with defaults (base=1000ms, max=30000ms):
            Attempt 0: 1000ms
            Attempt 1: 2000ms
            Attempt 2: 4000ms
            Attempt 5: 30000ms (capped)
    """

    enabled: bool = Field(
        default=True,
        alias="RETRY_ENABLED",
        description="Enable retry queue for failed channel sends",
    )
    tick_interval_seconds: int = Field(
        default=5,
        alias="RETRY_TICK_INTERVAL_SECONDS",
        description="Interval between retry queue ticks (seconds)",
    )
    base_delay_ms: int = Field(
        default=1000,
        alias="RETRY_BASE_DELAY_MS",
        description="Base delay for exponential backoff (milliseconds)",
    )
    max_delay_ms: int = Field(
        default=30000,
        alias="RETRY_MAX_DELAY_MS",
        description="Maximum delay for exponential backoff (milliseconds)",
    )
