"""Notifier configuration settings - main aggregator."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from notifier.configuration.backend import BackendSettings
from notifier.configuration.delivery import DeliverySettings, StoreSettings
from notifier.configuration.retry import RetrySettings


class Settings(BaseSettings):
    """Notifier configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object:

    - **backend**: Remote notification API (delivery endpoints, preferences)
    - **delivery**: Send queue and channel fan-out
    - **retry**: Retry queue backoff and tick interval
    - **store**: Persisted notification log

    Environment Variables:
        ENVIRONMENT: Deployment environment name (default: development)
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        USER_ID: User whose preferences are loaded and synced

    Example:
        ```python
        from notifier.configuration import get_settings

        settings = get_settings()

        if settings.retry.enabled:
            interval = settings.retry.tick_interval_seconds

        if settings.is_production:
            # Production-specific logic...
        ```
    """

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    USER_ID: str = "me"

    backend: BackendSettings
    delivery: DeliverySettings
    retry: RetrySettings
    store: StoreSettings

    @property
    def is_production(self) -> bool:
        """Check if the engine is running in production.

        Returns:
            True if ENVIRONMENT is 'production', False otherwise.
        """
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "backend": BackendSettings,
            "delivery": DeliverySettings,
            "retry": RetrySettings,
            "store": StoreSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get process-scoped settings singleton.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()
