"""Notification backend integration settings."""

from pydantic import Field

from notifier.configuration.base import IntegrationSettings


class BackendSettings(IntegrationSettings):
    """Remote notification backend configuration.

    The backend exposes the email, SMS, push and webhook delivery endpoints
    as well as the per-user preference service.

    Environment Variables:
        NOTIFIER_API_URL: Base URL of the notification API
        NOTIFIER_API_TOKEN: Bearer token sent with every request
        NOTIFIER_HTTP_TIMEOUT_SECONDS: Per-request timeout (default: 5)

    Example:
        ```python
        from notifier.configuration import get_settings

        settings = get_settings()

        api_url = settings.backend.API_URL
        timeout = settings.backend.HTTP_TIMEOUT_SECONDS
        ```
    """

    API_URL: str = Field(default="http://localhost:8080/api", alias="NOTIFIER_API_URL")
    API_TOKEN: str | None = Field(default=None, alias="NOTIFIER_API_TOKEN")
    HTTP_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        alias="NOTIFIER_HTTP_TIMEOUT_SECONDS",
        description="Timeout applied to every backend request (seconds)",
    )
