"""Configuration module - public API.

Exports:
    Settings: Main settings class (for testing/overrides)
    get_settings: Cached settings provider
    BackendSettings, DeliverySettings, RetrySettings, StoreSettings: Sections
"""

from notifier.configuration.backend import BackendSettings
from notifier.configuration.delivery import DeliverySettings, StoreSettings
from notifier.configuration.retry import RetrySettings
from notifier.configuration.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "BackendSettings",
    "DeliverySettings",
    "RetrySettings",
    "StoreSettings",
]
