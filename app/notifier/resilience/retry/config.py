"""Retry queue configuration.

This module defines backoff timing and per-category attempt limits.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


def _default_category_attempts() -> Dict[str, int]:
    return {"network": 3, "payment": 2, "server": 3}


@dataclass
class RetryConfig:
    """Configuration for retry queue behavior.

    Attributes:
        base_delay_ms: Delay before the first attempt, doubled per attempt
        max_delay_ms: Ceiling for the exponential backoff
        category_max_attempts: Max attempts keyed by error category value
        default_max_attempts: Max attempts for categories not in the table

    Example:
        # Default configuration
        config = RetryConfig()
        config.delay_ms(0)   # 1000
        config.delay_ms(5)   # 30000 (capped)

        # Custom configuration
        config = RetryConfig(base_delay_ms=500, max_delay_ms=10000)
    """

    base_delay_ms: int = 1000
    max_delay_ms: int = 30000  # 30 seconds
    category_max_attempts: Dict[str, int] = field(
        default_factory=_default_category_attempts
    )
    default_max_attempts: int = 1

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.base_delay_ms < 1:
            raise ValueError("base_delay_ms must be at least 1")
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("max_delay_ms must be >= base_delay_ms")
        if self.default_max_attempts < 1:
            raise ValueError("default_max_attempts must be at least 1")
        for category, attempts in self.category_max_attempts.items():
            if attempts < 1:
                raise ValueError(f"max attempts for {category} must be at least 1")

    def delay_ms(self, attempt: int) -> int:
        """Backoff delay before the next attempt.

        Args:
            attempt: Number of attempts made so far

        Returns:
            ``min(base_delay_ms * 2**attempt, max_delay_ms)``
        """
        if attempt < 0:
            attempt = 0
        # Avoid building huge integers for large attempt counts
        if attempt >= 64:
            return self.max_delay_ms
        return min(self.base_delay_ms * (2**attempt), self.max_delay_ms)

    def max_attempts_for(self, category: Any) -> int:
        """Max attempts for an ErrorCategory (or its string value)."""
        key = getattr(category, "value", category)
        return self.category_max_attempts.get(key, self.default_max_attempts)
