"""Operation result dataclass.

Uniform result type returned by channel senders, including status, data and
the underlying error so callers can classify failures.
"""

from dataclasses import dataclass
from typing import Any, Optional

from notifier.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Uniform result returned from operations.

    Attributes:
        status: OperationStatus -- high-level outcome
        message: str -- human-friendly message for logs/troubleshooting
        data: Optional[Any] -- optional payload (can be dict, list, or object)
        error_code: Optional[str] -- optional machine error code
        retry_after: Optional[int] -- seconds until retry when rate-limited
        error: Optional[BaseException] -- original failure, for classification
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None
    error: Optional[BaseException] = None

    @property
    def is_success(self) -> bool:
        """True if status is SUCCESS."""
        return self.status == OperationStatus.SUCCESS

    @property
    def is_skipped(self) -> bool:
        """True if the operation was intentionally not performed."""
        return self.status == OperationStatus.SKIPPED

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        """Create a SUCCESS OperationResult with optional data."""
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def skipped(cls, message: str, error_code: Optional[str] = None) -> "OperationResult":
        """Create a SKIPPED OperationResult."""
        return cls(
            status=OperationStatus.SKIPPED, message=message, error_code=error_code
        )

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
        error: Optional[BaseException] = None,
    ) -> "OperationResult":
        """Create an error OperationResult.

        Args:
            status: OperationStatus indicating error type
            message: Human-friendly error message
            error_code: Optional machine error code
            retry_after: Optional seconds until retry (for rate limiting)
            data: Optional payload to include with the error
            error: Optional original exception

        Returns:
            OperationResult with specified error status
        """
        return cls(
            status=status,
            message=message,
            error_code=error_code,
            retry_after=retry_after,
            data=data,
            error=error,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        error: Optional[BaseException] = None,
    ) -> "OperationResult":
        """Create a transient (retryable) error result.

        Use for network timeouts, connection failures and server errors.
        """
        return cls.error(
            OperationStatus.TRANSIENT_ERROR,
            message,
            error_code,
            retry_after,
            error=error,
        )

    @classmethod
    def permanent_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        error: Optional[BaseException] = None,
    ) -> "OperationResult":
        """Create a permanent (non-retryable) error result.

        Use for validation errors and malformed requests.
        """
        return cls.error(
            OperationStatus.PERMANENT_ERROR, message, error_code, error=error
        )
