"""Operation result types and transport error classifiers."""

from notifier.operations.classifiers import (
    classify_delivery_error,
    raise_for_response,
    to_delivery_error,
)
from notifier.operations.result import OperationResult
from notifier.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_delivery_error",
    "raise_for_response",
    "to_delivery_error",
]
