"""Error classifier.

Maps a raw failure to a ``ClassifiedError``. Classification is a pure
function of the error and the caller context; it never raises.

Decision order (first match wins):
1. Connection failure -> network/medium, retryable
2. Timeout -> network/medium, retryable, REQUEST_TIMEOUT
3. HTTP 401 -> authentication/high
4. HTTP 403 -> authorization/high
5. HTTP 400 -> validation/medium, retryable, field errors joined
6. HTTP >= 500 -> server/high, retryable
7. Payment backend error code -> payment, from the code table
8. Payment gateway status code -> payment, tailored message
9. Anything else -> client/low

Usage:
    from notifier.errors import ErrorClassifier

    classifier = ErrorClassifier()
    error = classifier.classify(exc, context={"channel": "email"})
    if error.is_retryable:
        retry_queue.enqueue(error, intent)
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests

from notifier.errors.exceptions import (
    BackendConnectionError,
    BackendHTTPError,
    BackendTimeoutError,
    GatewayError,
)
from notifier.errors.models import (
    ClassifiedError,
    ErrorCategory,
    ErrorSeverity,
    PaymentErrorCode,
)
from notifier.logging import get_module_logger

logger = get_module_logger()

GENERIC_VALIDATION_MESSAGE = "Please check your input and try again."

# code -> (severity, retryable, user_message, suggested_actions)
PAYMENT_CODE_TABLE: Dict[str, tuple] = {
    PaymentErrorCode.MIDTRANS_TIMEOUT.value: (
        ErrorSeverity.MEDIUM,
        True,
        "Payment processing timed out. Please try again.",
        [
            "Try the payment again",
            "Use a different payment method",
            "Contact your bank if the problem persists",
        ],
    ),
    PaymentErrorCode.PAYMENT_EXPIRED.value: (
        ErrorSeverity.MEDIUM,
        False,
        "This payment link has expired. Please generate a new one.",
        [
            "Generate a new payment link",
            "Check the payment deadline",
            "Contact support for assistance",
        ],
    ),
    PaymentErrorCode.INSUFFICIENT_BALANCE.value: (
        ErrorSeverity.MEDIUM,
        True,
        "Insufficient balance. Please check your account or use a different "
        "payment method.",
        [
            "Check your account balance",
            "Use a different payment method",
            "Top up your account balance",
        ],
    ),
    PaymentErrorCode.PAYMENT_DECLINED.value: (
        ErrorSeverity.MEDIUM,
        True,
        "Payment was declined by your bank. Please try a different card or "
        "contact your bank.",
        [
            "Try a different card",
            "Contact your bank",
            "Use a different payment method",
        ],
    ),
}

DEFAULT_PAYMENT_ACTIONS = [
    "Try the payment again",
    "Use a different payment method",
    "Contact support if the problem persists",
]

# gateway status code -> (severity, user_message)
GATEWAY_STATUS_TABLE: Dict[str, tuple] = {
    "200": (ErrorSeverity.LOW, "Payment processed but verification needed."),
    "201": (
        ErrorSeverity.MEDIUM,
        "Payment is pending. Please complete the payment in the payment window.",
    ),
    "202": (
        ErrorSeverity.MEDIUM,
        "Payment was declined. Please try a different payment method.",
    ),
    "400": (
        ErrorSeverity.MEDIUM,
        "Invalid payment information. Please check your details and try again.",
    ),
    "404": (
        ErrorSeverity.MEDIUM,
        "Payment session not found. Please start a new payment.",
    ),
}

DEFAULT_GATEWAY_MESSAGE = "Payment processing encountered an issue. Please try again."


@dataclass
class _ErrorShape:
    """Features extracted from an arbitrary error value."""

    code: Optional[str] = None
    message: str = ""
    status_code: Optional[int] = None
    payload: Optional[Mapping[str, Any]] = None
    gateway_status: Optional[str] = None
    is_connection_error: bool = False
    is_timeout: bool = False


def _to_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _response_payload(response: Any) -> Optional[Mapping[str, Any]]:
    data = getattr(response, "data", None)
    if isinstance(data, Mapping):
        return data
    json_method = getattr(response, "json", None)
    if callable(json_method):
        try:
            body = json_method()
        except ValueError:
            return None
        if isinstance(body, Mapping):
            return body
    return None


def _shape_from_mapping(err: Mapping[str, Any]) -> _ErrorShape:
    shape = _ErrorShape(
        code=err.get("code"),
        message=str(err.get("message") or ""),
    )
    response = err.get("response")
    if isinstance(response, Mapping):
        shape.status_code = _to_int(response.get("status"))
        data = response.get("data")
        shape.payload = data if isinstance(data, Mapping) else None
    else:
        shape.status_code = _to_int(err.get("status_code", err.get("status")))
        data = err.get("data", err.get("payload"))
        shape.payload = data if isinstance(data, Mapping) else None
    if shape.payload is None and err.get("error_code"):
        shape.payload = err
    gateway = err.get("gateway_error") or err.get("midtrans_error")
    if isinstance(gateway, Mapping) and gateway.get("status_code") is not None:
        shape.gateway_status = str(gateway["status_code"])
    return shape


def _shape_from_exception(err: BaseException) -> _ErrorShape:
    shape = _ErrorShape(code=getattr(err, "code", None), message=str(err))

    if isinstance(err, BackendHTTPError):
        shape.status_code = err.status_code
        shape.payload = err.payload
    elif isinstance(err, requests.HTTPError) and err.response is not None:
        shape.status_code = err.response.status_code
        shape.payload = _response_payload(err.response)
    else:
        response = getattr(err, "response", None)
        if response is not None:
            shape.status_code = _to_int(
                getattr(response, "status_code", getattr(response, "status", None))
            )
            shape.payload = _response_payload(response)
        elif getattr(err, "status_code", None) is not None and not isinstance(
            err, GatewayError
        ):
            shape.status_code = _to_int(err.status_code)

    if isinstance(err, GatewayError):
        shape.gateway_status = err.status_code

    shape.is_timeout = isinstance(
        err, (BackendTimeoutError, requests.Timeout, TimeoutError)
    )
    shape.is_connection_error = not shape.is_timeout and isinstance(
        err, (BackendConnectionError, requests.ConnectionError, ConnectionError)
    )
    return shape


def _extract_shape(err: Any) -> _ErrorShape:
    if isinstance(err, BaseException):
        return _shape_from_exception(err)
    if isinstance(err, Mapping):
        return _shape_from_mapping(err)
    if isinstance(err, str):
        return _ErrorShape(message=err)
    return _ErrorShape(message="" if err is None else str(err))


def format_validation_message(payload: Optional[Mapping[str, Any]]) -> str:
    """Build a user message from a validation error payload.

    Args:
        payload: Decoded error body, possibly with ``errors`` or ``message``

    Returns:
        Field errors joined into one sentence, the payload message, or a
        generic prompt
    """
    if not payload:
        return GENERIC_VALIDATION_MESSAGE

    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        return f"Please correct the following: {', '.join(str(e) for e in errors)}"
    if isinstance(errors, Mapping) and errors:
        parts = []
        for field_name, messages in errors.items():
            if isinstance(messages, (list, tuple)):
                messages = "; ".join(str(m) for m in messages)
            parts.append(f"{field_name}: {messages}")
        return f"Please correct the following: {', '.join(parts)}"

    message = payload.get("message")
    if isinstance(message, str) and message:
        return message

    return GENERIC_VALIDATION_MESSAGE


class ErrorClassifier:
    """Classifies raw failures into ClassifiedError values.

    Accepts exceptions (notifier delivery errors, ``requests`` exceptions,
    built-in connection/timeout errors), JSON-like mappings shaped like HTTP
    client errors, plain strings and anything else. Never raises.
    """

    def classify(
        self, err: Any, context: Optional[Mapping[str, Any]] = None
    ) -> ClassifiedError:
        """Classify a raw failure.

        Args:
            err: The failure to classify
            context: Caller-supplied key/value map merged into the result

        Returns:
            ClassifiedError with category and severity always populated
        """
        try:
            classified = self._classify(_extract_shape(err))
        except Exception as e:  # classification must stay total
            logger.warning(
                "error_classification_failed",
                error=str(e),
                error_type=type(err).__name__,
            )
            classified = self._fallback()

        if context:
            classified.context = {**classified.context, **dict(context)}
        return classified

    def _classify(self, shape: _ErrorShape) -> ClassifiedError:
        # Message heuristics only apply when there is no HTTP status
        has_status = shape.status_code is not None
        message = shape.message or ""

        if shape.is_connection_error or (
            not has_status
            and (shape.code == "ERR_NETWORK" or "Network Error" in message)
        ):
            return ClassifiedError(
                category=ErrorCategory.NETWORK,
                severity=ErrorSeverity.MEDIUM,
                code="NETWORK_ERROR",
                message="Network connection error",
                user_message="Please check your internet connection and try again.",
                is_retryable=True,
                suggested_actions=[
                    "Check your internet connection",
                    "Try refreshing the page",
                    "Contact support if the problem persists",
                ],
            )

        lowered = message.lower()
        if shape.is_timeout or (
            not has_status
            and (
                shape.code == "ECONNABORTED"
                or "timeout" in lowered
                or "timed out" in lowered
            )
        ):
            return ClassifiedError(
                category=ErrorCategory.NETWORK,
                severity=ErrorSeverity.MEDIUM,
                code="REQUEST_TIMEOUT",
                message="Request timeout",
                user_message=(
                    "The request is taking longer than expected. Please try again."
                ),
                is_retryable=True,
                suggested_actions=[
                    "Wait a moment and try again",
                    "Check your internet connection",
                    "Try using a different payment method",
                ],
            )

        if shape.status_code == 401:
            return ClassifiedError(
                category=ErrorCategory.AUTHENTICATION,
                severity=ErrorSeverity.HIGH,
                code="AUTHENTICATION_FAILED",
                message="Authentication failed",
                user_message="Your session has expired. Please log in again.",
                is_retryable=False,
                suggested_actions=[
                    "Log in again",
                    "Check your credentials",
                    "Clear browser cache and cookies",
                ],
            )

        if shape.status_code == 403:
            return ClassifiedError(
                category=ErrorCategory.AUTHORIZATION,
                severity=ErrorSeverity.HIGH,
                code="AUTHORIZATION_FAILED",
                message="Access denied",
                user_message="You don't have permission to perform this action.",
                is_retryable=False,
                suggested_actions=[
                    "Contact support for assistance",
                    "Verify your account status",
                    "Check if your account has the required permissions",
                ],
            )

        if shape.status_code == 400:
            payload_message = (shape.payload or {}).get("message")
            return ClassifiedError(
                category=ErrorCategory.VALIDATION,
                severity=ErrorSeverity.MEDIUM,
                code="VALIDATION_ERROR",
                message=payload_message
                if isinstance(payload_message, str) and payload_message
                else "Validation error",
                user_message=format_validation_message(shape.payload),
                is_retryable=True,
                suggested_actions=[
                    "Check the entered information",
                    "Ensure all required fields are filled",
                    "Verify the format of entered data",
                ],
            )

        if shape.status_code is not None and shape.status_code >= 500:
            return ClassifiedError(
                category=ErrorCategory.SERVER,
                severity=ErrorSeverity.HIGH,
                code="SERVER_ERROR",
                message="Server error",
                user_message=(
                    "Our servers are experiencing issues. Please try again later."
                ),
                is_retryable=True,
                suggested_actions=[
                    "Wait a few minutes and try again",
                    "Use a different payment method",
                    "Contact support if the problem persists",
                ],
            )

        if shape.payload and shape.payload.get("error_code"):
            return self._classify_payment_code(shape.payload)

        if shape.gateway_status is not None:
            return self._classify_gateway_status(shape.gateway_status)

        return self._fallback()

    def _classify_payment_code(self, payload: Mapping[str, Any]) -> ClassifiedError:
        code = str(payload["error_code"])
        entry = PAYMENT_CODE_TABLE.get(code)
        if entry is not None:
            severity, retryable, user_message, actions = entry
            return ClassifiedError(
                category=ErrorCategory.PAYMENT,
                severity=severity,
                code=code,
                message=f"Payment error: {code}",
                user_message=user_message,
                is_retryable=retryable,
                suggested_actions=list(actions),
            )

        passthrough = payload.get("message")
        return ClassifiedError(
            category=ErrorCategory.PAYMENT,
            severity=ErrorSeverity.MEDIUM,
            code=code,
            message=f"Payment error: {code}",
            user_message=passthrough
            if isinstance(passthrough, str) and passthrough
            else "Payment processing failed. Please try again.",
            is_retryable=True,
            suggested_actions=list(DEFAULT_PAYMENT_ACTIONS),
        )

    def _classify_gateway_status(self, status_code: str) -> ClassifiedError:
        severity, user_message = GATEWAY_STATUS_TABLE.get(
            status_code, (ErrorSeverity.MEDIUM, DEFAULT_GATEWAY_MESSAGE)
        )
        return ClassifiedError(
            category=ErrorCategory.PAYMENT,
            severity=severity,
            code=f"GATEWAY_{status_code}",
            message=f"Payment gateway status {status_code}",
            user_message=user_message,
            is_retryable=False,
            suggested_actions=list(DEFAULT_PAYMENT_ACTIONS),
        )

    def _fallback(self) -> ClassifiedError:
        return ClassifiedError(
            category=ErrorCategory.CLIENT,
            severity=ErrorSeverity.LOW,
            code="UNKNOWN_ERROR",
            message="An unexpected error occurred",
            user_message="Something went wrong. Please try again.",
            is_retryable=False,
            suggested_actions=[
                "Try again",
                "Refresh the page",
                "Contact support if the problem persists",
            ],
        )


_default_classifier = ErrorClassifier()


def classify_error(
    err: Any, context: Optional[Mapping[str, Any]] = None
) -> ClassifiedError:
    """Classify a failure with the module-level classifier."""
    return _default_classifier.classify(err, context)
