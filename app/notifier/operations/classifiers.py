"""Error classifiers for transport exceptions.

Converts ``requests`` exceptions and HTTP responses into the notifier's
``DeliveryError`` hierarchy, and delivery errors into ``OperationResult``
objects. Centralizes transport error handling so channel senders stay small.

Key Functions:
- raise_for_response(): Non-2xx response -> BackendHTTPError
- to_delivery_error(): requests exception -> DeliveryError subclass
- classify_delivery_error(): DeliveryError -> OperationResult

Usage:
    from notifier.operations.classifiers import classify_delivery_error

    try:
        client.post("/notifications/email", payload)
    except DeliveryError as exc:
        return classify_delivery_error(exc)
"""

from typing import Any, Dict, Optional

import requests

from notifier.errors.exceptions import (
    BackendConnectionError,
    BackendHTTPError,
    BackendTimeoutError,
    DeliveryError,
    GatewayError,
)
from notifier.operations.result import OperationResult
from notifier.operations.status import OperationStatus


def _json_payload(response: requests.Response) -> Optional[Dict[str, Any]]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def raise_for_response(response: requests.Response) -> None:
    """Raise BackendHTTPError for a non-success response.

    Args:
        response: Response returned by requests

    Raises:
        BackendHTTPError: If the status code is 400 or above
    """
    if response.status_code < 400:
        return

    payload = _json_payload(response)
    message = ""
    if payload and isinstance(payload.get("message"), str):
        message = payload["message"]
    raise BackendHTTPError(response.status_code, message=message, payload=payload)


def to_delivery_error(exc: Exception) -> DeliveryError:
    """Translate a transport exception into a DeliveryError.

    Timeouts are checked before connection errors because
    ``requests.ConnectTimeout`` inherits from both.

    Args:
        exc: Exception raised while talking to the backend

    Returns:
        DeliveryError subclass carrying the original exception as __cause__
    """
    if isinstance(exc, DeliveryError):
        return exc

    if isinstance(exc, (requests.Timeout, TimeoutError)):
        error: DeliveryError = BackendTimeoutError(f"Request timeout: {exc}")
    elif isinstance(exc, (requests.ConnectionError, ConnectionError)):
        error = BackendConnectionError(f"Network Error: {exc}")
    elif isinstance(exc, requests.HTTPError) and exc.response is not None:
        error = BackendHTTPError(
            exc.response.status_code,
            message=str(exc),
            payload=_json_payload(exc.response),
        )
    else:
        error = DeliveryError(f"{type(exc).__name__}: {exc}")

    error.__cause__ = exc
    return error


def classify_delivery_error(exc: Exception) -> OperationResult:
    """Classify a delivery failure into an OperationResult.

    Status Mapping:
    - Timeout / connection failure -> TRANSIENT_ERROR
    - 401 / 403 -> UNAUTHORIZED
    - 404 -> NOT_FOUND
    - 429 -> TRANSIENT_ERROR with retry_after
    - 5xx -> TRANSIENT_ERROR
    - Other 4xx -> PERMANENT_ERROR
    - Payment gateway failure -> TRANSIENT_ERROR
    - Unknown -> TRANSIENT_ERROR

    Args:
        exc: Exception raised by a channel transport

    Returns:
        OperationResult with the DeliveryError attached as ``error``
    """
    error = to_delivery_error(exc)

    if isinstance(error, BackendTimeoutError):
        return OperationResult.transient_error(
            str(error), error_code="REQUEST_TIMEOUT", error=error
        )

    if isinstance(error, BackendConnectionError):
        return OperationResult.transient_error(
            str(error), error_code="CONNECTION_ERROR", error=error
        )

    if isinstance(error, BackendHTTPError):
        status_code = error.status_code

        if status_code in (401, 403):
            return OperationResult.error(
                OperationStatus.UNAUTHORIZED,
                f"Backend rejected credentials ({status_code})",
                error_code="UNAUTHORIZED" if status_code == 401 else "FORBIDDEN",
                error=error,
            )

        if status_code == 404:
            return OperationResult.error(
                OperationStatus.NOT_FOUND,
                "Backend endpoint not found",
                error_code="NOT_FOUND",
                error=error,
            )

        if status_code == 429:
            return OperationResult.transient_error(
                "Backend rate limited",
                error_code="RATE_LIMITED",
                retry_after=60,
                error=error,
            )

        if 500 <= status_code < 600:
            return OperationResult.transient_error(
                f"Backend server error ({status_code})",
                error_code="SERVER_ERROR",
                error=error,
            )

        return OperationResult.permanent_error(
            f"Backend client error ({status_code}): {error}",
            error_code=f"HTTP_{status_code}",
            error=error,
        )

    if isinstance(error, GatewayError):
        return OperationResult.transient_error(
            str(error), error_code=f"GATEWAY_{error.status_code}", error=error
        )

    return OperationResult.transient_error(
        str(error), error_code="SEND_ERROR", error=error
    )
