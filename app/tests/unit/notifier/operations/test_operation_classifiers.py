"""Unit tests for transport error classifiers."""

from unittest.mock import MagicMock

import pytest
import requests

from notifier.errors import (
    BackendConnectionError,
    BackendHTTPError,
    BackendTimeoutError,
    DeliveryError,
    GatewayError,
)
from notifier.operations import (
    OperationResult,
    OperationStatus,
    classify_delivery_error,
    raise_for_response,
    to_delivery_error,
)


def make_response(status_code, body=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.mark.unit
class TestRaiseForResponse:
    """Tests for raise_for_response."""

    def test_success_does_not_raise(self):
        raise_for_response(make_response(201))

    def test_error_with_json_message(self):
        with pytest.raises(BackendHTTPError) as exc_info:
            raise_for_response(make_response(422, {"message": "Invalid amount"}))

        assert exc_info.value.status_code == 422
        assert str(exc_info.value) == "Invalid amount"
        assert exc_info.value.payload == {"message": "Invalid amount"}

    def test_error_without_json_body(self):
        with pytest.raises(BackendHTTPError) as exc_info:
            raise_for_response(make_response(502))

        assert str(exc_info.value) == "Backend returned HTTP 502"
        assert exc_info.value.payload is None


@pytest.mark.unit
class TestToDeliveryError:
    """Tests for to_delivery_error."""

    def test_connect_timeout_is_timeout(self):
        error = to_delivery_error(requests.ConnectTimeout("slow"))

        assert isinstance(error, BackendTimeoutError)
        assert str(error).startswith("Request timeout")

    def test_connection_error(self):
        exc = requests.ConnectionError("refused")

        error = to_delivery_error(exc)

        assert isinstance(error, BackendConnectionError)
        assert error.__cause__ is exc

    def test_builtin_timeout(self):
        assert isinstance(to_delivery_error(TimeoutError()), BackendTimeoutError)

    def test_http_error_with_response(self):
        exc = requests.HTTPError("boom", response=make_response(503))

        error = to_delivery_error(exc)

        assert isinstance(error, BackendHTTPError)
        assert error.status_code == 503

    def test_delivery_error_passes_through(self):
        exc = GatewayError("202")

        assert to_delivery_error(exc) is exc

    def test_unknown_exception(self):
        error = to_delivery_error(KeyError("x"))

        assert type(error) is DeliveryError
        assert "KeyError" in str(error)


@pytest.mark.unit
class TestClassifyDeliveryError:
    """Tests for classify_delivery_error."""

    def test_timeout_is_transient(self):
        result = classify_delivery_error(requests.ReadTimeout())

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "REQUEST_TIMEOUT"
        assert isinstance(result.error, BackendTimeoutError)

    def test_connection_is_transient(self):
        result = classify_delivery_error(requests.ConnectionError())

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "CONNECTION_ERROR"

    @pytest.mark.parametrize(
        "status_code,expected_status,expected_code",
        [
            (401, OperationStatus.UNAUTHORIZED, "UNAUTHORIZED"),
            (403, OperationStatus.UNAUTHORIZED, "FORBIDDEN"),
            (404, OperationStatus.NOT_FOUND, "NOT_FOUND"),
            (429, OperationStatus.TRANSIENT_ERROR, "RATE_LIMITED"),
            (500, OperationStatus.TRANSIENT_ERROR, "SERVER_ERROR"),
            (503, OperationStatus.TRANSIENT_ERROR, "SERVER_ERROR"),
            (400, OperationStatus.PERMANENT_ERROR, "HTTP_400"),
            (422, OperationStatus.PERMANENT_ERROR, "HTTP_422"),
        ],
    )
    def test_http_status_mapping(self, status_code, expected_status, expected_code):
        result = classify_delivery_error(BackendHTTPError(status_code))

        assert result.status == expected_status
        assert result.error_code == expected_code

    def test_rate_limit_sets_retry_after(self):
        assert classify_delivery_error(BackendHTTPError(429)).retry_after == 60

    def test_gateway_error(self):
        result = classify_delivery_error(GatewayError("202", "Declined"))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "GATEWAY_202"

    def test_unknown_error(self):
        result = classify_delivery_error(RuntimeError("weird"))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "SEND_ERROR"


@pytest.mark.unit
class TestOperationResult:
    """Tests for OperationResult helpers."""

    def test_success(self):
        result = OperationResult.success(data={"id": 1})

        assert result.is_success
        assert not result.is_skipped
        assert result.data == {"id": 1}

    def test_skipped(self):
        result = OperationResult.skipped("no token", error_code="NO_PUSH_TOKEN")

        assert result.is_skipped
        assert not result.is_success
        assert result.error_code == "NO_PUSH_TOKEN"

    def test_permanent_error(self):
        result = OperationResult.permanent_error("bad", error_code="HTTP_400")

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.retry_after is None
