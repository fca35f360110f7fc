"""Unit tests for the backend-delivered channels."""

from unittest.mock import MagicMock

import pytest

from notifier.errors import BackendConnectionError, BackendHTTPError
from notifier.notifications.channels import (
    BackendClient,
    EmailChannel,
    SMSChannel,
    WebhookChannel,
)
from notifier.notifications.channels.sms import SMS_MAX_LENGTH
from notifier.operations import OperationStatus


@pytest.fixture
def client():
    return MagicMock(spec=BackendClient)


@pytest.mark.unit
class TestEmailChannel:
    """Tests for EmailChannel."""

    def test_send(self, client, notification_factory):
        notification = notification_factory(data={"order_id": "INV-1"})

        result = EmailChannel(client).send(notification)

        assert result.is_success
        client.post.assert_called_once_with(
            "/notifications/email",
            {
                "type": "payment_success",
                "title": "Payment Successful",
                "message": notification.message,
                "data": {"order_id": "INV-1"},
                "priority": "medium",
            },
        )

    def test_connection_failure(self, client, notification_factory):
        client.post.side_effect = BackendConnectionError("Network Error")

        result = EmailChannel(client).send(notification_factory())

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert isinstance(result.error, BackendConnectionError)

    def test_client_error(self, client, notification_factory):
        client.post.side_effect = BackendHTTPError(422)

        result = EmailChannel(client).send(notification_factory())

        assert result.status == OperationStatus.PERMANENT_ERROR

    def test_health_check(self, client):
        client.get.side_effect = BackendConnectionError("down")

        assert EmailChannel(client).health_check().is_success is False


@pytest.mark.unit
class TestSMSChannel:
    """Tests for SMSChannel."""

    def test_payload_has_no_title(self, client, notification_factory):
        SMSChannel(client).send(notification_factory())

        path, payload = client.post.call_args.args
        assert path == "/notifications/sms"
        assert "title" not in payload

    def test_long_message_is_truncated(self, client, notification_factory):
        SMSChannel(client).send(notification_factory(message="x" * 2000))

        payload = client.post.call_args.args[1]
        assert len(payload["message"]) == SMS_MAX_LENGTH
        assert payload["message"].endswith("...")


@pytest.mark.unit
class TestWebhookChannel:
    """Tests for WebhookChannel."""

    def test_payload_carries_timestamp(self, client, notification_factory):
        notification = notification_factory()

        WebhookChannel(client).send(notification)

        path, payload = client.post.call_args.args
        assert path == "/notifications/webhook"
        assert payload["timestamp"] == notification.timestamp.isoformat()
