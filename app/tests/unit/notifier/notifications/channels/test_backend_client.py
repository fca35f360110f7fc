"""Unit tests for BackendClient."""

from unittest.mock import MagicMock

import pytest
import requests

from notifier.configuration import BackendSettings
from notifier.errors import BackendConnectionError, BackendHTTPError, BackendTimeoutError
from notifier.notifications.channels import BackendClient


def make_session(status_code=200, body=None, content=b"{}"):
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.content = content
    response.json.return_value = body if body is not None else {}
    session.request.return_value = response
    return session


@pytest.mark.unit
class TestBackendClient:
    """Tests for request handling."""

    def test_headers(self):
        session = make_session()

        BackendClient("https://api.example.com/api/", token="abc", session=session)

        assert session.headers["Authorization"] == "Bearer abc"
        assert session.headers["Content-Type"] == "application/json"

    def test_post_returns_json(self):
        session = make_session(body={"id": "msg-1"})
        client = BackendClient("https://api.example.com/api/", timeout=3, session=session)

        body = client.post("/notifications/email", {"title": "t"})

        assert body == {"id": "msg-1"}
        session.request.assert_called_once_with(
            "POST",
            "https://api.example.com/api/notifications/email",
            json={"title": "t"},
            params=None,
            timeout=3,
        )

    def test_empty_body(self):
        client = BackendClient("http://x", session=make_session(content=b""))

        assert client.get("/health") is None

    def test_http_error(self):
        session = make_session(status_code=500, body={"message": "boom"})
        client = BackendClient("http://x", session=session)

        with pytest.raises(BackendHTTPError) as exc_info:
            client.post("/notifications/sms", {})

        assert exc_info.value.status_code == 500

    @pytest.mark.parametrize(
        "raised,expected",
        [
            (requests.ReadTimeout("slow"), BackendTimeoutError),
            (requests.ConnectionError("refused"), BackendConnectionError),
        ],
    )
    def test_transport_errors(self, raised, expected):
        session = make_session()
        session.request.side_effect = raised
        client = BackendClient("http://x", session=session)

        with pytest.raises(expected):
            client.get("/notifications/preferences", params={"user_id": "me"})

    def test_from_settings(self):
        settings = BackendSettings().model_copy(
            update={"API_URL": "https://api.example.com", "HTTP_TIMEOUT_SECONDS": 2.0}
        )

        client = BackendClient.from_settings(settings)

        assert client.url("health") == "https://api.example.com/health"
        assert client.timeout == 2.0
        client.close()
