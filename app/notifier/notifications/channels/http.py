"""HTTP client for the notification backend.

Wraps a ``requests.Session`` with the bearer token and per-request timeout.
Every transport failure and non-success response is raised as a
``DeliveryError`` subclass, so callers only handle one exception family.
"""

from typing import Any, Dict, Optional

import requests

from notifier.configuration import BackendSettings
from notifier.errors.exceptions import DeliveryError
from notifier.logging import get_module_logger
from notifier.operations import raise_for_response, to_delivery_error

logger = get_module_logger()


class BackendClient:
    """Thin JSON client for the notification backend.

    Args:
        base_url: API root, e.g. ``https://api.example.com/api``
        token: Optional bearer token
        timeout: Per-request timeout in seconds
        session: Optional preconfigured session (tests inject mocks here)
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    @classmethod
    def from_settings(cls, backend: BackendSettings) -> "BackendClient":
        return cls(
            base_url=backend.API_URL,
            token=backend.API_TOKEN,
            timeout=backend.HTTP_TIMEOUT_SECONDS,
        )

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (or None).

        Raises:
            DeliveryError: On timeout, connection failure or status >= 400
        """
        url = self.url(path)
        try:
            response = self.session.request(
                method, url, json=payload, params=params, timeout=self.timeout
            )
            raise_for_response(response)
        except DeliveryError:
            raise
        except (requests.RequestException, OSError) as e:
            raise to_delivery_error(e) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.debug("backend_response_not_json", url=url)
            return None

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, payload: Dict[str, Any]) -> Any:
        return self.request("POST", path, payload)

    def put(
        self,
        path: str,
        payload: Dict[str, Any],
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return self.request("PUT", path, payload, params=params)

    def close(self) -> None:
        self.session.close()
