"""
Base HTTP service built on a shared ``requests.Session``.

Every request goes through :meth:`BaseService.request`, which applies the
configured base URL and timeout, measures latency and logs the call.  A
transport failure (DNS, refused connection, timeout) is wrapped in
:class:`ApiError` so that callers only need to handle one exception type;
non-2xx responses are returned as-is because asserting on them is the
caller's job.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from api_automation.config import Config, get_config
from api_automation.log_utils import log_api_error, log_api_request

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when a request cannot be completed or its body cannot be parsed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BaseService:
    """
    Common request plumbing for all resource services.

    Args:
        base_url: Root URL of the API.  Defaults to the configured
            ``BASE_URL``.
        session: Optional pre-built session (tests inject one to share
            connection pools or stub transports).
        config_class: Configuration class supplying defaults.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: requests.Session | None = None,
        config_class: type[Config] | None = None,
    ) -> None:
        self.config = config_class or get_config()
        self.base_url = (base_url or self.config.BASE_URL).rstrip("/")
        self.timeout = self.config.REQUEST_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/json")

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def request(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """
        Send a request and return the raw response.

        Args:
            method: HTTP verb, case-insensitive.
            endpoint: Path relative to the base URL.
            body: Optional JSON-serialisable request body.
            params: Optional query-string parameters.
            headers: Extra headers merged over the session defaults.

        Returns:
            The ``requests.Response`` for any HTTP status.

        Raises:
            ApiError: If the request could not be sent or no response arrived.
        """
        method = method.upper()
        logger.debug("Performing %s request to: %s", method, endpoint)
        try:
            response = self.session.request(
                method,
                self._url(endpoint),
                json=body,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log_api_error(method, endpoint, None, str(exc))
            raise ApiError(f"{method} {endpoint} failed: {exc}") from exc

        log_api_request(
            method,
            endpoint,
            response.status_code,
            response_time_ms(response),
            slow_threshold_ms=self.config.SLOW_REQUEST_MS,
        )
        return response

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> requests.Response:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, body: Any) -> requests.Response:
        return self.request("POST", endpoint, body=body)

    def put(self, endpoint: str, body: Any) -> requests.Response:
        return self.request("PUT", endpoint, body=body)

    def patch(self, endpoint: str, body: Any) -> requests.Response:
        return self.request("PATCH", endpoint, body=body)

    def delete(self, endpoint: str) -> requests.Response:
        return self.request("DELETE", endpoint)

    @staticmethod
    def parse_json(response: requests.Response, what: str) -> Any:
        """Decode a JSON body, raising :class:`ApiError` with context on failure."""
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Failed to parse %s response", what)
            raise ApiError(
                f"Failed to parse {what} response", status_code=response.status_code
            ) from exc

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def response_time_ms(response: requests.Response) -> int:
    """Return the server round-trip time of *response* in whole milliseconds."""
    return int(response.elapsed.total_seconds() * 1000)
