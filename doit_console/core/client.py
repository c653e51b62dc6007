"""
Core HTTP client for the DoiT Console analytics API.

Handles authentication, request/response, and error handling.
"""

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_HOST_URL = "https://api.doit.com"
DEFAULT_TIMEOUT = 30
API_PREFIX = "/analytics/v1"

SUCCESS_STATUSES = (200, 201)


class DoitError(Exception):
    """Base error class for DoiT client errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message, "type": type(self).__name__}
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(DoitError):
    """A required credential, host or customer context is missing."""


class AuthenticationError(DoitError):
    """The verification call made at construction failed."""

    def __init__(self, message: str, cause: DoitError | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.cause = cause


class TransportError(DoitError):
    """Network-level failure, including timeouts."""


class APIError(DoitError):
    """Any response other than 200/201, with raw status and body."""

    def __init__(self, message: str, status: int = 0, body: str = "", details: dict | None = None):
        super().__init__(message, details)
        self.status = status
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        result["status"] = self.status
        result["body"] = self.body
        return result


class DecodeError(DoitError):
    """Response body is not JSON or not the expected shape."""


class APIClient:
    """
    Low-level HTTP client for the DoiT Console API.

    Handles:
    - Bearer token authentication
    - Customer context on every request (query parameter)
    - HTTP methods (GET, POST, PATCH, DELETE)
    - Error classification and JSON decoding

    The credential context is fixed at construction.
    """

    def __init__(
        self,
        token: str | None,
        customer_context: str | None,
        base_url: str | None = DEFAULT_HOST_URL,
        timeout: float = DEFAULT_TIMEOUT,
        opener: Any = None,
        verify: bool = True,
    ):
        """
        Initialize the API client.

        Args:
            token: DoiT API token (required)
            customer_context: Customer context sent with every request (required)
            base_url: API host. None selects DEFAULT_HOST_URL, an empty string is rejected
            timeout: Request timeout in seconds
            opener: Object with ``open(request, timeout=...)``, defaults to a urllib opener
            verify: Issue the verification call before returning

        Raises:
            ConfigurationError: On missing token, customer context or host
            AuthenticationError: If the verification call fails

        """
        if not token:
            raise ConfigurationError("DoiT API token is required (DOIT_API_TOKEN)")
        if not customer_context:
            raise ConfigurationError("Customer context is required (DOIT_CUSTOMER_CONTEXT)")
        if base_url is None:
            base_url = DEFAULT_HOST_URL
        if not base_url.strip():
            raise ConfigurationError("DoiT API host is empty (DOIT_HOST)")

        self._token = token
        self._customer_context = customer_context
        self._base_url = base_url.strip().rstrip("/")
        self._timeout = timeout
        self._opener = opener or urllib.request.build_opener()

        if verify:
            self.verify()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def customer_context(self) -> str:
        return self._customer_context

    @property
    def timeout(self) -> float:
        return self._timeout

    def __repr__(self) -> str:
        return f"APIClient(base_url={self._base_url!r}, customer_context={self._customer_context!r})"

    def verify(self) -> None:
        """
        Check the credentials with a GET against the host root.

        Raises:
            AuthenticationError: If the call fails for any reason

        """
        try:
            self._make_request("GET", "/", action="verify credentials", decode=False)
        except DoitError as e:
            raise AuthenticationError(
                f"Unable to create DoiT API client: {e.message}",
                cause=e,
                details=e.details,
            ) from e
        logger.info("Configured DoiT client for %s", self._base_url)

    def _build_url(self, path: str) -> str:
        """Build full URL from path, attaching the customer context."""
        query = urllib.parse.urlencode({"customerContext": self._customer_context})
        return f"{self._base_url}{path}?{query}"

    def _make_request(
        self,
        method: str,
        path: str,
        data: dict | None = None,
        action: str | None = None,
        decode: bool = True,
    ) -> Any:
        """
        Make an HTTP request to the API.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            path: API path including any trailing slash (e.g., /analytics/v1/attributions/)
            data: Request body for POST/PATCH
            action: Short description used in error messages (e.g., "create attribution")
            decode: Parse the response body as JSON

        Returns:
            Parsed JSON response, or None when decode is False or the body is empty

        Raises:
            TransportError: On network failure, timeout or a truncated response
            APIError: On any status other than 200/201
            DecodeError: On a body that is not UTF-8 JSON

        """
        action = action or f"{method} {path}"
        url = self._build_url(path)
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        body = json.dumps(data).encode("utf-8") if data is not None else None

        logger.debug("%s %s", method, url)
        req = urllib.request.Request(url, data=body, headers=headers, method=method)
        try:
            with self._opener.open(req, timeout=self._timeout) as response:
                status = response.status
                raw_body = response.read()

        except urllib.error.HTTPError as e:
            error_body = e.read().decode("utf-8", errors="replace") if e.fp else ""
            logger.debug("%s %s -> %s", method, url, e.code)
            raise APIError(
                f"Could not {action}: status {e.code}, body: {error_body}",
                status=e.code,
                body=error_body,
            )

        except urllib.error.URLError as e:
            raise TransportError(f"Could not {action}: connection error: {e.reason}")

        except TimeoutError:
            raise TransportError(f"Could not {action}: request timed out after {self._timeout} seconds")

        except OSError as e:
            raise TransportError(f"Could not {action}: {e}")

        except http.client.HTTPException as e:
            raise TransportError(f"Could not {action}: incomplete response: {e!r}")

        logger.debug("%s %s -> %s", method, url, status)
        if status not in SUCCESS_STATUSES:
            error_body = raw_body.decode("utf-8", errors="replace")
            raise APIError(
                f"Could not {action}: status {status}, body: {error_body}",
                status=status,
                body=error_body,
            )

        if not decode:
            return None
        try:
            response_data = raw_body.decode("utf-8")
            if not response_data.strip():
                return None
            return json.loads(response_data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"Could not {action}: invalid JSON response: {e}")

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(self, path: str, action: str | None = None) -> Any:
        """Make a GET request."""
        return self._make_request("GET", path, action=action)

    def post(self, path: str, data: dict, action: str | None = None) -> Any:
        """Make a POST request."""
        return self._make_request("POST", path, data, action=action)

    def patch(self, path: str, data: dict, action: str | None = None, decode: bool = True) -> Any:
        """Make a PATCH request."""
        return self._make_request("PATCH", path, data, action=action, decode=decode)

    def delete(self, path: str, action: str | None = None) -> None:
        """Make a DELETE request. The response body is ignored."""
        self._make_request("DELETE", path, action=action, decode=False)
