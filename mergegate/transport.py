"""
HTTP Transport for mergegate.

Handles HTTP communication with automatic retry logic, explicit timeouts
and error handling.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from mergegate.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    MergeGateError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    ServerError,
    ValidationError,
)
from mergegate.logging import log_http_request, log_http_response


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


def parse_error_response(response: httpx.Response) -> MergeGateError:
    """
    Parse an error response into a typed exception.

    GitHub and Cursor both answer with ``{"message": "..."}`` bodies;
    GitHub may add an ``errors`` list with field-level details.

    Args:
        response: HTTP response with error status

    Returns:
        Appropriate MergeGateError subclass
    """
    try:
        data = response.json()
    except Exception:
        data = {}
    if not isinstance(data, dict):
        data = {}

    message = data.get("message") or data.get("error") or f"HTTP {response.status_code}"
    if not isinstance(message, str):
        message = str(message)
    details = [
        e.get("message") for e in data.get("errors", []) if isinstance(e, dict) and e.get("message")
    ]
    if details:
        message = f"{message}: {'; '.join(details)}"

    request_id = response.headers.get("X-GitHub-Request-Id")
    status_code = response.status_code

    if status_code == 401:
        return AuthenticationError("UNAUTHORIZED", message, request_id)
    elif status_code == 403:
        if response.headers.get("X-RateLimit-Remaining") == "0":
            return RateLimitedError(
                "RATE_LIMITED", message, _retry_after_seconds(response), request_id
            )
        return AuthorizationError("FORBIDDEN", message, request_id)
    elif status_code == 404:
        return NotFoundError("NOT_FOUND", message, request_id)
    elif status_code == 409:
        return ConflictError("CONFLICT", message, request_id)
    elif status_code == 429:
        return RateLimitedError(
            "RATE_LIMITED", message, _retry_after_seconds(response), request_id
        )
    elif status_code >= 500:
        return ServerError("SERVER_ERROR", message, request_id)
    else:
        return ValidationError("VALIDATION_FAILED", message, request_id)


def _retry_after_seconds(response: httpx.Response) -> int:
    retry_after_str = response.headers.get("Retry-After", "60")
    try:
        return int(retry_after_str)
    except ValueError:
        return 60


def decode_body(response: httpx.Response) -> Any:
    """
    Return the JSON body of a successful response, or ``{}`` when empty.

    Raises:
        ValidationError: If the body is not JSON
    """
    if response.status_code == 204 or not response.content:
        return {}
    try:
        return response.json()
    except ValueError as e:
        raise ValidationError(
            "MALFORMED_RESPONSE",
            f"Response {response.status_code} is not valid JSON: {e}",
            response.headers.get("X-GitHub-Request-Id"),
        ) from e


class HTTPTransport:
    """
    HTTP transport layer with bearer authentication and retry logic.

    Handles:
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - An explicit timeout on every request; exhausted timeouts raise
      RequestTimeoutError instead of hanging
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: Bearer token sent with every request
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            headers: Extra default headers (e.g., API version pinning)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        default_headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "User-Agent": "mergegate",
        }
        default_headers.update(headers or {})

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers=default_headers,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request with automatic retry.

        Args:
            method: HTTP method
            path: API path (e.g., "/repos/octo/app")
            params: Query parameters
            body: JSON request body (for POST/PUT)

        Returns:
            Parsed JSON response (a dict or list), ``{}`` for empty bodies

        Raises:
            MergeGateError: On API errors
        """
        def make_request() -> httpx.Response:
            log_http_request(method, path, params, body)
            return self._client.request(method, path, params=params, json=body)

        return self._execute_with_retry(make_request, f"{method} {path}")

    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Run a GraphQL query or mutation.

        Raises:
            ValidationError: If the response carries GraphQL ``errors``
        """
        response = self.request(
            "POST", "/graphql", body={"query": query, "variables": variables or {}}
        )
        errors = response.get("errors") if isinstance(response, dict) else None
        if errors:
            message = "; ".join(e.get("message", "unknown error") for e in errors)
            raise ValidationError("GRAPHQL_ERROR", message)
        return response.get("data", {})

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response], description: str = "request"
    ) -> Any:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Function that makes the HTTP request
            description: Short label used in timeout messages

        Returns:
            Parsed JSON response

        Raises:
            MergeGateError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                started = time.monotonic()
                response = request_fn()
                log_http_response(
                    response.status_code,
                    description,
                    elapsed_ms=(time.monotonic() - started) * 1000,
                    request_id=response.headers.get("X-GitHub-Request-Id"),
                )

                if response.status_code < 400:
                    return decode_body(response)

                error = parse_error_response(response)

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                time.sleep(wait_time)

            except httpx.RequestError as e:
                # Network errors and timeouts are retryable
                if attempt >= self.retry_config.max_retries:
                    if isinstance(e, httpx.TimeoutException):
                        raise RequestTimeoutError(
                            f"{description} timed out after {self.timeout}s"
                        ) from e
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                time.sleep(wait_time)

        if last_error:
            if isinstance(last_error, MergeGateError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

