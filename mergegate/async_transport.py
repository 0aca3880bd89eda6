"""
Async HTTP Transport for mergegate.

Handles async HTTP communication with automatic retry logic, explicit
timeouts and error handling using the httpx async client.
"""

import asyncio
import random
import time
from collections.abc import Callable, Coroutine
from typing import Any

import httpx

from mergegate.exceptions import (
    MergeGateError,
    RequestTimeoutError,
    ServerError,
    ValidationError,
)
from mergegate.logging import log_http_request, log_http_response
from mergegate.transport import RetryConfig, decode_body, parse_error_response


class AsyncHTTPTransport:
    """
    Async HTTP transport layer with bearer authentication and retry logic.

    Handles:
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - An explicit timeout on every request
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
        Initialize async HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: Bearer token sent with every request
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            headers: Extra default headers
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

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=default_headers,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request with automatic retry.

        Returns:
            Parsed JSON response (a dict or list), ``{}`` for empty bodies

        Raises:
            MergeGateError: On API errors
        """
        async def make_request() -> httpx.Response:
            log_http_request(method, path, params, body)
            return await self._client.request(method, path, params=params, json=body)

        return await self._execute_with_retry(make_request, f"{method} {path}")

    async def graphql(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Run a GraphQL query or mutation; GraphQL ``errors`` raise ValidationError."""
        response = await self.request(
            "POST", "/graphql", body={"query": query, "variables": variables or {}}
        )
        errors = response.get("errors") if isinstance(response, dict) else None
        if errors:
            message = "; ".join(e.get("message", "unknown error") for e in errors)
            raise ValidationError("GRAPHQL_ERROR", message)
        return response.get("data", {})

    async def _execute_with_retry(
        self,
        request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]],
        description: str = "request",
    ) -> Any:
        """
        Execute a request with automatic retry on retryable errors.

        Raises:
            MergeGateError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                started = time.monotonic()
                response = await request_fn()
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
                await asyncio.sleep(wait_time)

            except httpx.RequestError as e:
                if attempt >= self.retry_config.max_retries:
                    if isinstance(e, httpx.TimeoutException):
                        raise RequestTimeoutError(
                            f"{description} timed out after {self.timeout}s"
                        ) from e
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                await asyncio.sleep(wait_time)

        if last_error:
            if isinstance(last_error, MergeGateError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)
