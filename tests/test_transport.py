"""
Tests for HTTP transport retry behavior and error mapping.
"""

import json
from typing import Any
from unittest.mock import MagicMock, patch

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mergegate.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    ServerError,
    ValidationError,
)
from mergegate.transport import HTTPTransport, RetryConfig, decode_body, parse_error_response

# Test strategies
backoff_factor_strategy = st.floats(min_value=1.1, max_value=5.0)
attempt_strategy = st.integers(min_value=0, max_value=5)
retry_after_strategy = st.integers(min_value=1, max_value=120)


def make_transport(**config: Any) -> HTTPTransport:
    return HTTPTransport(
        base_url="https://api.github.com",
        token="ghp_test",
        timeout=5.0,
        retry_config=RetryConfig(**config),
    )


def make_response(
    status_code: int,
    data: Any = None,
    headers: dict[str, str] | None = None,
) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    response.json.return_value = data if data is not None else {}
    response.content = b"" if data is None else b"{...}"
    return response


@given(backoff_factor=backoff_factor_strategy, attempt=attempt_strategy)
@settings(max_examples=100)
def test_exponential_backoff_timing(backoff_factor: float, attempt: int) -> None:
    """Wait before attempt N is B^N seconds within the jitter band."""
    transport = make_transport(backoff_factor=backoff_factor, jitter=0.1, max_backoff=1000.0)

    expected_base = backoff_factor ** attempt
    actual = transport._get_backoff_time(attempt, None)

    assert min(expected_base * 0.9, 1000.0) <= actual <= min(expected_base * 1.1, 1000.0)


@given(attempt=attempt_strategy)
@settings(max_examples=50)
def test_backoff_is_capped(attempt: int) -> None:
    transport = make_transport(backoff_factor=10.0, max_backoff=3.0)

    assert transport._get_backoff_time(attempt, None) <= 3.0


@given(retry_after=retry_after_strategy)
@settings(max_examples=100)
def test_retry_after_header_respected(retry_after: int) -> None:
    transport = make_transport(respect_retry_after=True)

    assert transport._get_backoff_time(0, str(retry_after)) == float(retry_after)


@given(
    status_code=st.sampled_from([400, 401, 403, 404, 405, 409, 422]),
    attempt=st.integers(min_value=0, max_value=2),
)
@settings(max_examples=100)
def test_no_retry_on_non_retryable_errors(status_code: int, attempt: int) -> None:
    transport = make_transport(max_retries=3)

    assert not transport._should_retry(status_code, attempt)


@given(
    status_code=st.sampled_from([429, 500, 502, 503]),
    attempt=st.integers(min_value=0, max_value=2),
)
@settings(max_examples=100)
def test_retry_on_retryable_errors(status_code: int, attempt: int) -> None:
    transport = make_transport(max_retries=3)

    assert transport._should_retry(status_code, attempt)


def test_max_retries_exceeded() -> None:
    transport = make_transport(max_retries=2)

    assert transport._should_retry(500, 1)
    assert not transport._should_retry(500, 2)


class TestParseErrorResponse:
    @pytest.mark.parametrize(
        "status_code, error_class, code",
        [
            (401, AuthenticationError, "UNAUTHORIZED"),
            (403, AuthorizationError, "FORBIDDEN"),
            (404, NotFoundError, "NOT_FOUND"),
            (409, ConflictError, "CONFLICT"),
            (422, ValidationError, "VALIDATION_FAILED"),
            (405, ValidationError, "VALIDATION_FAILED"),
            (429, RateLimitedError, "RATE_LIMITED"),
            (502, ServerError, "SERVER_ERROR"),
        ],
    )
    def test_status_mapping(self, status_code: int, error_class: type, code: str) -> None:
        error = parse_error_response(make_response(status_code, {"message": "nope"}))

        assert isinstance(error, error_class)
        assert error.code == code
        assert error.message == "nope"

    def test_exhausted_rate_limit_on_403(self) -> None:
        response = make_response(
            403,
            {"message": "API rate limit exceeded"},
            {"X-RateLimit-Remaining": "0", "Retry-After": "17"},
        )

        error = parse_error_response(response)

        assert isinstance(error, RateLimitedError)
        assert error.retry_after == 17

    def test_field_errors_are_appended(self) -> None:
        response = make_response(
            422,
            {"message": "Validation Failed", "errors": [{"message": "Can not approve your own pull request"}]},
            {"X-GitHub-Request-Id": "ABCD:1234"},
        )

        error = parse_error_response(response)

        assert error.message == "Validation Failed: Can not approve your own pull request"
        assert error.request_id == "ABCD:1234"

    def test_unparseable_body(self) -> None:
        response = make_response(500)
        response.json.side_effect = ValueError("not json")

        error = parse_error_response(response)

        assert error.message == "HTTP 500"


def test_decode_body_empty() -> None:
    assert decode_body(make_response(204)) == {}
    assert decode_body(make_response(200)) == {}
    assert decode_body(make_response(200, {"ok": True})) == {"ok": True}


class TestRequest:
    def test_success(self) -> None:
        transport = make_transport()
        with patch.object(
            transport._client, "request", return_value=make_response(200, {"login": "octocat"})
        ) as mock_request:
            result = transport.request("GET", "/user", params={"a": 1})

        assert result == {"login": "octocat"}
        mock_request.assert_called_once_with("GET", "/user", params={"a": 1}, json=None)

    def test_retries_server_errors_then_succeeds(self) -> None:
        transport = make_transport(max_retries=2)
        responses = [make_response(502, {"message": "bad gateway"}), make_response(200, {"ok": 1})]

        with patch.object(transport._client, "request", side_effect=responses) as mock_request, \
                patch("mergegate.transport.time.sleep") as mock_sleep:
            assert transport.request("GET", "/x") == {"ok": 1}

        assert mock_request.call_count == 2
        mock_sleep.assert_called_once()

    def test_non_retryable_error_raises_immediately(self) -> None:
        transport = make_transport(max_retries=3)

        with patch.object(
            transport._client, "request", return_value=make_response(404, {"message": "Not Found"})
        ) as mock_request:
            with pytest.raises(NotFoundError):
                transport.request("GET", "/repos/octo/missing")

        assert mock_request.call_count == 1

    def test_gives_up_after_max_retries(self) -> None:
        transport = make_transport(max_retries=2)

        with patch.object(
            transport._client, "request", return_value=make_response(503, {"message": "down"})
        ) as mock_request, patch("mergegate.transport.time.sleep"):
            with pytest.raises(ServerError, match="down"):
                transport.request("GET", "/x")

        assert mock_request.call_count == 3

    def test_timeout_raises_request_timeout_error(self) -> None:
        transport = make_transport(max_retries=1)

        with patch.object(
            transport._client, "request", side_effect=httpx.ReadTimeout("timed out")
        ) as mock_request, patch("mergegate.transport.time.sleep"):
            with pytest.raises(RequestTimeoutError) as exc_info:
                transport.request("GET", "/repos/octo/app/pulls/1")

        assert mock_request.call_count == 2
        assert exc_info.value.code == "TIMEOUT"
        assert exc_info.value.message == "GET /repos/octo/app/pulls/1 timed out after 5.0s"

    def test_connection_error(self) -> None:
        transport = make_transport(max_retries=0)

        with patch.object(
            transport._client, "request", side_effect=httpx.ConnectError("refused")
        ):
            with pytest.raises(ServerError) as exc_info:
                transport.request("GET", "/user")

        assert exc_info.value.code == "CONNECTION_ERROR"
        assert not isinstance(exc_info.value, RequestTimeoutError)


class TestGraphQL:
    def test_returns_data(self) -> None:
        transport = make_transport()
        body = {"data": {"viewer": {"login": "octocat"}}}

        with patch.object(
            transport._client, "request", return_value=make_response(200, body)
        ) as mock_request:
            assert transport.graphql("query { viewer { login } }") == body["data"]

        _, kwargs = mock_request.call_args
        assert kwargs["json"] == {"query": "query { viewer { login } }", "variables": {}}

    def test_errors_raise_validation_error(self) -> None:
        transport = make_transport()
        body = {"errors": [{"message": "Pull request is in clean status"}]}

        with patch.object(transport._client, "request", return_value=make_response(200, body)):
            with pytest.raises(ValidationError) as exc_info:
                transport.graphql("mutation { x }")

        assert exc_info.value.code == "GRAPHQL_ERROR"
        assert exc_info.value.message == "Pull request is in clean status"


class TestMalformedBody:
    def test_decode_body_rejects_non_json(self) -> None:
        response = make_response(200, {"ignored": True}, {"X-GitHub-Request-Id": "ABCD:9"})
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)

        with pytest.raises(ValidationError) as exc_info:
            decode_body(response)

        assert exc_info.value.code == "MALFORMED_RESPONSE"
        assert exc_info.value.request_id == "ABCD:9"

    def test_request_surfaces_typed_error(self) -> None:
        transport = make_transport()
        response = make_response(200, {"ignored": True})
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)

        with patch.object(transport._client, "request", return_value=response):
            with pytest.raises(ValidationError, match="not valid JSON"):
                transport.request("GET", "/user")
