# tests/test_http_errors.py
"""Tests for HTTP error mapping and the client factory."""

import httpx
import pytest

from bookdigest.core.http import (
    DEFAULT_TIMEOUTS,
    APIConnectionError,
    APIError,
    AuthenticationError,
    ModelNotFoundError,
    RateLimitError,
    ServerError,
    create_async_api_client,
    handle_api_error,
    is_transient,
    raise_for_status,
)

pytestmark = pytest.mark.tier1

REQUEST = httpx.Request("POST", "https://llm.example.com/v1/chat/completions")


def status_error(status, body=None):
    response = httpx.Response(status, json=body if body is not None else {}, request=REQUEST)
    return httpx.HTTPStatusError("error", request=REQUEST, response=response)


class TestHandleApiError:
    @pytest.mark.parametrize(
        "status,expected",
        [
            (401, AuthenticationError),
            (403, AuthenticationError),
            (404, ModelNotFoundError),
            (429, RateLimitError),
            (500, ServerError),
            (502, ServerError),
        ],
    )
    def test_status_mapping(self, status, expected):
        error = handle_api_error(status_error(status), provider="openai")

        assert type(error) is expected
        assert error.status_code == status
        assert error.provider == "openai"

    def test_other_4xx_is_plain_api_error(self):
        error = handle_api_error(status_error(400))
        assert type(error) is APIError

    def test_openai_error_message_extracted(self):
        error = handle_api_error(status_error(400, {"error": {"message": "bad model"}}))
        assert error.details == "bad model"
        assert "bad model" in str(error)

    def test_string_error_extracted(self):
        error = handle_api_error(status_error(400, {"error": "nope"}))
        assert error.details == "nope"

    def test_timeout(self):
        error = handle_api_error(httpx.ReadTimeout("slow", request=REQUEST))
        assert isinstance(error, APIConnectionError)

    def test_connect_error(self):
        error = handle_api_error(httpx.ConnectError("refused", request=REQUEST))
        assert isinstance(error, APIConnectionError)
        assert "refused" in str(error)

    def test_api_error_passthrough(self):
        original = RateLimitError(message="slow down", status_code=429)
        assert handle_api_error(original) is original

    def test_str_includes_status(self):
        assert str(APIError(message="failed", status_code=418)) == "failed (HTTP 418)"


class TestIsTransient:
    @pytest.mark.parametrize("status", [408, 409, 425, 429, 500, 503])
    def test_transient_statuses(self, status):
        assert is_transient(handle_api_error(status_error(status)))

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422])
    def test_permanent_statuses(self, status):
        assert not is_transient(handle_api_error(status_error(status)))

    def test_connection_errors_are_transient(self):
        assert is_transient(APIConnectionError(message="down"))


class TestRaiseForStatus:
    def test_ok_passes(self):
        raise_for_status(httpx.Response(200, request=REQUEST))

    def test_error_raises_api_error(self):
        with pytest.raises(RateLimitError):
            raise_for_status(httpx.Response(429, request=REQUEST), provider="openrouter")


class TestCreateClient:
    def test_headers_and_timeout(self):
        client = create_async_api_client(
            "https://llm.example.com/v1", api_key="sk", timeout_type="chat"
        )

        assert client.headers["Authorization"] == "Bearer sk"
        assert client.headers["Content-Type"] == "application/json"
        assert client.timeout.read == DEFAULT_TIMEOUTS["chat"]

    def test_no_auth_without_key(self):
        client = create_async_api_client("https://llm.example.com/v1")
        assert "Authorization" not in client.headers

    def test_explicit_timeout_wins(self):
        client = create_async_api_client("https://x", timeout=7.0, timeout_type="chat")
        assert client.timeout.read == 7.0
