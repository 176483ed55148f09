# tests/test_chat_client.py
"""
Tests for AsyncChatClient against an httpx.MockTransport.

No network: every request is answered by a local handler that records
what was sent.
"""

import asyncio
import json

import httpx
import pytest

from bookdigest.config.schema import ProviderConfig
from bookdigest.core.http import APIConnectionError, AuthenticationError, ServerError
from bookdigest.llm.chat import AsyncChatClient

pytestmark = pytest.mark.tier2

MESSAGES = [
    {"role": "system", "content": "You summarize books."},
    {"role": "user", "content": "Chapter text"},
]


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class Recorder:
    def __init__(self, response=None, status=200):
        self.requests = []
        self.response = response if response is not None else completion("hello")
        self.status = status

    def __call__(self, request):
        self.requests.append(request)
        return httpx.Response(self.status, json=self.response)


def make_client(handler, **kwargs):
    params = {
        "base_url": "https://llm.example.com/v1",
        "api_key": "sk-test",
        "model": "test-model",
        "provider": "openai",
    }
    params.update(kwargs)
    return AsyncChatClient(transport=httpx.MockTransport(handler), **params)


async def chat_once(client, messages=MESSAGES):
    async with client:
        return await client.chat(messages)


class TestRequest:
    def test_posts_to_chat_completions_under_base_path(self):
        recorder = Recorder()
        asyncio.run(chat_once(make_client(recorder)))

        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://llm.example.com/v1/chat/completions"

    def test_bearer_auth_header(self):
        recorder = Recorder()
        asyncio.run(chat_once(make_client(recorder)))

        assert recorder.requests[0].headers["Authorization"] == "Bearer sk-test"

    def test_payload(self):
        recorder = Recorder()
        asyncio.run(chat_once(make_client(recorder, temperature=0.5, max_tokens=200)))

        payload = json.loads(recorder.requests[0].content)
        assert payload == {
            "model": "test-model",
            "messages": MESSAGES,
            "temperature": 0.5,
            "max_tokens": 200,
        }

    def test_max_tokens_omitted_when_unset(self):
        client = make_client(Recorder(), max_tokens=None)
        assert "max_tokens" not in client.build_payload(MESSAGES)


class TestResponse:
    def test_returns_content(self):
        assert asyncio.run(chat_once(make_client(Recorder(completion("Summary!"))))) == "Summary!"

    def test_missing_content_returns_empty(self):
        assert asyncio.run(chat_once(make_client(Recorder({"choices": []})))) == ""

    def test_non_json_body_returns_empty(self):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        assert asyncio.run(chat_once(make_client(handler))) == ""


class TestErrors:
    def test_401_is_authentication_error(self):
        recorder = Recorder({"error": {"message": "Invalid API key"}}, status=401)

        with pytest.raises(AuthenticationError) as exc_info:
            asyncio.run(chat_once(make_client(recorder)))

        assert exc_info.value.status_code == 401
        assert "Invalid API key" in str(exc_info.value)

    def test_503_is_server_error(self):
        with pytest.raises(ServerError):
            asyncio.run(chat_once(make_client(Recorder({}, status=503))))

    def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(APIConnectionError):
            asyncio.run(chat_once(make_client(handler)))

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        with pytest.raises(APIConnectionError, match="timed out"):
            asyncio.run(chat_once(make_client(handler)))


class TestFromConfig:
    def test_uses_provider_preset(self):
        config = ProviderConfig(name="deepseek")
        client = AsyncChatClient.from_config(config, api_key="k")

        assert client.base_url == "https://api.deepseek.com/v1"
        assert client.model == "deepseek-chat"
        assert client.provider == "deepseek"

    def test_overrides_win(self):
        config = ProviderConfig(
            name="custom",
            base_url="http://localhost:11434/v1/",
            model="llama3",
            temperature=0.0,
        )
        client = AsyncChatClient.from_config(config, api_key="k")

        assert client.base_url == "http://localhost:11434/v1"
        assert client.model == "llama3"
        assert client.temperature == 0.0

    def test_aclose_without_requests(self):
        client = AsyncChatClient(base_url="https://x", api_key="k", model="m")
        asyncio.run(client.aclose())
