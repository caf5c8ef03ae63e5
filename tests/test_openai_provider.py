"""Tests for gitac.llm.openai_provider module."""

from unittest.mock import MagicMock

import httpx
import openai
import pytest
from openai import OpenAI
from openai.types.chat import ChatCompletion

from gitac.config import OpenAIConfig
from gitac.llm.base import HEALTH_CHECK_TIMEOUT
from gitac.llm.exceptions import (
    AuthenticationError,
    ConnectivityError,
    EmptyResponseError,
    LLMTimeoutError,
    MissingAPIKeyError,
    ModelNotFoundError,
    ProtocolError,
    RateLimitError,
    ServerError,
)
from gitac.llm.models import commit_request, summarize_request
from gitac.llm.openai_provider import OpenAIProvider

BASE_URL = "https://llm.example.com/v1"
REQUEST = httpx.Request("POST", f"{BASE_URL}/chat/completions")


def _config(api_key="sk-test-key-123456"):
    return OpenAIConfig(base_url=BASE_URL, api_key=api_key, model="gpt-4o-mini")


def _provider(client=None, api_key="sk-test-key-123456", timeout=30.0):
    return OpenAIProvider(_config(api_key), timeout=timeout, client=client or MagicMock())


def _completion(content, choices=None):
    if choices is None:
        choices = [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ]
    return ChatCompletion.model_validate(
        {
            "id": "chatcmpl-123",
            "object": "chat.completion",
            "created": 1700000000,
            "model": "gpt-4o-mini",
            "choices": choices,
        }
    )


def _status_error(cls, status, text=""):
    response = httpx.Response(status, text=text, request=REQUEST)
    return cls(f"Error code: {status}", response=response, body=None)


class TestGetApiKey:
    """Tests for API key lookup."""

    def test_key_from_config(self, monkeypatch):
        """Test that the configured key wins."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-from-environment")
        assert _provider().get_api_key() == "sk-test-key-123456"

    def test_key_from_environment(self, monkeypatch):
        """Test falling back to OPENAI_API_KEY."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-from-environment")
        assert _provider(api_key="").get_api_key() == "sk-from-environment"

    def test_missing_key(self, monkeypatch):
        """Test that a missing key raises MissingAPIKeyError."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(MissingAPIKeyError) as exc_info:
            _provider(api_key="").get_api_key()

        assert "OPENAI_API_KEY" in str(exc_info.value)

    def test_missing_key_fails_health_check(self, monkeypatch):
        """Test that the health check reports a missing key."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        provider = OpenAIProvider(_config(api_key=""), timeout=30.0)

        with pytest.raises(MissingAPIKeyError):
            provider.health_check()


class TestClient:
    """Tests for SDK client construction."""

    def test_client_built_without_retries(self, mocker):
        """Test the SDK client settings."""
        mock_openai = mocker.patch("gitac.llm.openai_provider.OpenAI")
        provider = OpenAIProvider(_config(), timeout=45.0)

        client = provider.client

        assert client is mock_openai.return_value
        mock_openai.assert_called_once_with(
            base_url=BASE_URL,
            api_key="sk-test-key-123456",
            timeout=45.0,
            max_retries=0,
        )

    def test_client_built_once(self, mocker):
        """Test that the client is cached."""
        mock_openai = mocker.patch("gitac.llm.openai_provider.OpenAI")
        provider = OpenAIProvider(_config(), timeout=30.0)

        provider.client
        provider.client

        mock_openai.assert_called_once()

    def test_endpoint(self):
        """Test that the endpoint is the base URL without trailing slash."""
        config = OpenAIConfig(base_url=BASE_URL + "/", api_key="sk-test-key-123456", model="m")
        assert OpenAIProvider(config, timeout=30.0).endpoint == BASE_URL


class TestHealthCheck:
    """Tests for OpenAIProvider.health_check."""

    def test_one_token_request(self):
        """Test that the health check is a minimal request with a short timeout."""
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("ok")

        _provider(client).health_check()

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["max_tokens"] == 1
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["timeout"] == HEALTH_CHECK_TIMEOUT

    def test_rejected_key(self):
        """Test that a 401 during the health check raises AuthenticationError."""
        client = MagicMock()
        client.chat.completions.create.side_effect = _status_error(openai.AuthenticationError, 401)

        with pytest.raises(AuthenticationError, match="API key"):
            _provider(client).health_check()


class TestGenerate:
    """Tests for OpenAIProvider.generate."""

    def test_request_parameters(self):
        """Test the chat completions arguments."""
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("summary")

        _provider(client, timeout=60.0).generate(summarize_request("the prompt", 4096))

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs == {
            "model": "gpt-4o-mini",
            "messages": [{"role": "user", "content": "the prompt"}],
            "max_tokens": 4096,
            "temperature": 0.3,
            "top_p": 0.8,
            "stream": False,
            "stop": ["\n\nDIFF:", "\n\nCOMMIT"],
            "timeout": 60.0,
        }

    def test_stop_omitted_when_empty(self):
        """Test that no stop sequences are sent for the commit stage."""
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("feat: x")

        _provider(client).generate(commit_request("p", 4096))

        assert "stop" not in client.chat.completions.create.call_args.kwargs

    def test_returns_content(self):
        """Test that the first choice's content is returned."""
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("feat(api): add client")

        result = _provider(client).generate(commit_request("p", 4096))

        assert result.raw_text == "feat(api): add client"
        assert result.model == "gpt-4o-mini"

    def test_no_choices(self):
        """Test that a response without choices raises EmptyResponseError."""
        client = MagicMock()
        client.chat.completions.create.return_value = _completion(None, choices=[])

        with pytest.raises(EmptyResponseError, match="no choices") as exc_info:
            _provider(client).generate(commit_request("p", 4096))

        assert "chatcmpl-123" in exc_info.value.raw_text
        assert "chatcmpl-123" in str(exc_info.value)

    @pytest.mark.parametrize("content", ["", "   \n", None])
    def test_blank_content(self, content):
        """Test that blank content raises EmptyResponseError."""
        client = MagicMock()
        client.chat.completions.create.return_value = _completion(content)

        with pytest.raises(EmptyResponseError):
            _provider(client).generate(commit_request("p", 4096))


class TestErrorMapping:
    """Tests for SDK exception translation."""

    @pytest.mark.parametrize(
        "sdk_error, expected",
        [
            (_status_error(openai.AuthenticationError, 401), AuthenticationError),
            (_status_error(openai.PermissionDeniedError, 403), AuthenticationError),
            (_status_error(openai.NotFoundError, 404), ModelNotFoundError),
            (_status_error(openai.RateLimitError, 429), RateLimitError),
            (_status_error(openai.InternalServerError, 503), ServerError),
            (openai.APITimeoutError(request=REQUEST), LLMTimeoutError),
            (openai.APIConnectionError(message="Connection error.", request=REQUEST), ConnectivityError),
        ],
    )
    def test_maps_to_taxonomy(self, sdk_error, expected):
        """Test each SDK error kind."""
        client = MagicMock()
        client.chat.completions.create.side_effect = sdk_error

        with pytest.raises(expected) as exc_info:
            _provider(client).generate(commit_request("p", 4096))

        assert exc_info.value.__cause__ is sdk_error

    def test_server_error_keeps_status(self):
        """Test that ServerError carries the HTTP status."""
        client = MagicMock()
        client.chat.completions.create.side_effect = _status_error(openai.InternalServerError, 502)

        with pytest.raises(ServerError) as exc_info:
            _provider(client).generate(commit_request("p", 4096))

        assert exc_info.value.status_code == 502

    def test_other_status_is_protocol_error(self):
        """Test that unexpected statuses keep status and body."""
        client = MagicMock()
        client.chat.completions.create.side_effect = _status_error(
            openai.BadRequestError, 400, text='{"error": "bad max_tokens"}'
        )

        with pytest.raises(ProtocolError) as exc_info:
            _provider(client).generate(commit_request("p", 4096))

        assert exc_info.value.status_code == 400
        assert "bad max_tokens" in exc_info.value.body

    def test_response_validation_is_protocol_error(self):
        """Test that an undecodable response raises ProtocolError."""
        client = MagicMock()
        response = httpx.Response(200, text="not json", request=REQUEST)
        client.chat.completions.create.side_effect = openai.APIResponseValidationError(
            response=response, body=None
        )

        with pytest.raises(ProtocolError) as exc_info:
            _provider(client).generate(commit_request("p", 4096))

        assert exc_info.value.body == "not json"

    def test_timeout_message_names_timeout(self):
        """Test that the timeout message shows the configured value."""
        client = MagicMock()
        client.chat.completions.create.side_effect = openai.APITimeoutError(request=REQUEST)

        with pytest.raises(LLMTimeoutError, match="2m"):
            _provider(client, timeout=120.0).generate(commit_request("p", 4096))

    def test_connection_message_names_endpoint(self):
        """Test that connectivity errors name the base URL."""
        client = MagicMock()
        client.chat.completions.create.side_effect = openai.APIConnectionError(
            message="Connection error.", request=REQUEST
        )

        with pytest.raises(ConnectivityError) as exc_info:
            _provider(client).generate(commit_request("p", 4096))

        assert BASE_URL in str(exc_info.value)


class TestMalformedResponses:
    """Tests for HTTP 200 bodies that are not usable completions."""

    def _sdk_provider(self, handler):
        client = OpenAI(
            base_url=BASE_URL,
            api_key="sk-test-key-123456",
            max_retries=0,
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        return _provider(client)

    def test_non_json_body(self):
        """Test that an HTML page from a gateway raises ProtocolError."""

        def handler(request):
            return httpx.Response(
                200, text="<html>gateway</html>", headers={"content-type": "text/html"}
            )

        with pytest.raises(ProtocolError) as exc_info:
            self._sdk_provider(handler).generate(commit_request("p", 4096))

        assert exc_info.value.status_code == 200
        assert "<html>gateway</html>" in exc_info.value.body

    def test_choice_without_message(self):
        """Test that a choice lacking a message raises ProtocolError."""

        def handler(request):
            return httpx.Response(200, json={"choices": [{"index": 0}]})

        with pytest.raises(ProtocolError) as exc_info:
            self._sdk_provider(handler).generate(commit_request("p", 4096))

        assert exc_info.value.status_code == 200
        assert "choices" in exc_info.value.body

    def test_error_in_body(self):
        """Test that an error reported with status 200 raises ProtocolError."""

        def handler(request):
            return httpx.Response(200, json={"error": "nope"})

        with pytest.raises(ProtocolError) as exc_info:
            self._sdk_provider(handler).generate(commit_request("p", 4096))

        assert "nope" in str(exc_info.value)
        assert "nope" in exc_info.value.body

    def test_valid_body(self):
        """Test that a well-formed completion still goes through the SDK client."""

        def handler(request):
            return httpx.Response(
                200,
                json={
                    "id": "chatcmpl-1",
                    "object": "chat.completion",
                    "created": 1700000000,
                    "model": "gpt-4o-mini",
                    "choices": [
                        {
                            "index": 0,
                            "finish_reason": "stop",
                            "message": {"role": "assistant", "content": "fix(api): retry"},
                        }
                    ],
                },
            )

        result = self._sdk_provider(handler).generate(commit_request("p", 4096))

        assert result.raw_text == "fix(api): retry"
