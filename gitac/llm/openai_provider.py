"""OpenAI-compatible provider implementation.

Works with any server exposing POST {base_url}/chat/completions with bearer
token authentication (OpenAI, OpenRouter, vLLM, LM Studio, ...).
"""

import logging
import os

import openai
from openai import OpenAI
from openai.types.chat import ChatCompletion

from gitac.config import DEFAULT_CONTEXT_WINDOW, CommitConfig, OpenAIConfig, format_duration
from gitac.llm.base import HEALTH_CHECK_TIMEOUT, BaseLLMProvider
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
from gitac.llm.models import GenerationRequest, GenerationResult

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "OPENAI_API_KEY"


class OpenAIProvider(BaseLLMProvider):
    """OpenAI-compatible chat completions provider."""

    name = "OpenAI"

    def __init__(
        self,
        config: OpenAIConfig,
        timeout: float,
        commit_config: CommitConfig | None = None,
        context_window_tokens: int = DEFAULT_CONTEXT_WINDOW,
        client: OpenAI | None = None,
    ):
        """Initialize the OpenAI-compatible provider.

        Args:
            config: Base URL, API key and model settings.
            timeout: Deadline in seconds for each generation request.
            commit_config: Commit constraints.
            context_window_tokens: Token budget sent as max_tokens.
            client: Pre-built SDK client, mainly for tests.
        """
        super().__init__(config.model, timeout, commit_config, context_window_tokens)
        self.base_url = config.base_url.rstrip("/")
        self._configured_api_key = config.api_key
        self._client = client

    @property
    def endpoint(self) -> str:
        return self.base_url

    def get_api_key(self) -> str:
        """Get the API key from the config file or environment.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If no key is configured.
        """
        if self._configured_api_key:
            return self._configured_api_key

        api_key = os.getenv(API_KEY_ENV_VAR)
        if api_key:
            return api_key

        raise MissingAPIKeyError(
            f"API key for {self.endpoint} not found. Set it using:\n"
            f"  1. provider.openai.api_key in the config file\n"
            f"  2. Environment variable: export {API_KEY_ENV_VAR}=your_key_here"
        )

    @property
    def client(self) -> OpenAI:
        """The SDK client, created on first use."""
        if self._client is None:
            self._client = OpenAI(
                base_url=self.base_url,
                api_key=self.get_api_key(),
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    def health_check(self) -> None:
        """Check the API with a minimal one-token request.

        Raises:
            LLMError: If the API is unreachable, rejects the key or the model.
        """
        self._create(
            {
                "model": self.model,
                "messages": [{"role": "user", "content": "test"}],
                "max_tokens": 1,
                "temperature": 0.1,
                "stream": False,
            },
            timeout=HEALTH_CHECK_TIMEOUT,
        )

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate text with the chat completions endpoint.

        Args:
            request: The prompt and sampling parameters.

        Returns:
            A GenerationResult with the raw model output.

        Raises:
            EmptyResponseError: If no choices or blank content come back.
            LLMError: For transport, HTTP status and protocol failures.
        """
        params = {
            "model": self.model,
            "messages": [{"role": "user", "content": request.prompt}],
            "max_tokens": request.context_window_tokens,
            "temperature": request.temperature,
            "top_p": request.top_p,
            "stream": False,
        }
        if request.stop:
            params["stop"] = list(request.stop)

        logger.debug(
            "POST %s/chat/completions model=%s prompt_chars=%d",
            self.base_url,
            self.model,
            len(request.prompt),
        )

        response = self._create(params, timeout=self.timeout)
        raw_text = self._extract_content(response)
        logger.debug("OpenAI-compatible API returned %d characters", len(raw_text))

        if not raw_text.strip():
            raise EmptyResponseError(
                f"received empty response from {self.endpoint} - raw response was: {raw_text!r}",
                raw_text=raw_text,
            )

        return GenerationResult(raw_text=raw_text, model=self.model)

    def _extract_content(self, response) -> str:
        """Get the first choice's text from a completion.

        Without strict response validation the SDK hands back the raw body
        as a string when it isn't JSON, and leaves missing fields unset.

        Raises:
            ProtocolError: If the body is not a usable completion.
            EmptyResponseError: If the completion has no choices.
        """
        if not isinstance(response, ChatCompletion):
            body = str(response)
            raise ProtocolError(
                f"unexpected response from {self.endpoint} (status 200): {body}",
                status_code=200,
                body=body,
            )

        body = response.model_dump_json()
        error = getattr(response, "error", None)
        if error:
            raise ProtocolError(
                f"API at {self.endpoint} reported an error: {error}",
                status_code=200,
                body=body,
            )

        choices = getattr(response, "choices", None)
        if not choices:
            raise EmptyResponseError(
                f"no choices in response from {self.endpoint} - raw response was: {body}",
                raw_text=body,
            )

        message = getattr(choices[0], "message", None)
        if message is None:
            raise ProtocolError(
                f"response from {self.endpoint} has a choice without a message: {body}",
                status_code=200,
                body=body,
            )
        return message.content or ""

    def _create(self, params: dict, timeout: float):
        """Call chat.completions.create, translating SDK errors."""
        try:
            return self.client.chat.completions.create(**params, timeout=timeout)
        except openai.APITimeoutError as e:
            raise LLMTimeoutError(
                f"request timed out after {format_duration(timeout)} - try increasing "
                f"provider.timeout in the config or check if the API is accessible"
            ) from e
        except openai.APIConnectionError as e:
            raise ConnectivityError(
                f"cannot connect to API at {self.endpoint} - "
                f"check your network connection and base_url"
            ) from e
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise AuthenticationError(
                f"authentication failed ({e.status_code}) - check your API key"
            ) from e
        except openai.NotFoundError as e:
            raise ModelNotFoundError(
                f"model '{self.model}' not found (404) - "
                f"check if the model exists and you have access"
            ) from e
        except openai.RateLimitError as e:
            raise RateLimitError(
                "rate limit exceeded (429) - try again later or increase timeout"
            ) from e
        except openai.InternalServerError as e:
            raise ServerError(
                f"server error ({e.status_code}) - the API service may be experiencing issues",
                status_code=e.status_code,
            ) from e
        except openai.APIStatusError as e:
            body = e.response.text
            raise ProtocolError(
                f"API request failed with status {e.status_code}: {body}",
                status_code=e.status_code,
                body=body,
            ) from e
        except openai.APIResponseValidationError as e:
            body = e.response.text
            raise ProtocolError(
                f"failed to decode response (status {e.status_code}): {body}",
                status_code=e.status_code,
                body=body,
            ) from e
        except ValueError as e:
            raise ProtocolError(f"failed to decode response from {self.endpoint}: {e}") from e
