"""Ollama provider implementation (local inference server).

Talks to the Ollama REST API directly with httpx:
- GET  /api/tags      lists installed models (health check)
- POST /api/generate  generates text for a prompt
"""

import json
import logging
import time

import httpx

from gitac.config import DEFAULT_CONTEXT_WINDOW, CommitConfig, OllamaConfig, format_duration
from gitac.llm.base import HEALTH_CHECK_TIMEOUT, BaseLLMProvider
from gitac.llm.exceptions import (
    ConnectivityError,
    EmptyResponseError,
    LLMTimeoutError,
    ModelNotFoundError,
    ProtocolError,
    ServerError,
)
from gitac.llm.models import GenerationRequest, GenerationResult

logger = logging.getLogger(__name__)


def _model_matches(requested: str, listed: str) -> bool:
    # Ollama lists untagged models with an implicit ":latest" tag
    if requested == listed:
        return True
    return ":" not in requested and listed == f"{requested}:latest"


class OllamaProvider(BaseLLMProvider):
    """Ollama LLM provider (local models)."""

    name = "Ollama"

    def __init__(
        self,
        config: OllamaConfig,
        timeout: float,
        commit_config: CommitConfig | None = None,
        context_window_tokens: int = DEFAULT_CONTEXT_WINDOW,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the Ollama provider.

        Args:
            config: Host and model settings.
            timeout: Deadline in seconds for each generation request.
            commit_config: Commit constraints.
            context_window_tokens: Context window sent as num_ctx.
            http_client: Pre-built client, mainly for tests.
        """
        super().__init__(config.model, timeout, commit_config, context_window_tokens)
        self.host = config.host.rstrip("/")
        self._client = http_client or httpx.Client(base_url=self.host, timeout=timeout)

    @property
    def endpoint(self) -> str:
        return self.host

    def close(self) -> None:
        self._client.close()

    def health_check(self) -> None:
        """Check that Ollama is running and the model is installed.

        Raises:
            ConnectivityError: If Ollama cannot be reached.
            LLMTimeoutError: If Ollama does not answer in time.
            ModelNotFoundError: If the model is not installed.
        """
        try:
            response = self._client.get("/api/tags", timeout=HEALTH_CHECK_TIMEOUT)
        except httpx.ConnectError as e:
            raise ConnectivityError(
                f"cannot connect to Ollama at {self.endpoint} - "
                f"make sure Ollama is running with 'ollama serve'"
            ) from e
        except httpx.TimeoutException as e:
            raise LLMTimeoutError(
                f"Ollama at {self.endpoint} did not answer within "
                f"{format_duration(HEALTH_CHECK_TIMEOUT)} - make sure Ollama is running "
                f"and not overloaded"
            ) from e
        except httpx.HTTPError as e:
            raise ConnectivityError(f"failed to connect to Ollama at {self.endpoint}: {e}") from e

        self._check_status(response)
        data = self._decode(response.text, response.status_code)

        available = [
            str(model.get("name", ""))
            for model in data.get("models") or []
            if isinstance(model, dict)
        ]
        logger.debug("Ollama models available: %s", available)

        if not any(_model_matches(self.model, name) for name in available):
            raise ModelNotFoundError(
                f"model '{self.model}' not found - available models: "
                f"{', '.join(available) or '(none)'}\n"
                f"Pull the model with: ollama pull {self.model}",
                available_models=available,
            )

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate text with Ollama.

        The response is read line by line; every chunk's text is appended to
        one buffer and only the joined text is returned. If the deadline
        passes first, the partial buffer is discarded.

        Args:
            request: The prompt and sampling parameters.

        Returns:
            A GenerationResult with the raw model output.

        Raises:
            ConnectivityError: If Ollama cannot be reached.
            LLMTimeoutError: If the deadline passes.
            ModelNotFoundError: On HTTP 404.
            ServerError: On HTTP 5xx or an error reported in the body.
            ProtocolError: For other status codes or undecodable chunks.
            EmptyResponseError: If the model produced only whitespace.
        """
        options = {
            "temperature": request.temperature,
            "top_p": request.top_p,
            "num_ctx": request.context_window_tokens,
        }
        if request.stop:
            options["stop"] = list(request.stop)

        payload = {
            "model": self.model,
            "prompt": request.prompt,
            "stream": False,
            "options": options,
        }

        logger.debug(
            "POST %s/api/generate model=%s prompt_chars=%d",
            self.host,
            self.model,
            len(request.prompt),
        )

        deadline = time.monotonic() + self.timeout
        buffer: list[str] = []

        try:
            with self._client.stream("POST", "/api/generate", json=payload) as response:
                if response.status_code != 200:
                    response.read()
                    self._check_status(response)

                for line in response.iter_lines():
                    if time.monotonic() > deadline:
                        raise LLMTimeoutError(self._timeout_message())
                    if not line.strip():
                        continue

                    chunk = self._decode(line, response.status_code)
                    if chunk.get("error"):
                        raise ServerError(f"Ollama reported an error: {chunk['error']}")

                    buffer.append(str(chunk.get("response") or ""))
                    if chunk.get("done"):
                        break
        except httpx.TimeoutException as e:
            raise LLMTimeoutError(self._timeout_message()) from e
        except httpx.ConnectError as e:
            raise ConnectivityError(
                f"cannot connect to Ollama at {self.endpoint} - make sure Ollama is running"
            ) from e
        except httpx.HTTPError as e:
            raise ConnectivityError(
                f"connection to Ollama at {self.endpoint} failed during generation: {e}"
            ) from e

        raw_text = "".join(buffer)
        logger.debug("Ollama returned %d characters", len(raw_text))

        if not raw_text.strip():
            raise EmptyResponseError(
                f"received empty response from Ollama - raw response was: {raw_text!r}",
                raw_text=raw_text,
            )

        return GenerationResult(raw_text=raw_text, model=self.model)

    def _timeout_message(self) -> str:
        return (
            f"request timed out after {format_duration(self.timeout)} - try increasing "
            f"provider.timeout in the config or check if model '{self.model}' is available"
        )

    def _check_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status == 200:
            return
        body = response.text
        if status == 404:
            raise ModelNotFoundError(
                f"model '{self.model}' not found (404) - pull it with: ollama pull {self.model}"
            )
        if status >= 500:
            raise ServerError(
                f"Ollama server error ({status}) - the service may be degraded: {body}",
                status_code=status,
            )
        raise ProtocolError(
            f"Ollama request failed with status {status}: {body}",
            status_code=status,
            body=body,
        )

    @staticmethod
    def _decode(text: str, status: int) -> dict:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ProtocolError(
                f"failed to decode Ollama response (status {status}): {text!r}",
                status_code=status,
                body=text,
            ) from e
        if not isinstance(data, dict):
            raise ProtocolError(
                f"unexpected Ollama response (status {status}): {text!r}",
                status_code=status,
                body=text,
            )
        return data
