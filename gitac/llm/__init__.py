"""LLM provider module for git-ac.

This module provides a unified interface to the supported LLM backends.
The active backend is selected by the provider section of the config file.
"""

from dotenv import load_dotenv

from gitac.config import Config, ProviderType
from gitac.llm.base import BaseLLMProvider
from gitac.llm.exceptions import (
    AuthenticationError,
    ConnectivityError,
    EmptyResponseError,
    LLMError,
    LLMTimeoutError,
    MissingAPIKeyError,
    ModelNotFoundError,
    ProtocolError,
    RateLimitError,
    ServerError,
)
from gitac.llm.models import GenerationRequest, GenerationResult

# Load environment variables from .env file
load_dotenv()


def get_provider(config: Config) -> BaseLLMProvider:
    """Get an LLM provider instance.

    Args:
        config: The loaded configuration.

    Returns:
        An instance of the provider named by config.provider.type.

    Raises:
        ValueError: If the provider is not supported.
    """
    provider_config = config.provider

    if provider_config.type == ProviderType.OLLAMA:
        from gitac.llm.ollama_provider import OllamaProvider

        return OllamaProvider(
            provider_config.ollama,
            timeout=provider_config.timeout,
            commit_config=config.commit,
            context_window_tokens=provider_config.context_window,
        )

    elif provider_config.type == ProviderType.OPENAI:
        from gitac.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(
            provider_config.openai,
            timeout=provider_config.timeout,
            commit_config=config.commit,
            context_window_tokens=provider_config.context_window,
        )

    else:
        raise ValueError(f"Unsupported provider: {provider_config.type}")


# Export commonly used items
__all__ = [
    "BaseLLMProvider",
    "GenerationRequest",
    "GenerationResult",
    "LLMError",
    "AuthenticationError",
    "ConnectivityError",
    "EmptyResponseError",
    "LLMTimeoutError",
    "MissingAPIKeyError",
    "ModelNotFoundError",
    "ProtocolError",
    "RateLimitError",
    "ServerError",
    "get_provider",
]
