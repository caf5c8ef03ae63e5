"""LLM-related exception classes.

Contains all exception classes for LLM operations:
- LLMError: Base exception for LLM-related errors
- MissingAPIKeyError: Raised when API key is not set
- ConnectivityError: The endpoint could not be reached
- LLMTimeoutError: A request exceeded its deadline
- AuthenticationError: The provider rejected the credentials
- ModelNotFoundError: The configured model does not exist
- RateLimitError: The provider is throttling requests
- ServerError: The provider reported an internal failure
- EmptyResponseError: Nothing usable came back from the model
- ProtocolError: The response could not be understood
"""

import copy
from typing import Optional


class LLMError(Exception):
    """Base exception for LLM-related errors."""

    def with_context(self, context: str) -> "LLMError":
        """Return a copy of this error whose message is prefixed with context.

        The copy keeps the error kind and any extra attributes, so callers can
        add context while still raising the same class (``raise
        err.with_context(...) from err``).
        """
        wrapped = copy.copy(self)
        wrapped.args = (f"{context}: {self}",)
        return wrapped


class MissingAPIKeyError(LLMError):
    """Raised when the required API key is not set."""

    pass


class ConnectivityError(LLMError):
    """Raised when the provider endpoint cannot be reached."""

    pass


class LLMTimeoutError(LLMError):
    """Raised when a request does not finish before its deadline."""

    pass


class AuthenticationError(LLMError):
    """Raised when the provider rejects the API key (HTTP 401)."""

    pass


class ModelNotFoundError(LLMError):
    """Raised when the configured model is unknown to the provider."""

    def __init__(self, message: str, available_models: Optional[list[str]] = None):
        super().__init__(message)
        self.available_models = available_models or []


class RateLimitError(LLMError):
    """Raised when the provider is rate limiting requests (HTTP 429)."""

    pass


class ServerError(LLMError):
    """Raised when the provider fails internally (HTTP 5xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(LLMError):
    """Raised when the model output is blank, or becomes blank once cleaned.

    Attributes:
        raw_text: The unmodified model output, kept for diagnosis.
    """

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class ProtocolError(LLMError):
    """Raised for undecodable responses or unexpected HTTP status codes."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
