"""Base class shared by all LLM providers."""

from abc import ABC, abstractmethod

from gitac.config import DEFAULT_CONTEXT_WINDOW, CommitConfig
from gitac.llm.models import GenerationRequest, GenerationResult

# Health checks fail fast, independent of the generation timeout
HEALTH_CHECK_TIMEOUT = 5.0


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    A provider is built once per run from the configuration. Subclasses
    implement the transport (health_check and generate); the commit message
    pipeline itself is shared and lives in gitac.llm.pipeline.
    """

    name = "LLM"

    def __init__(
        self,
        model: str,
        timeout: float,
        commit_config: CommitConfig | None = None,
        context_window_tokens: int = DEFAULT_CONTEXT_WINDOW,
    ):
        """Initialize the provider.

        Args:
            model: The model to use.
            timeout: Deadline in seconds for each generation request.
            commit_config: Commit constraints. Defaults to CommitConfig().
            context_window_tokens: The model's context window in tokens.
        """
        self.model = model
        self.timeout = timeout
        self.commit_config = commit_config or CommitConfig()
        self.context_window_tokens = context_window_tokens

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """The URL the provider talks to, used in error messages."""
        pass

    @abstractmethod
    def health_check(self) -> None:
        """Verify the provider is reachable and the model is usable.

        Raises:
            LLMError: If the provider cannot be used.
        """
        pass

    @abstractmethod
    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Run a single model call.

        Args:
            request: The prompt and sampling parameters.

        Returns:
            A GenerationResult with the raw, non-blank model output.

        Raises:
            EmptyResponseError: If the model returned blank text.
            LLMError: For transport and protocol failures.
        """
        pass

    def generate_commit_message(self, diff: str, readme: str = "") -> str:
        """Generate a commit message for a staged diff.

        Args:
            diff: The staged diff (non-empty).
            readme: Optional README text used as project context.

        Returns:
            The normalized commit message.

        Raises:
            LLMError: If any stage of the pipeline fails.
        """
        from gitac.llm.pipeline import CommitMessagePipeline

        pipeline = CommitMessagePipeline(self, self.commit_config, self.context_window_tokens)
        return pipeline.run(diff, readme)

    def close(self) -> None:
        """Release transport resources. The default has nothing to release."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
