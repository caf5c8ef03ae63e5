"""Commit message generation pipeline.

One run is a linear sequence with a single optional branch:

    health check -> triage -> [summarize] -> build prompt -> generate -> normalize

Any failure ends the run; nothing is retried and no partial message is
returned.
"""

import logging
from typing import TYPE_CHECKING

from gitac.config import CommitConfig
from gitac.llm.exceptions import EmptyResponseError, LLMError
from gitac.llm.models import commit_request, summarize_request
from gitac.llm.normalize import normalize_response, strip_thinking
from gitac.llm.prompts import build_commit_prompt, build_summarize_prompt
from gitac.llm.triage import is_oversized, word_threshold

if TYPE_CHECKING:
    from gitac.llm.base import BaseLLMProvider

logger = logging.getLogger(__name__)


class CommitMessagePipeline:
    """Runs the generation stages against a single provider."""

    def __init__(
        self,
        provider: "BaseLLMProvider",
        commit_config: CommitConfig,
        context_window_tokens: int,
    ):
        self.provider = provider
        self.commit_config = commit_config
        self.context_window_tokens = context_window_tokens

    def run(self, diff: str, readme: str = "") -> str:
        """Generate a normalized commit message.

        Args:
            diff: The staged diff.
            readme: Optional README text.

        Returns:
            The commit message.

        Raises:
            LLMError: If the health check, a model call or normalization fails.
        """
        self.provider.health_check()

        if is_oversized(diff, self.context_window_tokens):
            logger.info(
                "Diff has %d words (threshold %d), using two-stage generation",
                len(diff.split()),
                word_threshold(self.context_window_tokens),
            )
            content = self.summarize(diff)
            is_summary = True
        else:
            content = diff
            is_summary = False

        prompt = build_commit_prompt(content, readme, is_summary, self.commit_config)
        logger.debug("Commit prompt is %d characters", len(prompt))

        result = self.provider.generate(commit_request(prompt, self.context_window_tokens))
        return normalize_response(result.raw_text, self.commit_config)

    def summarize(self, diff: str) -> str:
        """Summarize an oversized diff.

        Raises:
            EmptyResponseError: If the summary is blank.
            LLMError: If the model call fails.
        """
        request = summarize_request(build_summarize_prompt(diff), self.context_window_tokens)
        try:
            result = self.provider.generate(request)
        except LLMError as e:
            raise e.with_context("failed to summarize file changes") from e

        summary = strip_thinking(result.raw_text)
        if not summary:
            raise EmptyResponseError(
                f"failed to summarize file changes - summary was empty, raw response was: "
                f"{result.raw_text!r}",
                raw_text=result.raw_text,
            )
        logger.debug("Summary is %d characters", len(summary))
        return summary
