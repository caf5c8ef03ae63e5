"""Diff size triage.

Decides whether a staged diff fits in a single prompt or has to be
summarized first. The budget is half of the model's context window, the
other half being left for the prompt scaffolding and the response.
"""

from gitac.config import DEFAULT_CONTEXT_WINDOW

# Empirical ratio of model tokens to whitespace-separated words
TOKENS_PER_WORD = 1.3


def word_threshold(context_window_tokens: int = DEFAULT_CONTEXT_WINDOW) -> int:
    """Get the largest word count that is still processed directly.

    Args:
        context_window_tokens: The model's context window in tokens.

    Returns:
        The word budget (1575 for a 4096-token window).
    """
    return int((context_window_tokens / 2) / TOKENS_PER_WORD)


def is_oversized(diff: str, context_window_tokens: int = DEFAULT_CONTEXT_WINDOW) -> bool:
    """Check whether a diff is too large for direct processing.

    Args:
        diff: The staged diff text.
        context_window_tokens: The model's context window in tokens.

    Returns:
        True if the diff's word count exceeds word_threshold().
    """
    return len(diff.split()) > word_threshold(context_window_tokens)
