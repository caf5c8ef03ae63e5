"""Summarization prompt used for diffs too large to send directly.

The summary replaces the raw diff in the commit message prompt.
"""

SUMMARIZE_PROMPT_TEMPLATE = """Summarize the changes in the following diff in several sentences. Pay attention to detail. Describe each changed file and what changed in it. The result should be a summary that is meaningful to a human knowledgeable about the codebase.

DIFF:
{diff}

OUTPUT:"""


def build_summarize_prompt(diff: str) -> str:
    """Build the summarization prompt for a diff.

    Args:
        diff: The staged diff text.

    Returns:
        The formatted prompt.
    """
    return SUMMARIZE_PROMPT_TEMPLATE.format(diff=diff)
