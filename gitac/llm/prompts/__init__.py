"""LLM prompt templates for commit message generation.

This package contains the two prompts used by the generation pipeline:
- summarize: Condenses an oversized diff into a natural-language summary
- commit: Asks for a single conventional commit message
"""

from gitac.llm.prompts.summarize import (
    SUMMARIZE_PROMPT_TEMPLATE,
    build_summarize_prompt,
)
from gitac.llm.prompts.commit import (
    COMMIT_TYPES,
    DIFF_HEADER,
    README_MAX_LINES,
    README_TRUNCATION_MARKER,
    SUMMARY_HEADER,
    build_commit_prompt,
    truncate_readme,
)


__all__ = [
    # Summarization
    "SUMMARIZE_PROMPT_TEMPLATE",
    "build_summarize_prompt",
    # Commit message
    "COMMIT_TYPES",
    "DIFF_HEADER",
    "SUMMARY_HEADER",
    "README_MAX_LINES",
    "README_TRUNCATION_MARKER",
    "build_commit_prompt",
    "truncate_readme",
]
