"""Cleanup of raw model output into a usable commit message.

Contains:
- strip_thinking: Remove private reasoning blocks emitted by thinking models
- split_subject: Break an overlong subject line without losing text
- clean_commit_message: Apply all cleanup steps
- normalize_response: clean_commit_message, rejecting empty results
"""

from gitac.config import CommitConfig
from gitac.llm.exceptions import EmptyResponseError

ELLIPSIS = "…"

# (opening, closing) markers wrapping model reasoning
THINKING_MARKERS = (
    ("<think>", "</think>"),
    ("<thinking>", "</thinking>"),
)


def strip_thinking(text: str) -> str:
    """Remove thinking blocks from model output.

    When an opening marker precedes the last closing marker, everything up
    to and including that closing marker is reasoning and is dropped. Any
    markers left over afterwards are unmatched; only the marker tokens are
    removed so the surrounding text survives.

    Args:
        text: The raw model output.

    Returns:
        The text without reasoning, stripped of surrounding whitespace.
    """
    cleaned = text.strip()
    for opening, closing in THINKING_MARKERS:
        last_close = cleaned.rfind(closing)
        if last_close != -1 and opening in cleaned[:last_close]:
            cleaned = cleaned[last_close + len(closing):]
        cleaned = cleaned.replace(opening, "").replace(closing, "")
    return cleaned.strip()


def split_subject(subject: str, max_length: int) -> list[str]:
    """Split a subject line that exceeds max_length.

    The head ends at the last whitespace at or before index max_length - 1
    and gets an ellipsis appended; the rest becomes a second line starting
    with an ellipsis. Without such whitespace the split happens at exactly
    max_length - 1 characters.

    Args:
        subject: The first line of the message.
        max_length: Maximum subject line length (positive).

    Returns:
        The subject as a single line, or the head and remainder lines.
    """
    if len(subject) <= max_length:
        return [subject]

    limit = max_length - 1
    boundary = next(
        (i for i in range(min(max_length, len(subject)) - 1, 0, -1) if subject[i].isspace()),
        None,
    )

    if boundary is not None:
        head = subject[:boundary].rstrip()
        remainder = subject[boundary:].strip()
    else:
        head = subject[:limit]
        remainder = subject[limit:]

    lines = [head + ELLIPSIS]
    if remainder:
        lines.append(ELLIPSIS + remainder)
    return lines


def clean_commit_message(raw_text: str, commit_config: CommitConfig) -> str:
    """Turn raw model output into a commit message.

    Args:
        raw_text: The raw model output.
        commit_config: Commit constraints (subject line length).

    Returns:
        The cleaned message, or an empty string if nothing is left.
    """
    cleaned = strip_thinking(raw_text)
    if not cleaned:
        return ""

    lines = cleaned.split("\n")
    lines[0:1] = split_subject(lines[0].rstrip(), commit_config.max_length)
    return "\n".join(lines)


def normalize_response(raw_text: str, commit_config: CommitConfig) -> str:
    """Clean model output, rejecting it if nothing usable remains.

    Args:
        raw_text: The raw model output.
        commit_config: Commit constraints (subject line length).

    Returns:
        The cleaned, non-empty commit message.

    Raises:
        EmptyResponseError: If the message is empty after cleaning.
    """
    message = clean_commit_message(raw_text, commit_config)
    if not message:
        raise EmptyResponseError(
            f"commit message became empty after cleaning - raw response was: {raw_text!r}",
            raw_text=raw_text,
        )
    return message
