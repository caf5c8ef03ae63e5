"""Backend-agnostic request and result types.

Contains:
- GenerationRequest: Prompt plus sampling parameters for one model call
- GenerationResult: Raw text returned by a provider
- summarize_request / commit_request: The two sampling presets
"""

from dataclasses import dataclass, field

# Summarization favors factual compression
SUMMARIZE_TEMPERATURE = 0.3
SUMMARIZE_TOP_P = 0.8
SUMMARIZE_STOP = ("\n\nDIFF:", "\n\nCOMMIT")

# Final message generation favors fluent phrasing
COMMIT_TEMPERATURE = 0.7
COMMIT_TOP_P = 0.9


@dataclass(frozen=True)
class GenerationRequest:
    """A single model call, independent of any provider's wire format."""

    prompt: str
    temperature: float
    top_p: float
    context_window_tokens: int
    stop: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class GenerationResult:
    """Output of a provider call, before normalization."""

    raw_text: str
    model: str


def summarize_request(prompt: str, context_window_tokens: int) -> GenerationRequest:
    """Build the request for the summarization stage."""
    return GenerationRequest(
        prompt=prompt,
        temperature=SUMMARIZE_TEMPERATURE,
        top_p=SUMMARIZE_TOP_P,
        context_window_tokens=context_window_tokens,
        stop=SUMMARIZE_STOP,
    )


def commit_request(prompt: str, context_window_tokens: int) -> GenerationRequest:
    """Build the request for the commit message stage."""
    return GenerationRequest(
        prompt=prompt,
        temperature=COMMIT_TEMPERATURE,
        top_p=COMMIT_TOP_P,
        context_window_tokens=context_window_tokens,
    )
