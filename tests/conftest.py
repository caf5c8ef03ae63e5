"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from gitac.config import CommitConfig
from gitac.llm.base import BaseLLMProvider
from gitac.llm.models import GenerationRequest, GenerationResult


class RecordingProvider(BaseLLMProvider):
    """In-memory provider that replays canned responses and records calls."""

    name = "Fake"

    def __init__(self, responses=None, health_error=None, **kwargs):
        kwargs.setdefault("timeout", 30.0)
        super().__init__(model=kwargs.pop("model", "fake-model"), **kwargs)
        self.responses = list(responses or [])
        self.health_error = health_error
        self.calls: list[str] = []
        self.requests: list[GenerationRequest] = []

    @property
    def endpoint(self) -> str:
        return "http://fake.invalid"

    def health_check(self) -> None:
        self.calls.append("health_check")
        if self.health_error is not None:
            raise self.health_error

    def generate(self, request: GenerationRequest) -> GenerationResult:
        self.calls.append("generate")
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return GenerationResult(raw_text=response, model=self.model)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def commit_config():
    """Default commit constraints (72 character subject)."""
    return CommitConfig()


@pytest.fixture
def small_diff():
    """A staged diff well under the direct-processing threshold."""
    return """diff --git a/gitac/parser.py b/gitac/parser.py
index 1234567..abcdefg 100644
--- a/gitac/parser.py
+++ b/gitac/parser.py
@@ -1,5 +1,8 @@
 def parse(text):
-    return text.split()
+    if not text:
+        return []
+    return text.split()
"""


@pytest.fixture
def large_diff():
    """A staged diff of 2008 words, over the threshold for a 4096-token window."""
    header = "diff --git a/big.py b/big.py\n--- a/big.py\n+++ b/big.py\n"
    body = "\n".join(f"+    value_{i} = compute({i})" for i in range(500))
    return header + body + "\n"


@pytest.fixture
def make_provider():
    """Factory for RecordingProvider instances."""

    def _make(responses=None, **kwargs):
        return RecordingProvider(responses=responses, **kwargs)

    return _make


@pytest.fixture
def mock_git_commands(mocker):
    """Mock subprocess.run for git commands."""
    mock_run = mocker.patch("subprocess.run")
    return mock_run
