"""Configuration for git-ac.

Configuration is loaded from ~/.config/git-ac.yaml (or the path in the
GIT_AC_CONFIG environment variable). A missing file yields the defaults.

Contains:
- ProviderType: Supported LLM backends
- OllamaConfig, OpenAIConfig: Backend-specific settings
- ProviderConfig: Backend selection, timeout and context window
- CommitConfig: Commit message constraints
- Config: Top-level configuration model
- load_config: Read and validate the YAML configuration file
"""

import os
import re
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded or is invalid."""

    pass


class ProviderType(str, Enum):
    """Supported LLM providers."""

    OLLAMA = "ollama"
    OPENAI = "openai"


# ============================================================
# DEFAULT VALUES
# ============================================================

CONFIG_ENV_VAR = "GIT_AC_CONFIG"

DEFAULT_TIMEOUT = 30.0
MAX_TIMEOUT = 600.0
DEFAULT_CONTEXT_WINDOW = 4096
MIN_CONTEXT_WINDOW = 512

DEFAULT_MAX_LENGTH = 72
MIN_MAX_LENGTH = 20
MAX_MAX_LENGTH = 200

DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama2"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"

MIN_API_KEY_LENGTH = 10

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value) -> float:
    """Parse a duration into seconds.

    Accepts plain numbers (seconds) or strings such as "500ms", "30s",
    "2m" and "1m30s".

    Args:
        value: The raw duration value.

    Returns:
        The duration in seconds.

    Raises:
        ValueError: If the value is not a recognised duration.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise ValueError(f"invalid duration: {value!r}")

    text = value.strip().lower()
    try:
        return float(text)
    except ValueError:
        pass

    total = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(text):
        raise ValueError(f"invalid duration: {value!r} (use e.g. 30s, 2m, 1m30s)")
    return total


def format_duration(seconds: float) -> str:
    """Format seconds the way they are written in the config file."""
    if seconds < 1:
        return f"{seconds * 1000:g}ms"
    if seconds >= 60 and seconds % 60 == 0:
        return f"{seconds / 60:g}m"
    return f"{seconds:g}s"


class OllamaConfig(BaseModel):
    """Settings for a local Ollama server."""

    host: str = DEFAULT_OLLAMA_HOST
    model: str = DEFAULT_OLLAMA_MODEL


class OpenAIConfig(BaseModel):
    """Settings for an OpenAI-compatible chat completions API."""

    base_url: str = DEFAULT_OPENAI_BASE_URL
    api_key: str = ""
    model: str = ""


class ProviderConfig(BaseModel):
    """Backend selection and the limits shared by every backend."""

    type: ProviderType = ProviderType.OLLAMA
    timeout: float = DEFAULT_TIMEOUT
    context_window: int = DEFAULT_CONTEXT_WINDOW
    ollama: Optional[OllamaConfig] = Field(default_factory=OllamaConfig)
    openai: Optional[OpenAIConfig] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("provider type is required (supported: ollama, openai)")
        if isinstance(v, str):
            v = v.strip().lower()
            if v not in {p.value for p in ProviderType}:
                raise ValueError(f"unsupported provider type '{v}' (supported: ollama, openai)")
        return v

    @field_validator("timeout", mode="before")
    @classmethod
    def parse_timeout(cls, v):
        return parse_duration(v)

    @field_validator("timeout")
    @classmethod
    def check_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"provider timeout must be positive (got {format_duration(v)})")
        if v > MAX_TIMEOUT:
            raise ValueError(
                f"provider timeout is too large (got {format_duration(v)}, maximum 10m)"
            )
        return v

    @field_validator("context_window")
    @classmethod
    def check_context_window(cls, v: int) -> int:
        if v < MIN_CONTEXT_WINDOW:
            raise ValueError(
                f"context_window is too small (got {v}, minimum {MIN_CONTEXT_WINDOW})"
            )
        return v


class CommitConfig(BaseModel):
    """Constraints applied to generated commit messages.

    Attributes:
        max_length: Maximum length of the subject line.
    """

    max_length: int = Field(default=DEFAULT_MAX_LENGTH, gt=0)


def _check_url(value: str, setting: str) -> None:
    if not value:
        raise ValueError(f"{setting} is required")
    if not value.startswith(("http://", "https://")):
        raise ValueError(
            f"{setting} must be a valid URL starting with http:// or https:// (got {value!r})"
        )


class Config(BaseModel):
    """Top-level git-ac configuration."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    commit: CommitConfig = Field(default_factory=CommitConfig)

    @model_validator(mode="after")
    def check_settings(self) -> "Config":
        max_length = self.commit.max_length
        if max_length < MIN_MAX_LENGTH:
            raise ValueError(
                f"max_length is too small (got {max_length}, minimum {MIN_MAX_LENGTH})"
            )
        if max_length > MAX_MAX_LENGTH:
            raise ValueError(
                f"max_length is too large (got {max_length}, maximum {MAX_MAX_LENGTH})"
            )

        if self.provider.type == ProviderType.OLLAMA:
            ollama = self.provider.ollama
            if ollama is None:
                raise ValueError(
                    "ollama config section is required when provider type is 'ollama'"
                )
            _check_url(ollama.host, "ollama host")
            if not ollama.model:
                raise ValueError("ollama model is required")
        else:
            openai = self.provider.openai
            if openai is None:
                raise ValueError(
                    "openai config section is required when provider type is 'openai'"
                )
            _check_url(openai.base_url, "openai base_url")
            if openai.api_key and len(openai.api_key) < MIN_API_KEY_LENGTH:
                raise ValueError(
                    f"openai api_key appears to be too short "
                    f"(got {len(openai.api_key)} characters)"
                )
            if not openai.model:
                raise ValueError("openai model is required")
        return self

    @property
    def model(self) -> str:
        """Name of the model used by the selected provider."""
        if self.provider.type == ProviderType.OPENAI and self.provider.openai:
            return self.provider.openai.model
        if self.provider.ollama:
            return self.provider.ollama.model
        return ""


def get_config_path() -> Path:
    """Get the path of the configuration file.

    Returns:
        The path from GIT_AC_CONFIG if set, otherwise ~/.config/git-ac.yaml.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "git-ac.yaml"


def _describe_validation_error(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        message = str(item.get("msg", ""))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        location = ".".join(str(part) for part in item.get("loc", ()))
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


def load_config(path: Optional[Path] = None) -> Config:
    """Load and validate the configuration file.

    Args:
        path: Explicit config file path. Defaults to get_config_path().

    Returns:
        The validated Config. Defaults are used if the file doesn't exist.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    config_file = Path(path) if path else get_config_path()

    if not config_file.exists():
        return Config()

    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"failed to read config file {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"invalid config in {config_file}: expected a mapping at the top level")

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config in {config_file}: {_describe_validation_error(e)}") from e
