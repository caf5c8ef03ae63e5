"""AI-powered conventional commit message generator for git."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("git-ac")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
