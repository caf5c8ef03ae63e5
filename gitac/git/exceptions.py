"""Git-related exception classes.

Contains:
- GitError: Base exception for git-related errors
- NoStagedChangesError: Raised when nothing is staged for commit
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class NoStagedChangesError(GitError):
    """Raised when there are no staged changes."""

    pass
