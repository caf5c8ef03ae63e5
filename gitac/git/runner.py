"""Git command runner and repository utilities.

Contains:
- _run_git_command: Run a git command and return its output
- validate_repository: Check that the working directory is inside a repo
- get_repo_root: Get the root directory of the current git repository
"""

import logging
import subprocess
from pathlib import Path

from gitac.git.exceptions import GitError

logger = logging.getLogger(__name__)


def _run_git_command(args: list[str], strip: bool = True) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        strip: Whether to strip surrounding whitespace from stdout.

    Returns:
        The stdout of the git command.

    Raises:
        GitError: If the command fails.
    """
    logger.debug("Running git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise GitError(
            f"Git command failed: git {' '.join(args)}\n{(e.stderr or '').strip()}"
        ) from e
    except FileNotFoundError as e:
        raise GitError("Git is not installed or not in PATH.") from e
    return result.stdout.strip() if strip else result.stdout


def validate_repository() -> None:
    """Check that the current directory is inside a git repository.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        _run_git_command(["rev-parse", "--git-dir"])
    except GitError as e:
        raise GitError(
            "Not in a git repository. Please run this command from within a git repo."
        ) from e


def get_repo_root() -> Path:
    """Get the root directory of the current git repository.

    Returns:
        Path to the repository root.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"])
    except GitError as e:
        raise GitError(
            "Not in a git repository. Please run this command from within a git repo."
        ) from e
    return Path(root)
