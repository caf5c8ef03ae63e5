"""Staging, diff, README lookup and commit operations.

Contains:
- stage_all_changes: Stage modifications to tracked files
- get_staged_diff: Get the staged diff
- get_readme_content: Read the repository README for prompt context
- commit: Create a commit with a given message
"""

import logging
import os
import subprocess
import tempfile
from pathlib import Path

from gitac.git.exceptions import GitError
from gitac.git.runner import _run_git_command

logger = logging.getLogger(__name__)

README_CANDIDATES = ["README.md", "readme.md", "Readme.md", "README", "readme"]


def stage_all_changes() -> None:
    """Stage all modifications and deletions of tracked files (git add -u).

    Raises:
        GitError: If staging fails.
    """
    _run_git_command(["add", "-u"])


def get_staged_diff() -> str:
    """Get the diff of staged changes.

    Returns:
        The output of git diff --cached, or an empty string if nothing is staged.

    Raises:
        GitError: If the diff cannot be produced.
    """
    diff = _run_git_command(["diff", "--cached"], strip=False)
    logger.debug("Staged diff is %d characters", len(diff))
    return diff


def get_readme_content(repo_root: Path) -> str:
    """Read the first README found at the repository root.

    Args:
        repo_root: The repository root directory.

    Returns:
        The README text, or an empty string if there is none or it can't be read.
    """
    for name in README_CANDIDATES:
        path = Path(repo_root) / name
        if not path.is_file():
            continue
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Skipping unreadable README %s: %s", path, e)
            continue
        logger.debug("Using %s as project context", path)
        return content
    return ""


def commit(message: str) -> None:
    """Create a commit with the given message.

    The message is written to a temporary file and passed with git commit -F
    so multi-line messages are kept intact. Git's own output is shown to the
    user.

    Args:
        message: The commit message.

    Raises:
        GitError: If the commit fails.
    """
    fd, path = tempfile.mkstemp(prefix="git-ac-commit-", suffix=".txt")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(message)

        try:
            subprocess.run(["git", "commit", "-F", path], check=True)
        except subprocess.CalledProcessError as e:
            raise GitError(f"git commit failed with exit code {e.returncode}") from e
        except FileNotFoundError as e:
            raise GitError("Git is not installed or not in PATH.") from e
    finally:
        os.unlink(path)
