"""Git operations for git-ac.

This package wraps the git command line:
- exceptions: GitError, NoStagedChangesError
- runner: _run_git_command, validate_repository, get_repo_root
- operations: stage_all_changes, get_staged_diff, get_readme_content, commit
"""

# Exceptions
from gitac.git.exceptions import (
    GitError,
    NoStagedChangesError,
)

# Runner utilities
from gitac.git.runner import (
    _run_git_command,
    get_repo_root,
    validate_repository,
)

# Repository operations
from gitac.git.operations import (
    README_CANDIDATES,
    commit,
    get_readme_content,
    get_staged_diff,
    stage_all_changes,
)
