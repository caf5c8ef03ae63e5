"""Interactive editing of the generated commit message."""

import logging
import os
import shlex
import shutil
import subprocess
import tempfile

logger = logging.getLogger(__name__)

FALLBACK_EDITORS = ["nano", "vim", "vi", "emacs"]


class EditorError(Exception):
    """Raised when the message cannot be edited."""

    pass


def find_editor() -> list[str] | None:
    """Find an available text editor.

    Preference order:
    1. $EDITOR environment variable
    2. $VISUAL environment variable
    3. The first of nano, vim, vi, emacs found on PATH

    Returns:
        List of command parts to run the editor, or None if none is found.
    """
    for var in ("EDITOR", "VISUAL"):
        command = os.environ.get(var, "").strip()
        if command:
            return shlex.split(command)

    for editor in FALLBACK_EDITORS:
        # noinspection PyArgumentList
        if shutil.which(editor):
            return [editor]

    return None


def edit_message(initial: str) -> str:
    """Open the message in an editor and return the edited text.

    Args:
        initial: The message to start from.

    Returns:
        The edited message, stripped of surrounding whitespace.

    Raises:
        EditorError: If no editor is found, the editor fails, or the result
            is empty.
    """
    editor_cmd = find_editor()
    if not editor_cmd:
        raise EditorError("no editor found - set $EDITOR environment variable")

    fd, path = tempfile.mkstemp(prefix="git-ac-edit-", suffix=".txt")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(initial)

        logger.debug("Opening editor: %s", " ".join(editor_cmd))
        try:
            subprocess.run(editor_cmd + [path], check=True)
        except FileNotFoundError as e:
            raise EditorError(f"editor not found: {editor_cmd[0]}") from e
        except subprocess.CalledProcessError as e:
            raise EditorError(f"editor exited with code {e.returncode}") from e

        with open(path, "r", encoding="utf-8") as f:
            edited = f.read().strip()
    finally:
        os.unlink(path)

    if not edited:
        raise EditorError("commit message cannot be empty")
    return edited
