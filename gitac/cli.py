"""CLI entry point for git-ac."""

import logging
from pathlib import Path
from typing import Optional

import typer

from gitac import __version__
from gitac.config import ConfigError, format_duration, load_config
from gitac.editor import EditorError, edit_message
from gitac.git import (
    GitError,
    NoStagedChangesError,
    commit,
    get_readme_content,
    get_repo_root,
    get_staged_diff,
    stage_all_changes,
    validate_repository,
)
from gitac.llm import LLMError, get_provider
from gitac.llm.triage import is_oversized
from gitac.logging_config import configure_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="git-ac",
    help="git-ac: AI-powered conventional commit messages for staged changes",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.command()
def main(
    all_changes: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Stage modified tracked files before generating the commit message",
    ),
    edit: bool = typer.Option(
        False,
        "--edit",
        "-e",
        help="Edit the generated commit message in $EDITOR before committing",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to the config file (default: ~/.config/git-ac.yaml)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Show debug logging on stderr",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print the generated message without committing",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Generate a commit message for the staged changes and commit them."""
    configure_logging(debug)

    try:
        # Step 1: Load configuration
        config = load_config(config_path)
        logger.debug(
            "Using provider %s with model %s", config.provider.type.value, config.model
        )

        # Step 2: Make sure we're inside a repository
        validate_repository()

        # Step 3: Optionally stage tracked modifications
        if all_changes:
            stage_all_changes()

        # Step 4: Get the staged diff
        diff = get_staged_diff()
        if not diff.strip():
            if all_changes:
                raise NoStagedChangesError("no changes to stage")
            raise NoStagedChangesError(
                "no staged changes found (use -a to stage modified files)"
            )

        # Step 5: README for project context
        readme = get_readme_content(get_repo_root())

        # Step 6: Generate the message
        typer.secho(
            f"Generating commit message using model {config.model} "
            f"(timeout: {format_duration(config.provider.timeout)})...",
            dim=True,
            err=True,
        )
        if is_oversized(diff, config.provider.context_window):
            typer.echo("Large diff detected, using two-stage approach...", err=True)

        with get_provider(config) as provider:
            message = provider.generate_commit_message(diff, readme)

        # Step 7: Optionally edit
        if edit:
            message = edit_message(message)

        if dry_run:
            typer.echo(message)
            return

        # Step 8: Commit
        commit(message)

    except (ConfigError, GitError, LLMError, EditorError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Successfully committed with message:\n{message}")


if __name__ == "__main__":
    app()
