"""
Command-line interface for gh-label-tracker.

This module provides the Typer-based CLI. Every option can also be given
through the ``INPUT_*`` variables GitHub Actions sets for action inputs,
so the same entry point serves local runs and workflow steps.
"""

import logging
import os
from enum import Enum
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import resolve_config
from .exceptions import LabelTrackerError
from .models import PublishAction
from .sync import run_tracker

# Create Typer app
app = typer.Typer(
    name="gh-label-tracker",
    help="Maintain a tracking issue listing every issue with a label",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()
error_console = Console(stderr=True)


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def setup_logging(level: LogLevel, verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    log_level = getattr(logging, level.value.upper())

    if verbose:
        log_level = logging.DEBUG

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def escape_workflow_data(value: str) -> str:
    """Escape a message for a GitHub Actions workflow command."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def report_failure(error: LabelTrackerError) -> None:
    """Report a failed run, as a workflow annotation when inside Actions."""
    if os.environ.get("GITHUB_ACTIONS") == "true":
        message = f"An error occurred: {error}"
        # Printed raw: Rich would treat the brackets in messages as markup
        print(f"::error::{escape_workflow_data(message)}", flush=True)
        return

    error_console.print(f"[red]Error:[/red] {error.message}", highlight=False)
    if error.hint:
        error_console.print(f"[dim]Hint: {error.hint}[/dim]", highlight=False)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"gh-label-tracker version {__version__}")
        raise typer.Exit


@app.command()
def sync(
    label: Annotated[
        str | None,
        typer.Option(
            "--label",
            help="Label whose issues are tracked",
            envvar="INPUT_LABEL",
            show_default=False,
        ),
    ] = None,
    issue_title: Annotated[
        str | None,
        typer.Option(
            "--issue-title",
            help="Exact title of the tracking issue",
            envvar="INPUT_ISSUE_TITLE",
            show_default=False,
        ),
    ] = None,
    token: Annotated[
        str | None,
        typer.Option(
            "--token",
            help="GitHub token (or set GITHUB_TOKEN env var)",
            envvar="INPUT_TOKEN",
            show_default=False,
        ),
    ] = None,
    repo_owner: Annotated[
        str | None,
        typer.Option(
            "--repo-owner",
            help="Repository owner or organization [default: from GITHUB_REPOSITORY]",
            envvar="INPUT_REPO_OWNER",
            show_default=False,
        ),
    ] = None,
    repo_name: Annotated[
        str | None,
        typer.Option(
            "--repo-name",
            help="Repository holding the tracking issue [default: from GITHUB_REPOSITORY]",
            envvar="INPUT_REPO_NAME",
            show_default=False,
        ),
    ] = None,
    org_level: Annotated[
        str | None,
        typer.Option(
            "--org-level",
            help="Track the label across every repository of the owner (true/false)",
            envvar="INPUT_ORG_LEVEL",
            metavar="BOOL",
            show_default=False,
        ),
    ] = None,
    author: Annotated[
        str | None,
        typer.Option(
            "--author",
            help="Author qualifier used to find the tracking issue [default: app/github-actions]",
            envvar="INPUT_AUTHOR",
            show_default=False,
        ),
    ] = None,
    api_url: Annotated[
        str | None,
        typer.Option(
            "--api-url",
            help="GitHub REST API URL [default: GITHUB_API_URL or https://api.github.com]",
            show_default=False,
        ),
    ] = None,
    timeout: Annotated[
        int,
        typer.Option(
            "--timeout",
            help="API timeout in seconds",
            min=10,
            max=300,
        ),
    ] = 60,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Print the new body without creating or updating the issue",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "-v",
            "--verbose",
            help="Enable verbose output",
        ),
    ] = False,
    log_level: Annotated[
        LogLevel,
        typer.Option(
            "--log-level",
            help="Set log level",
        ),
    ] = LogLevel.INFO,
    _version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """
    Create or update the tracking issue for a label.

    The tracking issue is found by its title. Only the section between the
    tracker markers is rewritten; anything else in the body is kept.

    Examples:

        gh-label-tracker --label bug --issue-title "Bug tracker" --repo-owner acme --repo-name app

        gh-label-tracker --label security --issue-title "Security" --repo-owner acme \\
            --repo-name meta --org-level true --dry-run
    """
    setup_logging(log_level, verbose)

    try:
        config = resolve_config(
            label=label,
            issue_title=issue_title,
            token=token,
            repo_owner=repo_owner,
            repo_name=repo_name,
            org_level=org_level,
            author=author,
            api_url=api_url,
            timeout=timeout,
            dry_run=dry_run,
        )

        if config.dry_run:
            console.print("[yellow]Dry run mode - no changes will be written[/yellow]")

        result = run_tracker(config)

    except LabelTrackerError as e:
        report_failure(e)
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130) from None

    # Created/updated notices are logged by the run itself
    if result.action == PublishAction.SKIPPED:
        console.print(result.body, markup=False, highlight=False)
        console.print(result.summary(), markup=False, highlight=False)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
