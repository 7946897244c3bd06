"""
release-bot command line.

Commands:
  releasebot serve                         - run the webhook server
  releasebot transfer-cards SOURCE DEST    - move cards to the next release board
  releasebot create-project NAME           - create and provision a release board
"""

from __future__ import annotations

import logging
from dataclasses import replace

import click

from releasebot import __version__
from releasebot.config import DEFAULT_SERVER_LOG_DIR, ReleaseBotConfig
from releasebot.logging import setup_logging
from releasebot.migration import MigrationError
from releasebot.reconciler import ReconcilerError, RetryPolicy
from releasebot.resolver import ResolverError
from releasebot.tracker import Repository, TrackerClient, TrackerError

logger = logging.getLogger("releasebot.cli")

# Failures that end a batch command with a non-zero exit status
_FATAL_ERRORS = (ResolverError, ReconcilerError, MigrationError, TrackerError)


def _retry_policy(config: ReleaseBotConfig) -> RetryPolicy:
    return RetryPolicy(retries=config.provisioning_retries, interval=config.provisioning_interval)


@click.group()
@click.version_option(__version__, prog_name="releasebot")
def cli() -> None:
    """Keep release project boards and stage labels in sync."""


@cli.command("serve")
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind.")
@click.option("--port", default=8080, show_default=True, type=int, help="Port to bind.")
@click.option("--debug", is_flag=True, default=False, help="Toggle debug mode.")
def serve(host: str, port: int, debug: bool) -> None:
    """Run the webhook server."""
    import uvicorn

    from releasebot.api import create_app

    config = ReleaseBotConfig.from_env()
    if debug:
        config = replace(config, debug=True)
    setup_logging(config.log_level, config.log_dir or DEFAULT_SERVER_LOG_DIR)
    logger.info("Starting release-bot on port %d", port)
    uvicorn.run(create_app(config), host=host, port=port, log_level=config.log_level.lower())


@cli.command("transfer-cards")
@click.argument("source_project")
@click.argument("destination_project")
@click.option("--dry-run", is_flag=True, default=False, help="Don't make any changes upstream.")
@click.option(
    "-c",
    "--columns",
    default="Triage,Cherry Pick",
    show_default=True,
    help="Columns to pull from, comma separated.",
)
@click.option(
    "-r",
    "--repo-name",
    default="staging-release-tracking",
    show_default=True,
    help="Name of the repository to point to.",
)
@click.option(
    "-o",
    "--repo-owner",
    default="docker",
    show_default=True,
    help="Owner of the repository to point to.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="See debug statements.")
def transfer_cards_cmd(
    source_project: str,
    destination_project: str,
    dry_run: bool,
    columns: str,
    repo_name: str,
    repo_owner: str,
    verbose: bool,
) -> None:
    """Move cards from SOURCE_PROJECT to DESTINATION_PROJECT, p0 issues first."""
    from releasebot.tools import transfer_cards

    config = ReleaseBotConfig.from_env()
    setup_logging("DEBUG" if verbose or config.debug else "INFO", config.log_dir or None)

    column_names = [name.strip() for name in columns.split(",") if name.strip()]
    repo = Repository(owner=repo_owner, name=repo_name)
    tracker = TrackerClient(token=config.github_token, base_url=config.api_url)
    try:
        transfer_cards(
            tracker,
            repo,
            source_project,
            destination_project,
            column_names,
            dry_run=dry_run,
            policy=_retry_policy(config),
        )
    except _FATAL_ERRORS as e:
        logger.error("%s", e)
        raise click.ClickException(str(e)) from e
    finally:
        tracker.close()


@cli.command("create-project")
@click.argument("project_name")
@click.option(
    "-r",
    "--repo",
    "repo_name",
    default="staging-release-tracking",
    show_default=True,
    help="Name of the repo to point to.",
)
@click.option(
    "-o", "--owner", "repo_owner", default="docker", show_default=True, help="Owner of the repo."
)
@click.option(
    "--provision/--wait-for-bot",
    default=True,
    show_default=True,
    help="Create columns and labels here, or wait for a running release-bot to do it.",
)
def create_project_cmd(project_name: str, repo_name: str, repo_owner: str, provision: bool) -> None:
    """Create release project PROJECT_NAME, e.g. 17.06.1-ce-rc4."""
    from releasebot.tools import create_project

    config = ReleaseBotConfig.from_env()
    setup_logging(config.log_level, config.log_dir or None)

    repo = Repository(owner=repo_owner, name=repo_name)
    tracker = TrackerClient(token=config.github_token, base_url=config.api_url)
    try:
        board, _ = create_project(
            tracker, repo, project_name, provision=provision, policy=_retry_policy(config)
        )
    except _FATAL_ERRORS as e:
        logger.error("%s", e)
        raise click.ClickException(str(e)) from e
    finally:
        tracker.close()

    click.echo(f"Created project {board.name} ({board.url or board.id})")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
