"""
Command-line interface for the content manager.
"""

import json
import logging
import traceback
from pathlib import Path
from typing import Optional

import click
import yaml

from . import __version__
from .config import AppConfig, ConfigManager
from .error_handling import ConfigurationError, ContentManagerError
from .logging import LoggerConfig, setup_logging
from .models import CommitResult
from .orchestrator import ContentManager
from .repository import ContentRepository, GitHubClient, sidecar_path

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option(
    '--config', '-c', 'config_file',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML configuration file'
)
@click.option(
    '--verbose', '-v',
    count=True,
    help='Increase verbosity (use -v or -vv)'
)
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[Path], verbose: int) -> None:
    """
    Content Manager - checkout, update, and checkin files to GitHub Pages.

    The repository is taken from GITHUB_OWNER and GITHUB_REPO, and
    GITHUB_TOKEN must hold a token with write access to it.
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    try:
        config = ConfigManager(config_file).load_config()
    except ConfigurationError as e:
        fail(ctx, e)

    setup_logging(LoggerConfig.from_app_config(config.logging, verbose))
    ctx.obj['config'] = config


def create_repository(config: AppConfig) -> ContentRepository:
    """Build the GitHub client for the configured repository."""
    config.require_token()
    return GitHubClient(config.github)


def get_manager(ctx: click.Context) -> ContentManager:
    """
    Build the ContentManager for a remote command, or exit 1 when no token
    is configured.
    """
    config: AppConfig = ctx.obj['config']
    try:
        repository = create_repository(config)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("Set it with: export GITHUB_TOKEN=your_token", err=True)
        ctx.exit(1)

    return ContentManager(
        repository,
        default_branch=config.github.default_branch,
        reporter=click.echo
    )


def fail(ctx: click.Context, error: Exception) -> None:
    """Print the error and exit with status 1."""
    if isinstance(error, ContentManagerError):
        logger.debug(error.describe())
    click.echo(f"Error: {error}", err=True)
    if ctx.obj and ctx.obj.get('verbose', 0) > 1:
        traceback.print_exc()
    ctx.exit(1)


def echo_commit(result: CommitResult) -> None:
    click.echo("✓ File committed successfully")
    click.echo(f"  Commit: {result.short_sha}")
    click.echo(f"  URL: {result.url}")
    click.echo("\n✓ GitHub Pages will update shortly")


@cli.command()
@click.argument('file')
@click.option('--branch', '-b', help='Branch to checkout from (defaults to the configured branch)')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Local path to save the file')
@click.pass_context
def checkout(ctx: click.Context, file: str, branch: Optional[str], output: Optional[Path]) -> None:
    """Checkout a file from the repository."""
    manager = get_manager(ctx)
    try:
        outcome = manager.checkout(file, branch=branch, output=output)
    except (ContentManagerError, OSError) as e:
        fail(ctx, e)

    click.echo(f"✓ File saved to: {outcome.content_path}")
    click.echo(f"✓ Metadata saved to: {outcome.metadata_path}")
    click.echo(f"  SHA: {outcome.file.sha}")


@cli.command()
@click.argument('file', type=click.Path(path_type=Path))
@click.option('--message', '-m', default='Update content', show_default=True, help='Commit message')
@click.option('--branch', '-b', help='Branch to commit to (defaults to the branch it was checked out from)')
@click.pass_context
def checkin(ctx: click.Context, file: Path, message: str, branch: Optional[str]) -> None:
    """Check in a modified file to the repository."""
    manager = get_manager(ctx)
    try:
        outcome = manager.checkin(file, message=message, branch=branch)
    except (ContentManagerError, OSError) as e:
        fail(ctx, e)

    echo_commit(outcome.commit)


@cli.command()
@click.argument('file', type=click.Path(path_type=Path))
@click.option('--path', '-p', 'remote_path', help='Repository path to create (defaults to the file name)')
@click.option('--message', '-m', default='Create content', show_default=True, help='Commit message')
@click.option('--branch', '-b', help='Branch to commit to (defaults to the configured branch)')
@click.pass_context
def create(ctx: click.Context, file: Path, remote_path: Optional[str], message: str, branch: Optional[str]) -> None:
    """Create a new file in the repository from a local file."""
    manager = get_manager(ctx)
    try:
        outcome = manager.create(file, remote_path=remote_path, message=message, branch=branch)
    except (ContentManagerError, OSError) as e:
        fail(ctx, e)

    echo_commit(outcome.commit)
    click.echo(f"✓ Metadata saved to: {sidecar_path(file)}")


@cli.command()
@click.argument('file')
@click.option('--branch', '-b', help='Branch to use (defaults to the configured branch)')
@click.option('--message', '-m', default='Update content', show_default=True, help='Commit message')
@click.option('--find', help='Text to find')
@click.option('--replace', help='Text to replace with')
@click.option('--append', help='Text to append')
@click.option('--prepend', help='Text to prepend')
@click.pass_context
def update(
    ctx: click.Context,
    file: str,
    branch: Optional[str],
    message: str,
    find: Optional[str],
    replace: Optional[str],
    append: Optional[str],
    prepend: Optional[str]
) -> None:
    """
    Checkout, apply updates, and checkin in one command.

    Edits run in order: find/replace, append, prepend.

    Examples:

        content-manager update index.html --find "2023" --replace "2024"

        content-manager update notes.md --append "\\n- new entry" -m "Add entry"
    """
    if (find is None) != (replace is None):
        raise click.UsageError("--find and --replace must be given together")

    manager = get_manager(ctx)
    try:
        outcome = manager.update(
            file, branch=branch, message=message,
            find=find, replace=replace, append=append, prepend=prepend
        )
    except (ContentManagerError, OSError) as e:
        fail(ctx, e)

    if outcome.commit is None:
        click.echo("No modifications made. Skipping checkin.")
        return

    echo_commit(outcome.commit)


@cli.command(name='list')
@click.argument('directory', default='')
@click.option('--branch', '-b', help='Branch to list from (defaults to the configured branch)')
@click.pass_context
def list_files(ctx: click.Context, directory: str, branch: Optional[str]) -> None:
    """List files in the repository."""
    manager = get_manager(ctx)
    try:
        files = manager.list(directory, branch=branch)
    except (ContentManagerError, OSError) as e:
        fail(ctx, e)

    click.echo(f"Files in {directory or 'root'}:")
    for path in files:
        click.echo(f"  {path}")


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show repository information."""
    manager = get_manager(ctx)
    try:
        repo_info = manager.info()
    except (ContentManagerError, OSError) as e:
        fail(ctx, e)

    click.echo(f"Repository: {repo_info.full_name}")
    click.echo(f"Default branch: {repo_info.default_branch}")


@cli.command(name='config')
@click.option(
    '--format', '-f', 'output_format',
    type=click.Choice(['table', 'json', 'yaml'], case_sensitive=False),
    default='table',
    help='Output format for configuration display'
)
@click.pass_context
def show_config(ctx: click.Context, output_format: str) -> None:
    """
    Display current configuration settings.

    Shows defaults merged with the configuration file and environment
    variable overrides. The token is masked.
    """
    config_dict = ctx.obj['config'].to_dict()

    if output_format == 'json':
        click.echo(json.dumps(config_dict, indent=2, default=str))
    elif output_format == 'yaml':
        click.echo(yaml.safe_dump(config_dict, default_flow_style=False), nl=False)
    else:
        display_config_table(config_dict)


def display_config_table(config_dict: dict) -> None:
    """Display configuration in table format."""
    click.echo("Current Configuration:")
    click.echo("-" * 50)

    for section_name, section in config_dict.items():
        click.echo(f"\n[{section_name}]")
        for key, value in section.items():
            click.echo(f"  {key}: {value}")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
