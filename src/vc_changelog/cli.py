"""
Command line interface for the vc_changelog tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``git-changelog`` command. It orchestrates
repository detection, configuration and template loading, changelog
generation and output. The changelog is written to standard output;
progress and errors go to standard error.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from vc_changelog import __version__
from vc_changelog.changelog import changelog_from_repository
from vc_changelog.config.loader import ConfigError, load_config, load_template
from vc_changelog.output.renderer import RenderError, check_template, postprocess, render_json, render_template
from vc_changelog.vcs.git_client import GitClient, GitError

# Create a module-level logger. Attach a null handler to avoid logging
# errors when logging is not configured. When logging is configured by
# the CLI, root handlers will be added and messages will propagate.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_RENDER_FAILURE = 7


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(f"⚠ {message}", err=True)


def print_error(message: str) -> None:
    """Print an error message."""
    click.echo(f"✗ {message}", err=True)


def log_level(debug: int) -> int:
    """Map the number of ``--debug`` flags to a logging level."""
    if debug >= 2:
        return logging.DEBUG
    if debug == 1:
        return logging.INFO
    return logging.WARNING


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def detect_repo(start_dir: Path) -> Path:
    """Return the root of the Git repository containing ``start_dir``.

    Raises
    ------
    SystemExit
        With code EXIT_NO_REPO if no repository is found.
    """
    repo_root = GitClient.find_repo_root(start_dir)
    if repo_root is None:
        print_error("Current directory is not inside a Git repository.")
        raise SystemExit(EXIT_NO_REPO)
    logger.info("Found Git repository at: %s", repo_root)
    return repo_root


@click.command()
@click.argument("revision_range", metavar="[RANGE]...", nargs=-1)
@click.option(
    "-c", "--config", "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (default: closest .changelog.yml).",
)
@click.option(
    "-t", "--template", "template_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Jinja2 template file (default: closest .changelog.j2).",
)
@click.option("-j", "--json", "as_json", is_flag=True, help="Render the changelog as JSON.")
@click.option("-d", "--debug", count=True, help="Show progress; repeat for debug output.")
@click.version_option(version=__version__, prog_name="git-changelog")
def main(
    revision_range: Tuple[str, ...],
    config_file: Optional[Path],
    template_file: Optional[Path],
    as_json: bool,
    debug: int,
) -> None:
    """Generate a changelog from tagged lines in commit messages.

    RANGE is passed to ``git log`` as is (e.g. ``v1.0..HEAD``). The
    default is everything since the last tag.
    """
    # Configure logging. Use force=True to ensure handlers are reconfigured
    # on subsequent invocations (important for tests).
    logging.basicConfig(
        level=log_level(debug),
        format="%(levelname)s: %(message)s",
        force=True,
    )

    ctx = click.get_current_context(silent=True)

    try:
        cwd = Path.cwd()

        try:
            repo_root = detect_repo(cwd)
        except SystemExit:
            raise click.exceptions.Exit(EXIT_NO_REPO)

        try:
            config = load_config(config_file, start_dir=cwd)
            as_json = as_json or config.output.json
            template = None
            if not as_json:
                template = load_template(template_file, start_dir=cwd, config=config)
                check_template(template)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
        except RenderError as exc:
            print_error(f"Template error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        try:
            changelog = changelog_from_repository(GitClient(repo_root), config, list(revision_range))
        except GitError as exc:
            print_error(f"VCS error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        if not changelog.commits:
            print_warning(f"No tagged changes found in '{changelog.range}'.")

        try:
            if as_json:
                output = render_json(changelog)
            else:
                output = render_template(template, changelog)
        except RenderError as exc:
            print_error(f"Render error: {exc}")
            raise click.exceptions.Exit(EXIT_RENDER_FAILURE)

        if config.output.post_processors:
            output = postprocess(config.output.post_processors, output)

        click.echo(output)
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        # Catch any other unhandled errors
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
