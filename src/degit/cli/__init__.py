"""CLI entry point: `degit SRC [DEST]`."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from degit import __version__
from degit.core.env import load_user_env
from degit.core.errors import DegitError, DestinationError, ParseError
from degit.core.models import ResolvedSource
from degit.core.paths import validate_destination
from degit.core.source import parse

load_user_env()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _validate_src(ctx: click.Context, param: click.Parameter, value: str) -> str:
    try:
        parse(value)
    except ParseError as exc:
        raise click.BadParameter(str(exc)) from exc
    return value


def _validate_dest(ctx: click.Context, param: click.Parameter, value: str) -> Path:
    try:
        return validate_destination(value)
    except DestinationError as exc:
        raise click.BadParameter(str(exc)) from exc


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("src", callback=_validate_src)
@click.argument("dest", required=False, default=".", callback=_validate_dest)
@click.option("-v", "--verbose", count=True, help="Sets the level of verbosity.")
@click.version_option(__version__, prog_name="degit")
def cli(src: str, dest: Path, verbose: int) -> None:
    """Download the contents of a git repository without cloning it.

    SRC is the repository to download. It can take any of these forms:

    \b
    GitHub:
      user/repo
      github:user/repo
      https://github.com/user/repo
    \b
    GitLab:
      gitlab:user/repo
      https://gitlab.com/user/repo
      git@gitlab.example.org:user/repo.git
    \b
    BitBucket:
      bitbucket:user/repo
      https://bitbucket.org/user/repo

    \b
    Append a path to download a subdirectory only:
      user/repo/subdirectory
    \b
    Pick a branch (defaults to HEAD), tag, or commit:
      user/repo#branch
      user/repo#v1.0.0
      user/repo#abcd1234

    DEST is the destination directory (default: current directory). It must
    not exist yet, or be empty.
    """
    from degit.cli.ui import describe, transfer_progress
    from degit.services import download

    _configure_logging(verbose)

    def _on_start(source: ResolvedSource, target: Path) -> None:
        click.echo(f"Downloading {describe(source.identity)} to {target}")

    try:
        download.degit(src, dest, progress=transfer_progress, on_start=_on_start)
    except DegitError as exc:
        logger.debug("degit failed", exc_info=True)
        raise click.ClickException(str(exc)) from exc
    except KeyboardInterrupt:
        click.echo("\nAborted.", err=True)
        sys.exit(130)
