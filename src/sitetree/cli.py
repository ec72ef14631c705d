"""CLI interface for sitetree.

Command-line tool for building a static site from a Markdown tree.
"""

import logging
import sys
from pathlib import Path

import click

from sitetree.build import build_site
from sitetree.config import Config
from sitetree.errors import SiteError


@click.group()
def cli() -> None:
    """sitetree - static sites from a directory of Markdown pages."""


@cli.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument(
    "content_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    required=False,
)
@click.option(
    "--output",
    "-o",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (overrides config)",
)
@click.option(
    "--template",
    "-t",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Jinja2 page template (overrides config)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and the summary")
@click.option("--strict", is_flag=True, help="Exit with status 1 when any page is skipped")
def build(
    config_path: Path,
    content_dir: Path | None,
    output_dir: Path | None,
    template: Path | None,
    verbose: bool,
    quiet: bool,
    strict: bool,
) -> None:
    """Build the site described by CONFIG_PATH.

    CONTENT_DIR overrides the 'content' key of the configuration.
    """
    _configure_logging(verbose=verbose, quiet=quiet)

    try:
        config = Config.load(config_path).with_overrides(
            content_dir=content_dir,
            output_dir=output_dir,
            template=template,
        )
        report = build_site(config)
    except SiteError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    if report.ok:
        click.echo(click.style(report.summary(), fg="green"))
        return

    click.echo(click.style(report.summary(), fg="yellow"))
    if strict:
        sys.exit(1)


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    """Route library logging to stderr.

    Args:
        verbose: Show debug messages
        quiet: Show warnings and errors only
    """
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


if __name__ == "__main__":
    cli()
