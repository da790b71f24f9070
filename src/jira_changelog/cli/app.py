"""Command-line interface for jira-changelog."""

from __future__ import annotations

from pathlib import Path

import click

from jira_changelog import __version__
from jira_changelog.cli.commands.generate import run_generate
from jira_changelog.core.options import AUTO_RELEASE, Options

# Value click stores when --release is passed without a name
_RELEASE_FLAG_VALUE = "\0auto-release"


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("path", required=False, type=click.Path(path_type=Path, file_okay=False))
@click.option(
    "-c",
    "--config",
    metavar="<filepath>",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Path to the config file.",
)
@click.option(
    "-r",
    "--range",
    "range_",
    metavar="<from>...<to>",
    help="git commit range for changelog",
)
@click.option(
    "-d",
    "--date",
    "date_range",
    metavar="<date>[...date]",
    help="Only include commits after this date",
)
@click.option(
    "-s", "--slack", is_flag=True, help="Automatically post changelog to slack (if configured)"
)
@click.option(
    "--release",
    metavar="[release]",
    is_flag=False,
    flag_value=_RELEASE_FLAG_VALUE,
    default=None,
    help="Assign a release version to these stories",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="jira-changelog")
def cli(
    path: Path | None,
    config: Path | None,
    range_: str | None,
    date_range: str | None,
    slack: bool,
    release: str | None,
    verbose: bool,
) -> None:
    """Generate a changelog by matching git commits to Jira tickets.

    PATH is the git repository, the current directory by default.
    """
    options = Options(
        path=path,
        config=config,
        range_expr=range_,
        date_expr=date_range,
        slack=slack,
        release=AUTO_RELEASE if release == _RELEASE_FLAG_VALUE else release,
        verbose=verbose,
    )
    raise click.exceptions.Exit(run_generate(options))


def main() -> None:
    """Console script entry point."""
    cli()
