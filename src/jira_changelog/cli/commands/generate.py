"""Implementation of the changelog command.

Sets up output consoles and logging, then runs the async pipeline.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

from jira_changelog.core.pipeline import run_changelog

if TYPE_CHECKING:
    from jira_changelog.core.options import Options


def configure_logging(verbose: bool, console: Console) -> None:
    """Send package logs to the error console."""
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    logger = logging.getLogger("jira_changelog")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def run_generate(
    options: Options,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    """Run the changelog command.

    Args:
        options: Parsed command line options
        console: Console for standard output
        err_console: Console for error output

    Returns:
        Process exit code
    """
    console = console or Console()
    err_console = err_console or Console(stderr=True)
    configure_logging(options.verbose, err_console)
    return asyncio.run(run_changelog(options, console, err_console))
