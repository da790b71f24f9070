"""The changelog pipeline.

A run goes config -> commit range -> commit logs -> Jira changelog ->
rendered text -> outputs (stdout, file, Slack). Every stage is awaited
before the next one starts, and any failure ends the run with exit code 1.
"""

from __future__ import annotations

import inspect
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from jira_changelog.config import load_config
from jira_changelog.core.changelog import Jira
from jira_changelog.core.commit_range import resolve_range
from jira_changelog.core.delivery import post_to_slack
from jira_changelog.core.template import decode_entities, generate_template_data, render_template
from jira_changelog.exceptions import JiraChangelogError
from jira_changelog.vcs.git import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from jira_changelog.config.models import Hook
    from jira_changelog.core.commit_range import ResolvedRange
    from jira_changelog.core.options import Options

logger = logging.getLogger(__name__)

CHANGELOG_DIR = "changelog"
MISSING_RELEASE_GENERATOR_MESSAGE = (
    "You need to define the jira.generate_release_version_name function in your config, "
    "if you're not going to pass the release version name in the command."
)


async def _generate_release_name(generator: Hook, commit_range: ResolvedRange) -> str:
    name = generator(commit_range)
    if inspect.isawaitable(name):
        name = await name
    return str(name)


def save_changelog(text: str, release: str | None, cwd: Path | None = None) -> Path:
    """Write the changelog to ``changelog/changelog-<release>.md``.

    The current time in epoch milliseconds stands in for a missing release.

    Returns:
        Path of the written file
    """
    directory = (cwd or Path.cwd()) / CHANGELOG_DIR
    directory.mkdir(exist_ok=True)
    suffix = release or str(int(time.time() * 1000))
    path = directory / f"changelog-{suffix}.md"
    path.write_text(text, encoding="utf-8")
    return path


async def _run(options: Options, console: Console) -> None:
    options.parse_expressions()
    git_path = Path(options.path or Path.cwd()).resolve()

    config = load_config(git_path, options.config)
    config.git_path = git_path
    jira = Jira(config)
    repo = GitRepository(git_path)

    commit_range = await resolve_range(config, options, repo)

    release: str | None
    if options.wants_generated_release:
        generator = config.jira.generate_release_version_name
        if generator is None:
            console.print(MISSING_RELEASE_GENERATOR_MESSAGE, markup=False)
            return
        release = await _generate_release_name(generator, commit_range)
        logger.info("Generated release name %s", release)
    else:
        release = options.release  # type: ignore[assignment]

    commit_logs = await repo.get_commit_logs(commit_range)
    changelog = await jira.generate(commit_logs, release)

    data = await generate_template_data(config, changelog, jira.release_versions)
    changelog_message = render_template(config, data)
    decoded = decode_entities(changelog_message)

    console.print(decoded, markup=False, highlight=False, emoji=False, soft_wrap=True)

    if config.save:
        path = save_changelog(decoded, release)
        logger.info("Saved changelog to %s", path)

    if options.slack:
        await post_to_slack(config, data, changelog_message, console=console)


async def run_changelog(options: Options, console: Console, err_console: Console) -> int:
    """Run the changelog pipeline.

    Args:
        options: Parsed command line options
        console: Console for standard output
        err_console: Console for error output

    Returns:
        Process exit code, 0 on success and 1 on any error
    """
    try:
        await _run(options, console)
    except JiraChangelogError as e:
        logger.debug("Changelog run failed", exc_info=True)
        err_console.print(f"[red]Error:[/] {escape(str(e))}", highlight=False)
        return 1
    except Exception:
        err_console.print_exception()
        return 1
    return 0
