"""Changelog template data and rendering.

Templates are Jinja2 with autoescaping enabled, so values are HTML-escaped
on the way in; callers decode the rendered text with ``decode_entities``
before printing or saving it.
"""

from __future__ import annotations

import html
import inspect
from collections import defaultdict
from dataclasses import dataclass, field, fields, is_dataclass
from typing import TYPE_CHECKING, Any

import jinja2

from jira_changelog.exceptions import TemplateError

if TYPE_CHECKING:
    from jira_changelog.config.models import ChangelogConfig
    from jira_changelog.core.changelog import ChangelogData, JiraVersion, Ticket
    from jira_changelog.vcs.git import Commit

DEFAULT_TEMPLATE_NAME = "changelog.md.j2"
UNASSIGNED = "Unassigned"


@dataclass(slots=True)
class TicketGroups:
    all: list[Ticket] = field(default_factory=list)
    approved: list[Ticket] = field(default_factory=list)
    pending: list[Ticket] = field(default_factory=list)
    by_type: dict[str, list[Ticket]] = field(default_factory=dict)


@dataclass(slots=True)
class CommitGroups:
    all: list[Commit] = field(default_factory=list)
    tickets: list[Commit] = field(default_factory=list)
    no_tickets: list[Commit] = field(default_factory=list)


@dataclass(slots=True)
class OwnerTickets:
    owner: str
    tickets: list[Ticket] = field(default_factory=list)


@dataclass(slots=True)
class TemplateData:
    """Variables available to the changelog template."""

    jira_base_url: str | None
    release: str | None
    release_versions: list[JiraVersion]
    tickets: TicketGroups
    commits: CommitGroups
    pending_by_owner: list[OwnerTickets]
    hide_empty_blocks: bool = False


async def generate_template_data(
    config: ChangelogConfig,
    changelog: ChangelogData,
    release_versions: list[JiraVersion],
) -> Any:
    """Group changelog tickets and commits for the template.

    Tickets whose status is one of ``jira.approval_statuses`` are approved,
    the rest are pending and grouped by assignee. If ``transform_data`` is
    configured, its (possibly awaitable) result replaces the data.

    Args:
        config: Run configuration
        changelog: Output of the Jira changelog generation
        release_versions: Jira versions assigned during generation

    Returns:
        TemplateData, or whatever ``transform_data`` returned
    """
    approval = set(config.jira.approval_statuses)
    tickets = TicketGroups()
    commits = CommitGroups()
    by_owner: dict[str, list[Ticket]] = defaultdict(list)
    by_type: dict[str, list[Ticket]] = defaultdict(list)
    seen: set[str] = set()

    for entry in changelog.entries:
        commits.all.append(entry.commit)
        if not entry.tickets:
            commits.no_tickets.append(entry.commit)
            continue

        commits.tickets.append(entry.commit)
        for ticket in entry.tickets:
            if ticket.key in seen:
                continue
            seen.add(ticket.key)
            tickets.all.append(ticket)
            if ticket.status in approval:
                tickets.approved.append(ticket)
                by_type[ticket.issue_type].append(ticket)
            else:
                tickets.pending.append(ticket)
                by_owner[ticket.assignee or UNASSIGNED].append(ticket)

    tickets.by_type = dict(by_type)
    data: Any = TemplateData(
        jira_base_url=config.jira.effective_base_url,
        release=changelog.release,
        release_versions=release_versions,
        tickets=tickets,
        commits=commits,
        pending_by_owner=[OwnerTickets(owner, owned) for owner, owned in by_owner.items()],
        hide_empty_blocks=config.hide_empty_blocks,
    )

    if config.transform_data is not None:
        data = config.transform_data(data)
        if inspect.isawaitable(data):
            data = await data
    return data


def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.PackageLoader("jira_changelog", "templates"),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )


def _context(data: Any) -> dict[str, Any]:
    if isinstance(data, dict):
        return data
    if is_dataclass(data):
        return {f.name: getattr(data, f.name) for f in fields(data)}
    return {"data": data}


def render_template(config: ChangelogConfig, data: Any) -> str:
    """Render the changelog template.

    Uses ``config.template`` when set, the packaged default otherwise.

    Raises:
        TemplateError: If the template is invalid or fails to render
    """
    env = _environment()
    try:
        if config.template is not None:
            template = env.from_string(config.template)
        else:
            template = env.get_template(DEFAULT_TEMPLATE_NAME)
        return template.render(_context(data))
    except jinja2.TemplateError as e:
        raise TemplateError(f"Error rendering changelog template: {e}") from e


def decode_entities(text: str) -> str:
    """Decode HTML entities produced by template autoescaping."""
    return html.unescape(text)
