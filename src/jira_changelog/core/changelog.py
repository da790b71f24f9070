"""Changelog generation from commits and Jira tickets.

Commit messages are scanned for ticket keys (``PROJ-123``). Each ticket is
fetched once from Jira and attached to the commits that reference it. When
a release name is given, the matching Jira version is found or created in
every ticket's project and added to the ticket's fix versions.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from jira_changelog.clients.jira import JiraClient

if TYPE_CHECKING:
    from jira_changelog.config.models import ChangelogConfig
    from jira_changelog.vcs.git import Commit

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JiraVersion:
    """A Jira project version (release)."""

    id: str
    name: str
    project_key: str
    released: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any], project_key: str) -> JiraVersion:
        return cls(
            id=str(payload.get("id", "")),
            name=payload["name"],
            project_key=project_key,
            released=bool(payload.get("released", False)),
        )


@dataclass(slots=True)
class Ticket:
    """A Jira ticket referenced by one or more commits."""

    key: str
    summary: str
    issue_type: str
    status: str
    project_key: str
    url: str | None = None
    assignee: str | None = None
    reporter: str | None = None
    fix_versions: list[str] = field(default_factory=list)
    commits: list[Commit] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], base_url: str | None = None) -> Ticket:
        """Build a ticket from a Jira issue payload.

        Args:
            payload: JSON body of ``GET /rest/api/2/issue/{key}``
            base_url: Jira base URL used to build the browse link
        """
        fields = payload.get("fields", {})
        key = payload["key"]

        def _name(value: dict[str, Any] | None, attr: str = "name") -> str | None:
            return value.get(attr) if value else None

        return cls(
            key=key,
            summary=fields.get("summary", ""),
            issue_type=_name(fields.get("issuetype")) or "Other",
            status=_name(fields.get("status")) or "Unknown",
            project_key=_name(fields.get("project"), "key") or key.split("-", 1)[0],
            url=f"{base_url}/browse/{key}" if base_url else None,
            assignee=_name(fields.get("assignee"), "displayName"),
            reporter=_name(fields.get("reporter"), "displayName"),
            fix_versions=[v["name"] for v in fields.get("fixVersions") or []],
        )


@dataclass(slots=True)
class ChangelogEntry:
    """A commit together with the tickets it references."""

    commit: Commit
    tickets: list[Ticket] = field(default_factory=list)


@dataclass(slots=True)
class ChangelogData:
    """Result of matching a commit range against Jira."""

    entries: list[ChangelogEntry] = field(default_factory=list)
    release: str | None = None


def find_ticket_keys(message: str, pattern: str) -> list[str]:
    """Find ticket keys in a commit message.

    Args:
        message: Commit message
        pattern: Regex whose first group (or whole match) is the ticket key

    Returns:
        Unique, upper-cased keys in order of appearance
    """
    keys: list[str] = []
    for match in re.finditer(pattern, message, re.IGNORECASE):
        key = (match.group(1) if match.groups() else match.group(0)).upper()
        if key not in keys:
            keys.append(key)
    return keys


class Jira:
    """Matches commits to Jira tickets and manages release versions."""

    def __init__(
        self,
        config: ChangelogConfig,
        client_factory: Callable[[], JiraClient] | None = None,
    ) -> None:
        self.config = config
        self.release_versions: list[JiraVersion] = []
        self._client_factory = client_factory or (lambda: JiraClient(config.jira.api))

    def _is_included(self, ticket: Ticket) -> bool:
        jira = self.config.jira
        if jira.include_issue_types and ticket.issue_type not in jira.include_issue_types:
            return False
        return ticket.issue_type not in jira.exclude_issue_types

    async def generate(self, commits: list[Commit], release: str | None = None) -> ChangelogData:
        """Attach Jira tickets to commits.

        Args:
            commits: Commits in the changelog range
            release: Optional release name to assign to the tickets

        Returns:
            Changelog data with one entry per commit

        Raises:
            JiraError: If a Jira request fails
        """
        pattern = self.config.jira.ticket_id_pattern
        keys_by_commit = [(commit, find_ticket_keys(commit.message, pattern)) for commit in commits]
        all_keys = list(dict.fromkeys(key for _, keys in keys_by_commit for key in keys))

        tickets: dict[str, Ticket] = {}
        if all_keys and not self.config.jira.api.host:
            logger.warning(
                "Found %d ticket references but Jira is not configured; skipping lookup",
                len(all_keys),
            )
        elif all_keys:
            async with self._client_factory() as client:
                tickets = await self._fetch_tickets(client, all_keys)
                if release:
                    await self._assign_release(client, list(tickets.values()), release)

        entries: list[ChangelogEntry] = []
        for commit, keys in keys_by_commit:
            matched = [tickets[key] for key in keys if key in tickets]
            for ticket in matched:
                ticket.commits.append(commit)
            entries.append(ChangelogEntry(commit=commit, tickets=matched))

        return ChangelogData(entries=entries, release=release)

    async def _fetch_tickets(self, client: JiraClient, keys: list[str]) -> dict[str, Ticket]:
        base_url = self.config.jira.effective_base_url
        tickets: dict[str, Ticket] = {}
        for key in keys:
            payload = await client.get_issue(key)
            if payload is None:
                continue
            ticket = Ticket.from_payload(payload, base_url)
            if self._is_included(ticket):
                tickets[key] = ticket
            else:
                logger.debug("Skipping %s (issue type %s)", key, ticket.issue_type)
        return tickets

    async def _assign_release(self, client: JiraClient, tickets: list[Ticket], release: str) -> None:
        projects = list(dict.fromkeys(ticket.project_key for ticket in tickets))
        for project_key in projects:
            self.release_versions.append(
                await self.find_or_create_version(client, project_key, release)
            )

        for ticket in tickets:
            if release in ticket.fix_versions:
                continue
            await client.add_fix_version(ticket.key, release)
            ticket.fix_versions.append(release)

    async def find_or_create_version(
        self, client: JiraClient, project_key: str, name: str
    ) -> JiraVersion:
        """Find a project version by name, creating it when missing."""
        for payload in await client.get_project_versions(project_key):
            if payload.get("name") == name:
                return JiraVersion.from_payload(payload, project_key)
        return JiraVersion.from_payload(
            await client.create_version(project_key, name), project_key
        )
