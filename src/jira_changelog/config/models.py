"""Configuration models for jira-changelog.

Configuration comes from a Python config module, a TOML file, or the
``[tool.jira-changelog]`` table in pyproject.toml. Hook functions (release
name generation, data and Slack message transforms) can only be supplied
from a Python config module.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TICKET_ID_PATTERN = r"\[?([A-Z][A-Z0-9]+-[0-9]+)\]?"

Hook = Callable[..., Any]


def _env(name: str) -> Callable[[], str | None]:
    return lambda: os.environ.get(name) or None


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class JiraApiConfig(_Model):
    """Jira REST API connection settings."""

    host: str | None = Field(default_factory=_env("JIRA_HOST"))
    email: str | None = Field(default_factory=_env("JIRA_EMAIL"))
    token: str | None = Field(default_factory=_env("JIRA_API_TOKEN"))


class JiraConfig(_Model):
    """Jira ticket matching and release settings."""

    api: JiraApiConfig = Field(default_factory=JiraApiConfig)
    base_url: str | None = None
    ticket_id_pattern: str = DEFAULT_TICKET_ID_PATTERN
    approval_statuses: list[str] = Field(default_factory=lambda: ["Done", "Closed", "Accepted"])
    exclude_issue_types: list[str] = Field(default_factory=lambda: ["Sub-task"])
    include_issue_types: list[str] = Field(default_factory=list)
    generate_release_version_name: Hook | None = None

    @property
    def effective_base_url(self) -> str | None:
        """Browse URL for tickets, falling back to the API host."""
        url = self.base_url or self.api.host
        if url and not url.startswith(("http://", "https://")):
            url = f"https://{url}"
        return url.rstrip("/") if url else None


class SlackConfig(_Model):
    """Slack delivery settings."""

    api_key: str | None = Field(default_factory=_env("SLACK_API_KEY"))
    channel: str | None = None
    username: str | None = "Release Bot"
    icon_emoji: str | None = ":clipboard:"
    api_url: str = "https://slack.com/api"


class DefaultRange(_Model):
    """Commit range used when none is passed on the command line."""

    from_ref: str | None = Field(default=None, alias="from")
    to_ref: str | None = Field(default=None, alias="to")
    symmetric: bool | None = None

    def as_range_dict(self) -> dict[str, Any]:
        """Return only the keys that are set, named as in a resolved range."""
        values = {"from": self.from_ref, "to": self.to_ref, "symmetric": self.symmetric}
        return {key: value for key, value in values.items() if value is not None}


class SourceControlConfig(_Model):
    """Source control settings."""

    default_range: DefaultRange = Field(default_factory=DefaultRange)


class ChangelogConfig(_Model):
    """Root configuration for a changelog run."""

    jira: JiraConfig = Field(default_factory=JiraConfig)
    slack: SlackConfig = Field(default_factory=SlackConfig)
    source_control: SourceControlConfig = Field(default_factory=SourceControlConfig)
    save: bool = False
    hide_empty_blocks: bool = False
    template: str | None = None
    transform_data: Hook | None = None
    transform_for_slack: Hook | None = None
    git_path: Path | None = None
