"""Core business logic for jira-changelog.

This module contains the fundamental building blocks:
- Commit range parsing and resolution
- Matching commits to Jira tickets
- Template data and rendering
- Slack delivery
- Pipeline orchestration
"""

from __future__ import annotations

from jira_changelog.core.changelog import (
    ChangelogData,
    ChangelogEntry,
    Jira,
    JiraVersion,
    Ticket,
    find_ticket_keys,
)
from jira_changelog.core.commit_range import RangeSpec, ResolvedRange, parse_range, resolve_range
from jira_changelog.core.delivery import post_to_slack
from jira_changelog.core.options import AUTO_RELEASE, Options
from jira_changelog.core.pipeline import run_changelog, save_changelog
from jira_changelog.core.template import (
    TemplateData,
    decode_entities,
    generate_template_data,
    render_template,
)

__all__ = [
    # Options
    "AUTO_RELEASE",
    # Changelog
    "ChangelogData",
    "ChangelogEntry",
    "Jira",
    "JiraVersion",
    "Options",
    # Range
    "RangeSpec",
    "ResolvedRange",
    # Template
    "TemplateData",
    "Ticket",
    "decode_entities",
    "find_ticket_keys",
    "generate_template_data",
    "parse_range",
    # Delivery
    "post_to_slack",
    "render_template",
    "resolve_range",
    # Pipeline
    "run_changelog",
    "save_changelog",
]
