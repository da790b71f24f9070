"""Configuration management for jira-changelog."""

from __future__ import annotations

from jira_changelog.config.loader import load_config
from jira_changelog.config.models import (
    ChangelogConfig,
    DefaultRange,
    JiraApiConfig,
    JiraConfig,
    SlackConfig,
    SourceControlConfig,
)

__all__ = [
    "ChangelogConfig",
    "DefaultRange",
    "JiraApiConfig",
    "JiraConfig",
    "SlackConfig",
    "SourceControlConfig",
    "load_config",
]
