"""HTTP clients for Jira and Slack."""

from __future__ import annotations

from jira_changelog.clients.jira import JiraClient
from jira_changelog.clients.slack import SlackClient

__all__ = ["JiraClient", "SlackClient"]
