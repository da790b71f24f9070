"""jira-changelog: generate release changelogs from git commits and Jira tickets."""

from __future__ import annotations

__version__ = "2.2.2"
