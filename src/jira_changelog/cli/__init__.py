"""Command-line interface for jira-changelog."""

from __future__ import annotations

from jira_changelog.cli.app import cli, main

__all__ = ["cli", "main"]
