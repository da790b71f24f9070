"""Version control access for jira-changelog."""

from __future__ import annotations

from jira_changelog.vcs.git import Commit, GitRepository

__all__ = ["Commit", "GitRepository"]
