"""Shared fixtures for jira-changelog tests."""

from __future__ import annotations

import os
import shutil
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from jira_changelog.vcs.git import Commit, GitRepository


def make_commit(sha: str, message: str, author: str = "Test") -> Commit:
    return Commit(
        sha=sha,
        message=message,
        author_name=author,
        author_email=f"{author.lower()}@test.com",
        date=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def issue_payload(
    key: str,
    summary: str = "Ticket summary",
    issue_type: str = "Story",
    status: str = "Done",
    assignee: str | None = "Alice",
) -> dict:
    return {
        "key": key,
        "fields": {
            "summary": summary,
            "issuetype": {"name": issue_type},
            "status": {"name": status},
            "project": {"key": key.split("-")[0]},
            "assignee": {"displayName": assignee} if assignee else None,
            "reporter": {"displayName": "Bob"},
            "fixVersions": [],
        },
    }


@pytest.fixture
def sample_commits() -> list[Commit]:
    """Commits with and without ticket references."""
    return [
        make_commit("aaa1111", "PROJ-1: add login page"),
        make_commit("bbb2222", "[PROJ-2] fix crash on save\n\nAlso touches PROJ-1"),
        make_commit("ccc3333", "bump dependencies", author="Carol"),
    ]


@pytest.fixture
def mock_repo(tmp_path: Path) -> MagicMock:
    """A GitRepository with async methods mocked out."""
    repo = MagicMock(spec=GitRepository)
    repo.path = tmp_path
    repo.list_tags = AsyncMock(return_value=["v1", "v2", "v3"])
    repo.get_commit_logs = AsyncMock(return_value=[])
    return repo


def _git(path: Path, *args: str) -> None:
    subprocess.run(
        ["git", *args],
        cwd=path,
        check=True,
        capture_output=True,
        env={
            "GIT_AUTHOR_NAME": "Test",
            "GIT_AUTHOR_EMAIL": "test@test.com",
            "GIT_COMMITTER_NAME": "Test",
            "GIT_COMMITTER_EMAIL": "test@test.com",
            "HOME": str(path),
            "PATH": os.environ.get("PATH", ""),
        },
    )


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> Path:
    """A real git repository with three tagged commits."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    for index, message in enumerate(
        ["PROJ-1: first feature", "PROJ-2: second feature", "plain commit"], start=1
    ):
        (repo / f"file{index}.txt").write_text(message)
        _git(repo, "add", ".")
        _git(repo, "commit", "-q", "-m", message, "--date", f"2024-01-0{index}T12:00:00")
        _git(repo, "tag", "-a", f"v{index}", "-m", f"v{index}")
    return repo


@pytest.fixture
def commit_factory():
    """Factory for Commit objects."""
    return make_commit


@pytest.fixture
def issue_factory():
    """Factory for Jira issue payloads."""
    return issue_payload
