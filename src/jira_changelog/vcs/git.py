"""Git repository access.

Tags and commit logs are read by running ``git`` as an asyncio
subprocess in the repository's working tree.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from jira_changelog.exceptions import GitRepositoryError

if TYPE_CHECKING:
    from jira_changelog.core.commit_range import ResolvedRange

logger = logging.getLogger(__name__)

# Field and record separators for ``git log --format``
FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"
LOG_FORMAT = FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%B"]) + RECORD_SEP


@dataclass(frozen=True, slots=True)
class Commit:
    """A single commit from the log."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0].strip()


def parse_log_output(output: str) -> list[Commit]:
    """Parse ``git log`` output produced with LOG_FORMAT."""
    commits: list[Commit] = []
    for record in output.split(RECORD_SEP):
        record = record.strip("\n")
        if not record:
            continue
        sha, author_name, author_email, date, message = record.split(FIELD_SEP, 4)
        commits.append(
            Commit(
                sha=sha,
                message=message.strip(),
                author_name=author_name,
                author_email=author_email,
                date=datetime.fromisoformat(date),
            )
        )
    return commits


class GitRepository:
    """Read-only access to a local git working tree."""

    def __init__(self, path: Path) -> None:
        self.path = path

    async def _run(self, *args: str) -> str:
        """Run a git command and return its stdout.

        Raises:
            GitRepositoryError: If git is missing or the command fails
        """
        logger.debug("Running git %s in %s", " ".join(args), self.path)
        try:
            process = await asyncio.create_subprocess_exec(
                "git",
                *args,
                cwd=self.path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise GitRepositoryError("git executable not found") from e

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise GitRepositoryError(
                f"git {args[0]} failed with exit code {process.returncode}",
                stderr=stderr.decode(errors="replace"),
            )
        return stdout.decode(errors="replace")

    async def list_tags(self) -> list[str]:
        """List tags, oldest first."""
        output = await self._run("tag", "--list", "--sort=creatordate")
        return [line.strip() for line in output.splitlines() if line.strip()]

    async def get_commit_logs(self, commit_range: ResolvedRange) -> list[Commit]:
        """Get the non-merge commits in a range.

        Args:
            commit_range: Resolved range; ``after``/``before`` limit by date

        Returns:
            Commits, newest first

        Raises:
            GitRepositoryError: If the range cannot be resolved by git
        """
        args = ["log", "--no-merges", f"--format={LOG_FORMAT}"]
        if commit_range.after:
            args.append(f"--after={commit_range.after}")
        if commit_range.before:
            args.append(f"--before={commit_range.before}")

        revision = commit_range.revision
        if revision is not None:
            if commit_range.from_ref is None or commit_range.to_ref is None:
                # Tag inference ran past the end of the tag list
                raise GitRepositoryError(f"Cannot resolve commit range: {commit_range}")
            args.append(revision)
        args.append("--")

        commits = parse_log_output(await self._run(*args))
        logger.debug("Found %d commits in %s", len(commits), commit_range)
        return commits
