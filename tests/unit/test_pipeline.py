"""Tests for the changelog pipeline."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from rich.console import Console

from jira_changelog.core.commit_range import RangeSpec, ResolvedRange
from jira_changelog.core.options import AUTO_RELEASE, Options
from jira_changelog.core.pipeline import (
    MISSING_RELEASE_GENERATOR_MESSAGE,
    run_changelog,
    save_changelog,
)

TEMPLATE_CONFIG = """\
config = {
    "save": %(save)s,
    "template": "Release {{ release }}: {%% for c in commits.all %%}{{ c.summary }}; {%% endfor %%}Fish &amp; Chips",
    "slack": {"api_key": "xoxb-test", "channel": "#releases"},
}
"""


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.delenv("JIRA_HOST", raising=False)
    monkeypatch.delenv("SLACK_API_KEY", raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    path = tmp_path / "repo"
    path.mkdir()
    (path / "changelog_config.py").write_text(TEMPLATE_CONFIG % {"save": "True"})
    return path


def consoles() -> tuple[Console, Console, io.StringIO, io.StringIO]:
    out, err = io.StringIO(), io.StringIO()
    return Console(file=out, width=200), Console(file=err, width=200), out, err


async def run(options: Options, repo: MagicMock) -> tuple[int, str, str]:
    console, err_console, out, err = consoles()
    with patch("jira_changelog.core.pipeline.GitRepository", return_value=repo):
        code = await run_changelog(options, console, err_console)
    return code, out.getvalue(), err.getvalue()


class TestRunChangelog:
    """Tests for run_changelog()."""

    async def test_saves_and_prints(self, repo_dir: Path, mock_repo: MagicMock, sample_commits):
        """The decoded text is printed and saved under changelog/."""
        mock_repo.get_commit_logs.return_value = sample_commits

        code, out, _ = await run(Options(path=repo_dir, release="1.0"), mock_repo)

        assert code == 0
        saved = (Path.cwd() / "changelog" / "changelog-1.0.md").read_text()
        expected = (
            "Release 1.0: PROJ-1: add login page; [PROJ-2] fix crash on save; "
            "bump dependencies; Fish & Chips"
        )
        assert saved == expected
        assert expected in out

    async def test_uses_resolved_range(self, repo_dir: Path, mock_repo: MagicMock):
        options = Options(path=repo_dir, range=RangeSpec(symmetric=False, from_ref="a", to_ref="b"))

        await run(options, mock_repo)

        mock_repo.get_commit_logs.assert_awaited_once_with(
            ResolvedRange(from_ref="a", to_ref="b", symmetric=False)
        )

    async def test_parses_range_expressions(self, repo_dir: Path, mock_repo: MagicMock):
        options = Options(path=repo_dir, range_expr="a..b", date_expr="2024-01-01")

        await run(options, mock_repo)

        mock_repo.get_commit_logs.assert_awaited_once_with(
            ResolvedRange(from_ref="a", to_ref="b", symmetric=False, after="2024-01-01")
        )

    async def test_invalid_range_fails(self, repo_dir: Path, mock_repo: MagicMock):
        code, _, err = await run(Options(path=repo_dir, range_expr="..."), mock_repo)

        assert code == 1
        assert "Error: Invalid Range" in err
        mock_repo.list_tags.assert_not_called()
        mock_repo.get_commit_logs.assert_not_called()

    async def test_no_save(self, tmp_path: Path, mock_repo: MagicMock):
        repo_dir = tmp_path / "nosave"
        repo_dir.mkdir()
        (repo_dir / "changelog_config.py").write_text(TEMPLATE_CONFIG % {"save": "False"})

        code, _, _ = await run(Options(path=repo_dir), mock_repo)

        assert code == 0
        assert not (Path.cwd() / "changelog").exists()

    async def test_auto_release_without_generator(self, repo_dir: Path, mock_repo: MagicMock):
        """A bare --release with no generator ends the run early and successfully."""
        code, out, _ = await run(Options(path=repo_dir, release=AUTO_RELEASE), mock_repo)

        assert code == 0
        assert MISSING_RELEASE_GENERATOR_MESSAGE in out.replace("\n", " ")
        mock_repo.get_commit_logs.assert_not_called()

    async def test_auto_release_with_async_generator(self, tmp_path: Path, mock_repo: MagicMock):
        repo_dir = tmp_path / "generated"
        repo_dir.mkdir()
        (repo_dir / "changelog_config.py").write_text(
            """\
async def release_name(commit_range):
    return "release-" + commit_range.to_ref

config = {
    "save": True,
    "template": "{{ release }}",
    "jira": {"generate_release_version_name": release_name},
}
"""
        )

        code, _, _ = await run(Options(path=repo_dir, release=AUTO_RELEASE), mock_repo)

        assert code == 0
        assert (Path.cwd() / "changelog" / "changelog-release-v3.md").read_text() == "release-v3"

    async def test_no_range_fails(self, repo_dir: Path, mock_repo: MagicMock):
        mock_repo.list_tags.return_value = []

        code, _, err = await run(Options(path=repo_dir), mock_repo)

        assert code == 1
        assert "No range defined for the changelog." in err

    async def test_unexpected_error_prints_traceback(self, repo_dir: Path, mock_repo: MagicMock):
        mock_repo.get_commit_logs.side_effect = RuntimeError("boom")

        code, _, err = await run(Options(path=repo_dir), mock_repo)

        assert code == 1
        assert "RuntimeError" in err
        assert "boom" in err

    async def test_slack_posts_undecoded_message(self, repo_dir: Path, mock_repo: MagicMock):
        with patch("jira_changelog.core.pipeline.post_to_slack", new=AsyncMock()) as post:
            code, _, _ = await run(Options(path=repo_dir, slack=True, release="1.0"), mock_repo)

        assert code == 0
        message = post.await_args.args[2]
        assert message.endswith("Fish &amp; Chips")

    async def test_slack_not_configured_fails(self, tmp_path: Path, mock_repo: MagicMock):
        repo_dir = tmp_path / "noslack"
        repo_dir.mkdir()
        (repo_dir / "changelog_config.py").write_text("config = {'template': 'x'}\n")

        code, out, err = await run(Options(path=repo_dir, slack=True), mock_repo)

        assert code == 1
        assert "x" in out
        assert "Error: Slack is not configured." in err
        assert "Error: Error:" not in err

    async def test_git_path_attached_to_config(self, repo_dir: Path, mock_repo: MagicMock):
        seen = {}

        async def fake_resolve(config, options, repo):
            seen["git_path"] = config.git_path
            return ResolvedRange("a", "b")

        with patch("jira_changelog.core.pipeline.resolve_range", new=fake_resolve):
            await run(Options(path=repo_dir), mock_repo)

        assert seen["git_path"] == repo_dir.resolve()

    async def test_real_repository(self, temp_git_repo: Path):
        """Without config, the two latest tags of a real repository are used."""
        console, err_console, out, err = consoles()

        code = await run_changelog(Options(path=temp_git_repo), console, err_console)

        assert code == 0, err.getvalue()
        text = out.getvalue()
        assert "plain commit" in text
        assert "second feature" not in text


class TestSaveChangelog:
    """Tests for save_changelog()."""

    def test_release_name(self, tmp_path: Path):
        path = save_changelog("text", "2.0", cwd=tmp_path)

        assert path == tmp_path / "changelog" / "changelog-2.0.md"
        assert path.read_text() == "text"

    def test_timestamp_without_release(self, tmp_path: Path):
        with patch("jira_changelog.core.pipeline.time.time", return_value=1700000000.5):
            path = save_changelog("text", None, cwd=tmp_path)

        assert path.name == "changelog-1700000000500.md"

    def test_existing_directory(self, tmp_path: Path):
        (tmp_path / "changelog").mkdir()

        assert save_changelog("text", "1.0", cwd=tmp_path).exists()
