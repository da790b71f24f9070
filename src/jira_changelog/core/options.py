"""Parsed command line options for a changelog run."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from jira_changelog.core.commit_range import parse_range

if TYPE_CHECKING:
    from jira_changelog.core.commit_range import RangeSpec


class _AutoRelease:
    """Sentinel for ``--release`` given without a value."""

    _instance: _AutoRelease | None = None

    def __new__(cls) -> _AutoRelease:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "AUTO_RELEASE"

    def __bool__(self) -> bool:
        return True


AUTO_RELEASE: Final = _AutoRelease()


@dataclass(slots=True)
class Options:
    """Command line options.

    Attributes:
        path: Repository path, defaults to the current directory
        config: Explicit config file path
        range: Commit range from ``--range``
        date_range: Date range from ``--date``
        range_expr: Unparsed ``--range`` value
        date_expr: Unparsed ``--date`` value
        slack: Post the changelog to Slack
        release: Release name, AUTO_RELEASE to generate one, or None
        verbose: Enable debug logging
    """

    path: Path | None = None
    config: Path | None = None
    range: RangeSpec | None = None
    date_range: RangeSpec | None = None
    slack: bool = False
    release: str | _AutoRelease | None = None
    verbose: bool = False
    range_expr: str | None = None
    date_expr: str | None = None

    @property
    def wants_generated_release(self) -> bool:
        """True when ``--release`` was passed without a name."""
        return self.release is AUTO_RELEASE

    def parse_expressions(self) -> None:
        """Parse the raw ``--range`` and ``--date`` values into range specs.

        Raises:
            InvalidRangeError: If either value is not a valid range
        """
        if self.range_expr is not None:
            self.range = parse_range(self.range_expr)
        if self.date_expr is not None:
            self.date_range = parse_range(self.date_expr)
