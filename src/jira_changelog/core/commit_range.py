"""Commit range parsing and resolution.

A range can come from the ``--range`` flag, the ``--date`` flag, the
configured default range, or be inferred from the repository's tags.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jira_changelog.exceptions import InvalidRangeError, NoRangeDefinedError

if TYPE_CHECKING:
    from jira_changelog.config.models import ChangelogConfig
    from jira_changelog.core.options import Options
    from jira_changelog.vcs.git import GitRepository

logger = logging.getLogger(__name__)

SYMMETRIC_DELIMITER = "..."
ASYMMETRIC_DELIMITER = ".."


@dataclass(frozen=True, slots=True)
class RangeSpec:
    """A range expression split into its endpoints.

    Attributes:
        symmetric: True for ``a...b`` (divergence), False for ``a..b`` (ancestry)
        from_ref: Start reference or date
        to_ref: End reference or date, empty when not given
    """

    symmetric: bool
    from_ref: str
    to_ref: str = ""


@dataclass(slots=True)
class ResolvedRange:
    """A fully determined range, ready for the commit log fetch.

    Endpoints are None only when tag inference ran off the end of the
    tag list; git reports the resulting log range as invalid.
    """

    from_ref: str | None = None
    to_ref: str | None = None
    symmetric: bool = False
    after: str | None = None
    before: str | None = None

    @property
    def revision(self) -> str | None:
        """Revision expression for ``git log``, or None to log all history."""
        if not self.from_ref and not self.to_ref:
            return None
        if not self.to_ref:
            return self.from_ref
        delimiter = SYMMETRIC_DELIMITER if self.symmetric else ASYMMETRIC_DELIMITER
        return f"{self.from_ref or ''}{delimiter}{self.to_ref}"

    def __str__(self) -> str:
        parts = [self.revision or "(all history)"]
        if self.after:
            parts.append(f"after {self.after}")
        if self.before:
            parts.append(f"before {self.before}")
        return ", ".join(parts)


def parse_range(range_str: str) -> RangeSpec:
    """Convert a range expression like ``a...b`` into a RangeSpec.

    ``a...b`` is symmetric, ``a..b`` is asymmetric, and a bare ``a`` is
    a single reference with an empty end.

    Args:
        range_str: The range expression

    Returns:
        Parsed range

    Raises:
        InvalidRangeError: If the expression has no usable content
    """
    parts: list[str] = []
    symmetric = False
    range_error = False

    if SYMMETRIC_DELIMITER in range_str:
        if len(range_str) <= len(SYMMETRIC_DELIMITER):
            range_error = True
        symmetric = True
        parts = range_str.split(SYMMETRIC_DELIMITER)
    elif ASYMMETRIC_DELIMITER in range_str:
        if len(range_str) <= len(ASYMMETRIC_DELIMITER):
            range_error = True
        parts = range_str.split(ASYMMETRIC_DELIMITER)
    elif range_str:
        parts = [range_str]

    if not parts or range_error:
        raise InvalidRangeError()

    return RangeSpec(
        symmetric=symmetric,
        from_ref=parts[0],
        to_ref=parts[1] if len(parts) > 1 else "",
    )


def _tag_at(tags: list[str], index: int) -> str | None:
    # Out-of-range lookups yield None, negative indexes never wrap around
    if 0 <= index < len(tags):
        return tags[index]
    return None


def _tag_index(tags: list[str], name: str | None) -> int:
    # An unset endpoint counts as index 0, an unknown tag as -1
    if not name:
        return 0
    return tags.index(name) if name in tags else -1


async def resolve_range(
    config: ChangelogConfig,
    options: Options,
    repo: GitRepository,
) -> ResolvedRange:
    """Build the commit range for this run.

    The command line range and date flags merge into the range first. The
    configured default range applies only when neither flag supplied
    anything. If fewer than two keys are known after that, the missing
    endpoints are inferred from the repository's tags: a known endpoint
    takes its adjacent tag, and no endpoint at all takes the two most
    recent tags.

    Args:
        config: Run configuration
        options: Parsed command line options
        repo: Repository used to list tags

    Returns:
        The resolved range

    Raises:
        NoRangeDefinedError: If no source produced a range
    """
    range_keys: dict[str, Any] = {}

    if options.range is not None and options.range.from_ref:
        range_keys["symmetric"] = options.range.symmetric
        range_keys["from"] = options.range.from_ref
        range_keys["to"] = options.range.to_ref

    if options.date_range is not None and options.date_range.from_ref:
        range_keys["after"] = options.date_range.from_ref
        if options.date_range.to_ref:
            range_keys["before"] = options.date_range.to_ref

    default_range = config.source_control.default_range.as_range_dict()
    if not range_keys and default_range:
        logger.debug("Using configured default range %s", default_range)
        range_keys.update(default_range)

    if len(range_keys) < 2:
        tags = await repo.list_tags()
        logger.debug("Inferring range from %d tags", len(tags))

        if len(range_keys) == 1:
            from_index = _tag_index(tags, range_keys.get("from"))
            to_index = _tag_index(tags, range_keys.get("to"))
            range_keys["from"] = range_keys.get("from") or _tag_at(tags, to_index - 1)
            range_keys["to"] = range_keys.get("to") or _tag_at(tags, from_index + 1)
        else:
            range_keys["from"] = _tag_at(tags, len(tags) - 2)
            range_keys["to"] = _tag_at(tags, len(tags) - 1)

    if not any(value is not None for value in range_keys.values()):
        raise NoRangeDefinedError()

    resolved = ResolvedRange(
        from_ref=range_keys.get("from"),
        to_ref=range_keys.get("to"),
        symmetric=bool(range_keys.get("symmetric")),
        after=range_keys.get("after"),
        before=range_keys.get("before"),
    )
    logger.debug("Resolved commit range: %s", resolved)
    return resolved
