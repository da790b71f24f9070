"""Exception hierarchy for jira-changelog.

All errors raised by the package derive from :class:`JiraChangelogError`,
so callers can catch a single type at the command boundary.
"""

from __future__ import annotations


class JiraChangelogError(Exception):
    """Base class for all jira-changelog errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(JiraChangelogError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """An explicitly requested config file does not exist."""


class ConfigValidationError(ConfigError):
    """A config file could not be loaded or failed validation."""


# =============================================================================
# Commit ranges
# =============================================================================


class RangeError(JiraChangelogError):
    """Base class for commit range errors."""


class InvalidRangeError(RangeError):
    """A range expression could not be decomposed into endpoints."""

    def __init__(self, message: str = "Invalid Range") -> None:
        super().__init__(message)


class NoRangeDefinedError(RangeError):
    """No source yielded a usable commit range."""

    def __init__(self, message: str = "No range defined for the changelog.") -> None:
        super().__init__(message)


# =============================================================================
# Collaborators
# =============================================================================


class GitRepositoryError(JiraChangelogError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        if self.stderr:
            return f"{self.message}\n{self.stderr.strip()}"
        return self.message


class HTTPServiceError(JiraChangelogError):
    """A remote HTTP API returned an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class JiraError(HTTPServiceError):
    """The Jira REST API returned an error."""


class SlackError(HTTPServiceError):
    """The Slack Web API returned an error."""


class TemplateError(JiraChangelogError):
    """The changelog template could not be rendered."""


# =============================================================================
# Chat delivery
# =============================================================================


class ChatNotConfiguredError(JiraChangelogError):
    """Slack delivery was requested but Slack is disabled or has no channel."""

    def __init__(self, message: str = "Slack is not configured.") -> None:
        super().__init__(message)


class ChatDeliveryError(JiraChangelogError):
    """Posting the changelog to Slack failed."""
