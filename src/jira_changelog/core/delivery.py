"""Slack delivery of the rendered changelog."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from jira_changelog.clients.slack import SlackClient
from jira_changelog.exceptions import ChatDeliveryError, ChatNotConfiguredError

if TYPE_CHECKING:
    from rich.console import Console

    from jira_changelog.config.models import ChangelogConfig


async def post_to_slack(
    config: ChangelogConfig,
    data: Any,
    message: str,
    *,
    console: Console | None = None,
    slack: SlackClient | None = None,
) -> None:
    """Post the changelog to the configured Slack channel.

    Args:
        config: Run configuration
        data: Template data, passed to ``transform_for_slack``
        message: Rendered changelog
        console: Console for progress output
        slack: Client to use instead of one built from ``config.slack``

    Raises:
        ChatNotConfiguredError: If Slack is disabled or has no channel
        ChatDeliveryError: If transforming or posting the message fails
    """
    slack = slack or SlackClient(config.slack)
    channel = config.slack.channel
    if not slack.is_enabled() or not channel:
        raise ChatNotConfiguredError()

    if console is not None:
        console.print(f"\nPosting changelog message to slack channel: {channel}...", markup=False)

    try:
        if config.transform_for_slack is not None:
            message = config.transform_for_slack(message, data)
            if inspect.isawaitable(message):
                message = await message

        await slack.post_message(message, channel)
    except Exception as e:
        raise ChatDeliveryError(f"Posting to Slack failed: {e}") from e

    if console is not None:
        console.print("Sent")
