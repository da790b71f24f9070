"""Async client for posting messages with the Slack Web API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from jira_changelog.exceptions import SlackError

if TYPE_CHECKING:
    from jira_changelog.config.models import SlackConfig

logger = logging.getLogger(__name__)


class SlackClient:
    """Posts messages to Slack channels."""

    def __init__(
        self,
        config: SlackConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.config = config
        self._transport = transport
        self._timeout = timeout

    def is_enabled(self) -> bool:
        """Slack is enabled when an API key is configured."""
        return bool(self.config.api_key)

    async def post_message(self, text: str, channel: str) -> dict[str, Any]:
        """Post a message to a channel.

        Args:
            text: Message text (Slack mrkdwn)
            channel: Channel name or ID

        Returns:
            The Slack API response payload

        Raises:
            SlackError: If the request fails or Slack answers ``ok: false``
        """
        payload: dict[str, Any] = {"channel": channel, "text": text}
        if self.config.username:
            payload["username"] = self.config.username
        if self.config.icon_emoji:
            payload["icon_emoji"] = self.config.icon_emoji

        async with httpx.AsyncClient(
            base_url=self.config.api_url,
            headers={"Authorization": f"Bearer {self.config.api_key}"},
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post("/chat.postMessage", json=payload)
            except httpx.HTTPError as e:
                raise SlackError(f"Slack request failed: {e}") from e

        if response.is_error:
            raise SlackError(
                f"Slack returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        data = response.json()
        if not data.get("ok"):
            raise SlackError(f"Slack API error: {data.get('error', 'unknown error')}")

        logger.debug("Posted message to %s (ts=%s)", channel, data.get("ts"))
        return data
