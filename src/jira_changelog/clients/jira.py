"""Async client for the Jira REST API (v2)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from jira_changelog.exceptions import JiraError

if TYPE_CHECKING:
    from jira_changelog.config.models import JiraApiConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class JiraClient:
    """Client for the handful of Jira endpoints the changelog needs."""

    def __init__(
        self,
        api: JiraApiConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not api.host:
            raise JiraError("Jira host is not configured (jira.api.host or JIRA_HOST)")

        host = api.host if api.host.startswith(("http://", "https://")) else f"https://{api.host}"
        auth = httpx.BasicAuth(api.email, api.token) if api.email and api.token else None
        self._client = httpx.AsyncClient(
            base_url=f"{host.rstrip('/')}/rest/api/2",
            auth=auth,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> JiraClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise JiraError(f"Jira request {method} {url} failed: {e}") from e

        if response.is_error:
            raise JiraError(
                f"Jira request {method} {url} returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return response

    async def get_issue(self, key: str) -> dict[str, Any] | None:
        """Fetch an issue, returning None when it doesn't exist."""
        try:
            response = await self._request("GET", f"/issue/{key}")
        except JiraError as e:
            if e.status_code == httpx.codes.NOT_FOUND:
                logger.warning("Jira ticket %s not found", key)
                return None
            raise
        return response.json()

    async def get_project_versions(self, project_key: str) -> list[dict[str, Any]]:
        response = await self._request("GET", f"/project/{project_key}/versions")
        return response.json()

    async def create_version(self, project_key: str, name: str) -> dict[str, Any]:
        logger.info("Creating Jira version %s in project %s", name, project_key)
        response = await self._request(
            "POST", "/version", json={"name": name, "project": project_key}
        )
        return response.json()

    async def add_fix_version(self, key: str, version_name: str) -> None:
        """Add a fix version to an issue."""
        await self._request(
            "PUT",
            f"/issue/{key}",
            json={"update": {"fixVersions": [{"add": {"name": version_name}}]}},
        )
