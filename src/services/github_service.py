"""GitHub repository listing proxy."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from src.api.middleware.error_handler import UpstreamNotFoundError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
USER_AGENT = "devconnector-api"


class GitHubService:
    """Read-only proxy to a user's public GitHub repositories."""

    def __init__(
        self,
        client_id: str = "",
        client_secret: str = "",
        base_url: str = GITHUB_API_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the GitHub proxy.

        Args:
            client_id: OAuth app client ID sent as a query parameter.
            client_secret: OAuth app client secret sent as a query parameter.
            base_url: GitHub REST API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used by tests.
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def list_repositories(self, username: str, limit: int = 5) -> list[dict[str, Any]]:
        """Fetch the most recently created repositories of a user.

        The upstream JSON is returned unchanged.

        Args:
            username: GitHub login.
            limit: Maximum number of repositories.

        Returns:
            list[dict]: Repository objects as returned by GitHub.

        Raises:
            UpstreamNotFoundError: If GitHub answers with a non-200 status.
            UpstreamUnavailableError: If GitHub cannot be reached or the body is not JSON.
        """
        params: dict[str, Any] = {"per_page": limit, "sort": "created:asc"}
        if self.client_id and self.client_secret:
            params["client_id"] = self.client_id
            params["client_secret"] = self.client_secret

        # One path segment, so "?", "#" and "/" cannot reach another endpoint
        login = quote(username, safe="")
        url = f"{self.base_url}/users/{login}/repos"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    url,
                    params=params,
                    headers={"user-agent": USER_AGENT, "Accept": "application/vnd.github+json"},
                )
        except httpx.HTTPError as e:
            logger.error("GitHub request for %s failed: %s", username, e)
            raise UpstreamUnavailableError("GitHub is unavailable") from e

        if response.status_code != 200:
            logger.warning("GitHub returned %s for user %s", response.status_code, username)
            raise UpstreamNotFoundError("No github profile found")

        try:
            return response.json()
        except ValueError as e:
            logger.error("GitHub returned an unreadable body for %s", username)
            raise UpstreamUnavailableError("GitHub returned an invalid response") from e
