"""
GitHub REST API client.

This module handles all interactions with the GitHub REST API: issue
search, repository and issue listing with Link-header pagination, and
issue creation and updates.
"""

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from .exceptions import (
    TrackerAPIError,
    TrackerAuthError,
    TrackerNetworkError,
    TrackerRateLimitError,
    TrackerTimeoutError,
)
from .models import DEFAULT_API_URL, RepositoryRef, SearchHit, SearchResult
from .provider import IssueTrackerProvider

logger = logging.getLogger(__name__)


class GitHubClient(IssueTrackerProvider):
    """
    Client for interacting with GitHub via its REST API.

    Requests are issued one at a time; list operations follow the
    ``next`` relation of the Link header until it runs out.
    """

    DEFAULT_TIMEOUT = 60  # seconds
    PAGE_SIZE = 100  # API maximum
    API_VERSION = "2022-11-28"

    def __init__(
        self,
        token: str = "",
        base_url: str = DEFAULT_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            token: API token; anonymous requests are made when empty
            base_url: REST API root (differs on GitHub Enterprise Server)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.token = token.strip()
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": self.API_VERSION,
            }
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Make an API request with error handling.

        Args:
            method: HTTP method
            url: API path, or an absolute URL taken from a Link header
            params: Query parameters
            json: JSON request body

        Returns:
            The successful response

        Raises:
            Various TrackerClientError subclasses based on failure type
        """
        client = await self._get_client()
        logger.debug(f"{method} {url} params={params}")

        try:
            response = await client.request(method, url, params=params, json=json)
        except httpx.TimeoutException as e:
            raise TrackerTimeoutError(self.timeout) from e
        except httpx.TransportError as e:
            raise TrackerNetworkError(str(e)) from e

        if response.status_code < 400:
            return response

        message = self._error_message(response)

        if response.status_code == 401:
            raise TrackerAuthError(message or "Invalid or expired API token")

        if response.status_code in (403, 429):
            if (
                response.headers.get("x-ratelimit-remaining") == "0"
                or "rate limit" in message.lower()
            ):
                raise TrackerRateLimitError(self._rate_limit_reset(response))
            if response.status_code == 403:
                raise TrackerAuthError(f"Access forbidden: {message}")

        if response.status_code == 404:
            raise TrackerAPIError(f"Not found: {url}", 404)

        raise TrackerAPIError(message, response.status_code)

    def _error_message(self, response: httpx.Response) -> str:
        """Extract the error message GitHub puts in JSON error bodies."""
        try:
            data = response.json()
        except ValueError:
            return response.text.strip()
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return response.text.strip()

    def _rate_limit_reset(self, response: httpx.Response) -> str | None:
        """Format the rate limit reset header, if present."""
        reset = response.headers.get("x-ratelimit-reset")
        if not reset:
            return None
        try:
            return datetime.fromtimestamp(int(reset), UTC).strftime("%H:%M:%S UTC")
        except ValueError:
            return None

    def _decode(self, response: httpx.Response, path: str) -> Any:
        """Decode a successful JSON response."""
        try:
            return response.json()
        except ValueError as e:
            raise TrackerAPIError(f"Invalid JSON response for {path}: {e}") from e

    def _require(self, record: Any, key: str, path: str) -> Any:
        """Get a required field from a response record."""
        if not isinstance(record, dict) or record.get(key) is None:
            raise TrackerAPIError(f"Response record for {path} is missing '{key}'")
        return record[key]

    async def _paginate(
        self,
        path: str,
        params: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """
        Fetch every page of a list endpoint.

        The first request carries the query parameters; later requests use
        the ``next`` URL verbatim since it already encodes them.
        """
        results: list[dict[str, Any]] = []
        url: str | None = path
        page_params: dict[str, Any] | None = {**params, "per_page": self.PAGE_SIZE}

        while url:
            response = await self._request("GET", url, params=page_params)
            data = self._decode(response, path)

            if not isinstance(data, list):
                raise TrackerAPIError(
                    f"Expected list response for {path}, received {type(data).__name__}"
                )

            results.extend(data)

            next_link = response.links.get("next")
            url = next_link.get("url") if next_link else None
            page_params = None

        return results

    async def search_issues(self, query: str, per_page: int = 1) -> SearchResult:
        """Search issues and pull requests."""
        logger.debug(f"Searching issues: {query}")
        response = await self._request(
            "GET",
            "/search/issues",
            params={"q": query, "per_page": per_page},
        )
        data = self._decode(response, "/search/issues")
        if not isinstance(data, dict):
            raise TrackerAPIError(
                f"Expected object response for /search/issues, received {type(data).__name__}"
            )

        return SearchResult(
            total_count=data.get("total_count", 0),
            items=[
                SearchHit(
                    number=self._require(item, "number", "/search/issues"),
                    title=item.get("title") or "",
                    body=item.get("body"),
                )
                for item in data.get("items", [])
            ],
        )

    async def list_repositories_for_owner(self, owner: str) -> list[RepositoryRef]:
        """List every repository of an organization, of any type."""
        repos = await self._paginate(f"/orgs/{owner}/repos", {"type": "all"})
        logger.info(f"Found {len(repos)} repositories in {owner}")
        return [
            RepositoryRef(owner=owner, name=self._require(repo, "name", f"/orgs/{owner}/repos"))
            for repo in repos
        ]

    async def list_issues_for_repo(
        self,
        owner: str,
        repo: str,
        label: str,
        state: str = "all",
    ) -> list[dict[str, Any]]:
        """List every issue in a repository carrying a label."""
        path = f"/repos/{owner}/{repo}/issues"
        records = await self._paginate(path, {"labels": label, "state": state})
        for record in records:
            self._require(record, "number", path)
        return records

    async def create_issue(self, owner: str, repo: str, title: str, body: str) -> int:
        """Create an issue and return its number."""
        path = f"/repos/{owner}/{repo}/issues"
        response = await self._request("POST", path, json={"title": title, "body": body})
        return int(self._require(self._decode(response, path), "number", path))

    async def update_issue(self, owner: str, repo: str, number: int, body: str) -> None:
        """Replace an issue's body."""
        await self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/issues/{number}",
            json={"body": body},
        )
