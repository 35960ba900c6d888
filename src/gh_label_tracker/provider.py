"""
Abstract provider protocol for the issue tracker.

This module defines the capabilities the tracker core consumes, so the
sync orchestrator can run against the GitHub REST client or an in-memory
double without knowing how requests are made.
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import RepositoryRef, SearchResult


class IssueTrackerProvider(ABC):
    """
    Abstract base class for issue tracker providers.

    Every list operation returns the fully paginated result; callers never
    see page boundaries.
    """

    @abstractmethod
    async def close(self) -> None:
        """Close any resources held by the provider."""
        ...

    @abstractmethod
    async def search_issues(self, query: str, per_page: int = 1) -> SearchResult:
        """
        Search issues with the tracker's query syntax.

        Args:
            query: Search query string
            per_page: Maximum number of hits to return

        Returns:
            SearchResult with the total count and the first page of hits
        """
        ...

    @abstractmethod
    async def list_repositories_for_owner(self, owner: str) -> list[RepositoryRef]:
        """
        List every repository owned by an organization.

        Args:
            owner: Organization login

        Returns:
            Repositories in the order the API returns them
        """
        ...

    @abstractmethod
    async def list_issues_for_repo(
        self,
        owner: str,
        repo: str,
        label: str,
        state: str = "all",
    ) -> list[dict[str, Any]]:
        """
        List every issue in a repository carrying a label.

        Args:
            owner: Repository owner
            repo: Repository name
            label: Label name to filter by
            state: Filter by state: 'open', 'closed', or 'all'

        Returns:
            Raw issue records as returned by the API
        """
        ...

    @abstractmethod
    async def create_issue(self, owner: str, repo: str, title: str, body: str) -> int:
        """
        Create an issue.

        Returns:
            The number assigned to the new issue
        """
        ...

    @abstractmethod
    async def update_issue(self, owner: str, repo: str, number: int, body: str) -> None:
        """Replace the body of an existing issue, leaving its title alone."""
        ...
