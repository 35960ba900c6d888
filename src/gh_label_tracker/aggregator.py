"""
Repository enumeration and labelled item aggregation.

Both scopes go through the same per-repository fetch: single-repository
scope calls it once, organization scope once per repository owned by the
organization.
"""

import logging
from typing import Any

from .models import IssueState, RepositoryRef, TrackedItem
from .provider import IssueTrackerProvider

logger = logging.getLogger(__name__)


def parse_tracked_item(data: dict[str, Any], repository: RepositoryRef) -> TrackedItem:
    """Build a TrackedItem from a raw API issue record."""
    state_str = str(data.get("state", "open")).lower()
    return TrackedItem(
        number=int(data["number"]),
        repository=repository.full_name,
        assignees=[a["login"] for a in data.get("assignees") or [] if a.get("login")],
        state=IssueState.CLOSED if state_str == "closed" else IssueState.OPEN,
    )


class ItemAggregator:
    """
    Collects every item carrying a label across the repositories in scope.

    Items within a repository are ordered by number, since the API makes
    no ordering promise; repositories keep the order they were listed in.
    """

    def __init__(self, provider: IssueTrackerProvider) -> None:
        self.provider = provider

    async def repositories(
        self,
        owner: str,
        repo_name: str,
        org_level: bool,
    ) -> list[RepositoryRef]:
        """
        Determine the repositories to scan.

        Args:
            owner: Repository owner or organization
            repo_name: Repository name, ignored in organization scope
            org_level: Scan every repository owned by ``owner``

        Returns:
            Repositories in scan order
        """
        if org_level:
            logger.info(f"Listing repositories for organization {owner}")
            return await self.provider.list_repositories_for_owner(owner)
        return [RepositoryRef(owner=owner, name=repo_name)]

    async def fetch_repository_items(
        self,
        repository: RepositoryRef,
        label: str,
    ) -> list[TrackedItem]:
        """Fetch the labelled items of one repository, in any state."""
        records = await self.provider.list_issues_for_repo(
            owner=repository.owner,
            repo=repository.name,
            label=label,
            state="all",
        )
        records = sorted(records, key=lambda r: int(r["number"]))
        items = [parse_tracked_item(r, repository) for r in records]
        logger.debug(f"{repository.full_name}: {len(items)} items labelled '{label}'")
        return items

    async def aggregate(
        self,
        owner: str,
        repo_name: str,
        label: str,
        org_level: bool,
    ) -> list[TrackedItem]:
        """
        Collect the labelled items of every repository in scope.

        Returns:
            Flat list of items, grouped by repository
        """
        items: list[TrackedItem] = []
        for repository in await self.repositories(owner, repo_name, org_level):
            items.extend(await self.fetch_repository_items(repository, label))

        logger.info(f"Found {len(items)} items labelled '{label}'")
        return items
