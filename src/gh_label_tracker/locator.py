"""Find the tracking issue from its title."""

import logging

from .models import DEFAULT_AUTHOR, TrackingIssue
from .provider import IssueTrackerProvider

logger = logging.getLogger(__name__)

# in:title matches substrings, so a few hits are fetched to find the exact title
SEARCH_PAGE_SIZE = 10


def build_search_query(
    owner: str,
    repo: str,
    title: str,
    author: str = DEFAULT_AUTHOR,
) -> str:
    """Build the search query matching an open tracking issue by title."""
    return f'repo:{owner}/{repo} is:issue is:open in:title "{title}" author:{author}'


class TrackingIssueLocator:
    """
    Looks up the tracking issue by title on every run.

    Nothing about the issue is stored between runs: a deleted tracking
    issue is simply recreated, and an existing one is found no matter
    which run created it.
    """

    def __init__(self, provider: IssueTrackerProvider, author: str = DEFAULT_AUTHOR) -> None:
        self.provider = provider
        self.author = author

    async def locate(self, owner: str, repo: str, title: str) -> TrackingIssue:
        """
        Search for the open issue whose title equals ``title``.

        Returns:
            The found issue, or a TrackingIssue without a number if none exists
        """
        query = build_search_query(owner, repo, title, self.author)
        result = await self.provider.search_issues(query, per_page=SEARCH_PAGE_SIZE)

        for hit in result.items:
            if hit.title == title:
                logger.info(f"Found existing tracking issue #{hit.number}")
                return TrackingIssue(number=hit.number, title=title, body=hit.body or "")

        if result.items:
            others = ", ".join(f"#{hit.number}" for hit in result.items)
            logger.debug(f"Ignoring search hits with a different title: {others}")

        logger.info(f"No open tracking issue titled '{title}' in {owner}/{repo}")
        return TrackingIssue(title=title)
