"""
Main tracker orchestrator.

This module coordinates a tracker run:
1. Locate the existing tracking issue by title
2. Aggregate labelled items from the repositories in scope
3. Render the marked section
4. Merge it into the existing body
5. Create or update the tracking issue
"""

import asyncio
import logging
from datetime import datetime

from .aggregator import ItemAggregator
from .github_client import GitHubClient
from .locator import TrackingIssueLocator
from .merger import merge_section
from .models import PublishAction, PublishResult, TrackerConfig, TrackingIssue
from .provider import IssueTrackerProvider
from .renderer import SectionRenderer

logger = logging.getLogger(__name__)


class TrackerSync:
    """
    Orchestrates one run against the issue tracker.

    Runs are stateless: everything is read fresh from the tracker, so a
    failed run is repaired by the next one.
    """

    def __init__(self, provider: IssueTrackerProvider, config: TrackerConfig) -> None:
        """
        Initialize the orchestrator.

        Args:
            provider: Issue tracker provider
            config: Resolved run configuration
        """
        self.provider = provider
        self.config = config
        self.locator = TrackingIssueLocator(provider, author=config.author)
        self.aggregator = ItemAggregator(provider)
        self.renderer = SectionRenderer(config.label, org_level=config.org_level)

    async def publish(self, issue: TrackingIssue, body: str) -> int:
        """
        Write the body to the tracking issue.

        Returns:
            The tracking issue's number
        """
        cfg = self.config
        if issue.number is not None:
            await self.provider.update_issue(cfg.repo_owner, cfg.repo_name, issue.number, body)
            logger.info(f"Updated issue #{issue.number}")
            return issue.number

        number = await self.provider.create_issue(
            cfg.repo_owner, cfg.repo_name, issue.title, body
        )
        logger.info(f"Created new issue #{number}")
        return number

    async def run(self, now: datetime | None = None) -> PublishResult:
        """
        Run the tracker once.

        Args:
            now: Timestamp for the rendered footer, defaults to the current time

        Returns:
            PublishResult describing what was written

        Raises:
            TrackerClientError: If any API call fails
        """
        cfg = self.config
        scope = f"organization {cfg.repo_owner}" if cfg.org_level else cfg.repo
        logger.info(f"Tracking label '{cfg.label}' in {scope}")

        issue = await self.locator.locate(cfg.repo_owner, cfg.repo_name, cfg.issue_title)
        items = await self.aggregator.aggregate(
            owner=cfg.repo_owner,
            repo_name=cfg.repo_name,
            label=cfg.label,
            org_level=cfg.org_level,
        )

        section = self.renderer.render(items, issue_exists=issue.exists, now=now)
        body = merge_section(issue.body, section)

        if cfg.dry_run:
            logger.info("Dry run - not writing changes")
            return PublishResult(
                action=PublishAction.SKIPPED,
                number=issue.number,
                body=body,
                item_count=len(items),
            )

        number = await self.publish(issue, body)
        return PublishResult(
            action=PublishAction.UPDATED if issue.exists else PublishAction.CREATED,
            number=number,
            body=body,
            item_count=len(items),
        )


async def run_tracker_async(
    config: TrackerConfig,
    provider: IssueTrackerProvider | None = None,
    now: datetime | None = None,
) -> PublishResult:
    """
    Run the tracker, creating and closing a GitHub client if none is given.

    A provider passed in by the caller is left open.
    """
    owned = provider is None
    if provider is None:
        provider = GitHubClient(
            token=config.token,
            base_url=config.api_url,
            timeout=config.timeout,
        )
    try:
        return await TrackerSync(provider, config).run(now=now)
    finally:
        if owned:
            await provider.close()


def run_tracker(
    config: TrackerConfig,
    provider: IssueTrackerProvider | None = None,
    now: datetime | None = None,
) -> PublishResult:
    """
    Synchronous wrapper for TrackerSync.run().

    This is a convenience function for running the tracker from non-async code.
    """
    return asyncio.run(run_tracker_async(config, provider=provider, now=now))
