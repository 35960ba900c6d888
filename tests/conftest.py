"""Pytest configuration and fixtures."""

from datetime import UTC, datetime
from typing import Any

import pytest

from gh_label_tracker.models import (
    RepositoryRef,
    SearchHit,
    SearchResult,
    TrackedItem,
    TrackerConfig,
)
from gh_label_tracker.provider import IssueTrackerProvider


class FakeProvider(IssueTrackerProvider):
    """In-memory issue tracker recording every call."""

    def __init__(
        self,
        issues: dict[str, list[dict[str, Any]]] | None = None,
        repositories: dict[str, list[str]] | None = None,
        tracking_issue: SearchHit | None = None,
        search_hits: list[SearchHit] | None = None,
        next_number: int = 100,
    ) -> None:
        self.issues = issues or {}
        self.repositories = repositories or {}
        self.tracking_issue = tracking_issue
        self.search_hits = search_hits
        self.next_number = next_number
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.closed = False

    async def close(self) -> None:
        self.closed = True

    async def search_issues(self, query: str, per_page: int = 1) -> SearchResult:
        self.calls.append(("search_issues", (query, per_page)))
        if self.search_hits is not None:
            hits = self.search_hits
        else:
            hits = [self.tracking_issue] if self.tracking_issue is not None else []
        return SearchResult(total_count=len(hits), items=hits)

    async def list_repositories_for_owner(self, owner: str) -> list[RepositoryRef]:
        self.calls.append(("list_repositories_for_owner", (owner,)))
        return [RepositoryRef(owner=owner, name=n) for n in self.repositories.get(owner, [])]

    async def list_issues_for_repo(
        self,
        owner: str,
        repo: str,
        label: str,
        state: str = "all",
    ) -> list[dict[str, Any]]:
        self.calls.append(("list_issues_for_repo", (owner, repo, label, state)))
        return list(self.issues.get(f"{owner}/{repo}", []))

    async def create_issue(self, owner: str, repo: str, title: str, body: str) -> int:
        self.calls.append(("create_issue", (owner, repo, title, body)))
        return self.next_number

    async def update_issue(self, owner: str, repo: str, number: int, body: str) -> None:
        self.calls.append(("update_issue", (owner, repo, number, body)))

    def called(self, name: str) -> list[tuple[Any, ...]]:
        """Get the arguments of every call to a method."""
        return [args for call, args in self.calls if call == name]


def issue_record(number: int, *assignees: str, state: str = "open") -> dict[str, Any]:
    """Build a raw issue record shaped like the REST API's."""
    return {
        "number": number,
        "state": state,
        "assignees": [{"login": login} for login in assignees],
    }


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed timestamp for deterministic rendering."""
    return datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


@pytest.fixture
def config() -> TrackerConfig:
    """Single-repository configuration."""
    return TrackerConfig(
        label="tracked",
        issue_title="Tracker",
        token="test-token",
        repo_owner="acme",
        repo_name="widgets",
    )


@pytest.fixture
def org_config(config: TrackerConfig) -> TrackerConfig:
    """Organization-scope configuration."""
    return config.model_copy(update={"org_level": True})


@pytest.fixture
def sample_items() -> list[TrackedItem]:
    """Items of a single repository, in display order."""
    return [
        TrackedItem(number=2, repository="acme/widgets"),
        TrackedItem(number=5, repository="acme/widgets", assignees=["alice"]),
        TrackedItem(number=9, repository="acme/widgets", assignees=["alice", "bob"]),
    ]
