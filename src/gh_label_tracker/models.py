"""
Pydantic models for tracked items, the tracking issue and run configuration.

This module defines the data models used throughout the application,
providing strong typing, validation, and serialization capabilities.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_AUTHOR = "app/github-actions"


class IssueState(str, Enum):
    """GitHub issue state."""

    OPEN = "open"
    CLOSED = "closed"


class RepositoryRef(BaseModel):
    """A repository in scope for aggregation."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        """Get the qualified owner/name form."""
        return f"{self.owner}/{self.name}"


class TrackedItem(BaseModel):
    """
    An issue carrying the tracked label.

    Built once per fetched record and never mutated afterwards; the owning
    repository is part of the value rather than attached later.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    repository: str  # Format: owner/repo
    assignees: list[str] = Field(default_factory=list)
    state: IssueState = IssueState.OPEN

    def reference(self, org_level: bool) -> str:
        """Get the markdown issue reference for the given scope."""
        if org_level:
            return f"{self.repository}#{self.number}"
        return f"#{self.number}"


class TrackingIssue(BaseModel):
    """The aggregating issue maintained by this tool."""

    model_config = ConfigDict(frozen=True)

    number: int | None = None
    title: str
    body: str = ""

    @property
    def exists(self) -> bool:
        """Check if the issue has already been created."""
        return self.number is not None


class SearchHit(BaseModel):
    """A single issue search result."""

    model_config = ConfigDict(frozen=True)

    number: int
    title: str = ""
    body: str | None = None


class SearchResult(BaseModel):
    """Result of an issue search."""

    model_config = ConfigDict(frozen=True)

    total_count: int = 0
    items: list[SearchHit] = Field(default_factory=list)


class PublishAction(str, Enum):
    """What a run did with the tracking issue."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"  # Dry run


class PublishResult(BaseModel):
    """Result of a tracker run."""

    model_config = ConfigDict(frozen=True)

    action: PublishAction
    number: int | None = None
    body: str
    item_count: int = 0

    def summary(self) -> str:
        """Generate human-readable summary."""
        if self.action == PublishAction.CREATED:
            return f"Created new issue #{self.number}"
        if self.action == PublishAction.UPDATED:
            return f"Updated issue #{self.number}"
        target = f"issue #{self.number}" if self.number is not None else "a new issue"
        return f"Dry run: would write {self.item_count} items to {target}"


class TrackerConfig(BaseModel):
    """Configuration for a tracker run."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(min_length=1)
    issue_title: str = Field(min_length=1)
    token: str = ""
    repo_owner: str = Field(min_length=1)
    repo_name: str = Field(min_length=1)
    org_level: bool = False
    author: str = DEFAULT_AUTHOR
    api_url: str = DEFAULT_API_URL
    timeout: int = 60
    dry_run: bool = False

    @property
    def repo(self) -> str:
        """Get the repository that holds the tracking issue."""
        return f"{self.repo_owner}/{self.repo_name}"
