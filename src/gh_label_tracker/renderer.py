"""
Markdown rendering of the tracked section.

This module turns the aggregated items into the marked section of the
tracking issue body. Rendering is a pure function of its inputs: the
same items and the same ``now`` always produce the same text.
"""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from email.utils import format_datetime

from .models import TrackedItem

logger = logging.getLogger(__name__)

SECTION_START = "<!-- TRACKER_SECTION_START -->"
SECTION_END = "<!-- TRACKER_SECTION_END -->"


def format_timestamp(dt: datetime) -> str:
    """
    Format datetime as an RFC 1123 UTC timestamp.

    Naive datetimes are taken to be UTC.

    Returns:
        Formatted timestamp like ``Mon, 15 Jan 2024 10:30:00 GMT``
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return format_datetime(dt.astimezone(UTC), usegmt=True)


def format_assignees(assignees: Sequence[str], mention: bool) -> str:
    """
    Format assignee logins as a comma-separated list.

    Args:
        assignees: Assignee logins
        mention: Prefix each login with ``@`` so GitHub notifies them

    Returns:
        Joined list, or an empty string when there are no assignees
    """
    prefix = "@" if mention else ""
    return ", ".join(f"{prefix}{login}" for login in assignees)


def format_item_line(item: TrackedItem, org_level: bool, mention: bool) -> str:
    """Format one list line for a tracked item."""
    line = f"- {item.reference(org_level)}"
    if item.assignees:
        line += f" (Assigned to: {format_assignees(item.assignees, mention)})"
    return line


class SectionRenderer:
    """Renders the marked section listing every tracked item."""

    def __init__(self, label: str, org_level: bool = False) -> None:
        self.label = label
        self.org_level = org_level

    def format_header(self) -> str:
        """Format the section heading."""
        scope = " in the organization" if self.org_level else ""
        return f"# Issues with the `{self.label}` label{scope}"

    def render(
        self,
        items: Sequence[TrackedItem],
        issue_exists: bool,
        now: datetime | None = None,
    ) -> str:
        """
        Render the marked section.

        Assignees are only mentioned once the tracking issue exists;
        mentioning everyone in the creating request would notify every
        assignee at once.

        Args:
            items: Aggregated items, already in display order
            issue_exists: Whether the tracking issue was found
            now: Timestamp for the footer, defaults to the current time

        Returns:
            The section, starting and ending with the sentinel markers
        """
        if now is None:
            now = datetime.now(UTC)

        lines = [SECTION_START, self.format_header(), ""]
        lines.extend(
            format_item_line(item, self.org_level, mention=issue_exists) for item in items
        )
        lines.extend(
            [
                "",
                f"_Last updated: {format_timestamp(now)}_",
                SECTION_END,
            ]
        )

        logger.debug(f"Rendered {len(items)} items (mentions={'on' if issue_exists else 'off'})")
        return "\n".join(lines)
