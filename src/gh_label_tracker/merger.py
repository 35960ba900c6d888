"""
Merge logic for the tracking issue body.

The body of the tracking issue belongs to whoever edits it; this tool only
owns the text between the section markers. The merge:
- Replaces the first marked section in place, markers included
- Appends a section when no complete marked section exists
- Leaves every byte outside the marked section untouched
"""

import logging

from .renderer import SECTION_END, SECTION_START

logger = logging.getLogger(__name__)


def find_section(body: str) -> tuple[int, int] | None:
    """
    Locate the marked section in a body.

    The section runs from the first start marker to the first end marker
    after it.

    Returns:
        ``(start, end)`` slice bounds covering both markers, or None
    """
    start = body.find(SECTION_START)
    if start == -1:
        return None

    end = body.find(SECTION_END, start + len(SECTION_START))
    if end == -1:
        return None

    return start, end + len(SECTION_END)


def merge_section(body: str | None, section: str) -> str:
    """
    Splice a rendered section into an existing body.

    Args:
        body: Current issue body, None or empty for a new issue
        section: Rendered section including its markers

    Returns:
        The new body
    """
    if not body:
        return section

    bounds = find_section(body)
    if bounds is None:
        logger.info("No marked section in existing body, appending one")
        return f"{body}\n\n{section}"

    start, end = bounds
    return body[:start] + section + body[end:]
