"""
Run configuration.

Inputs arrive either as CLI options or, inside a GitHub Actions step, as
``INPUT_<NAME>`` environment variables. Missing values fall back to the
workflow context (``GITHUB_REPOSITORY``, ``GITHUB_TOKEN``, ``GITHUB_API_URL``).
Every check here runs before any network call.
"""

import logging
import os
from collections.abc import Mapping

from .exceptions import InvalidInputError, MissingInputError
from .models import DEFAULT_API_URL, DEFAULT_AUTHOR, TrackerConfig

logger = logging.getLogger(__name__)

TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


def parse_bool_input(name: str, value: str | bool | None) -> bool:
    """
    Interpret a boolean input the way GitHub Actions does.

    Only the YAML 1.2 core schema spellings are accepted; an unset or
    empty input is false.

    Raises:
        InvalidInputError: For any other value
    """
    if isinstance(value, bool):
        return value
    if value is None or value.strip() == "":
        return False

    value = value.strip()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise InvalidInputError(name, value, "one of: true, True, TRUE, false, False, FALSE")


def context_repository(environ: Mapping[str, str]) -> tuple[str, str]:
    """
    Get the invoking repository from the workflow context.

    Returns:
        ``(owner, name)``, with empty strings when not running in a workflow
    """
    slug = environ.get("GITHUB_REPOSITORY", "").strip()
    if slug.count("/") != 1:
        return "", ""
    owner, name = slug.split("/")
    return owner, name


def _clean(value: str | None) -> str:
    return value.strip() if value else ""


def resolve_config(
    label: str | None,
    issue_title: str | None,
    token: str | None = None,
    repo_owner: str | None = None,
    repo_name: str | None = None,
    org_level: str | bool | None = None,
    author: str | None = None,
    api_url: str | None = None,
    timeout: int = 60,
    dry_run: bool = False,
    environ: Mapping[str, str] | None = None,
) -> TrackerConfig:
    """
    Resolve raw inputs into a TrackerConfig.

    Args:
        label: Label whose issues are tracked (required)
        issue_title: Exact title of the tracking issue (required)
        token: API token, defaults to GITHUB_TOKEN
        repo_owner: Owner or organization, defaults to the invoking repository's owner
        repo_name: Repository, defaults to the invoking repository's name
        org_level: Aggregate across every repository of ``repo_owner``
        author: Search qualifier for the tracking issue's author
        api_url: REST API root, defaults to GITHUB_API_URL
        timeout: HTTP timeout in seconds
        dry_run: Compute the body without publishing it
        environ: Environment to read fallbacks from, defaults to os.environ

    Raises:
        MissingInputError: If a required value cannot be determined
        InvalidInputError: If a value cannot be interpreted
    """
    env = os.environ if environ is None else environ

    label = _clean(label)
    if not label:
        raise MissingInputError("label")

    # The title is matched exactly, so only surrounding whitespace is dropped
    issue_title = _clean(issue_title)
    if not issue_title:
        raise MissingInputError("issue_title")

    context_owner, context_name = context_repository(env)
    owner = _clean(repo_owner) or context_owner
    name = _clean(repo_name) or context_name
    if not owner:
        raise MissingInputError("repo_owner")
    if not name:
        raise MissingInputError("repo_name")

    resolved_token = _clean(token) or _clean(env.get("GITHUB_TOKEN"))
    if not resolved_token:
        logger.warning("No token supplied; requests will be unauthenticated")

    return TrackerConfig(
        label=label,
        issue_title=issue_title,
        token=resolved_token,
        repo_owner=owner,
        repo_name=name,
        org_level=parse_bool_input("org_level", org_level),
        author=_clean(author) or DEFAULT_AUTHOR,
        api_url=_clean(api_url) or _clean(env.get("GITHUB_API_URL")) or DEFAULT_API_URL,
        timeout=timeout,
        dry_run=dry_run,
    )
