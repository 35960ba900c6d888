"""
Exception hierarchy for gh-label-tracker.

This module defines custom exceptions with clear messages and
actionable guidance for users.
"""


class LabelTrackerError(Exception):
    """Base exception for all gh-label-tracker errors."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


# Issue Tracker API Errors


class TrackerClientError(LabelTrackerError):
    """Base class for issue tracker API related errors."""


class TrackerAuthError(TrackerClientError):
    """Authentication failed or the token lacks permissions."""

    def __init__(self, details: str = "") -> None:
        message = "GitHub authentication failed"
        if details:
            message = f"{message}: {details}"
        super().__init__(
            message,
            "Pass a token with the 'issues: write' permission via the token input "
            "or the GITHUB_TOKEN environment variable",
        )


class TrackerAPIError(TrackerClientError):
    """The GitHub API returned an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        status_info = f" (HTTP {status_code})" if status_code else ""
        super().__init__(
            f"GitHub API error{status_info}: {message}",
            "Check that the repository exists and the token has access to it",
        )


class TrackerNetworkError(TrackerClientError):
    """Network error communicating with GitHub."""

    def __init__(self, details: str = "") -> None:
        message = "Network error connecting to GitHub"
        if details:
            message = f"{message}: {details}"
        super().__init__(
            message,
            "Check the API URL and network access; the next scheduled run will retry",
        )


class TrackerRateLimitError(TrackerClientError):
    """GitHub API rate limit exceeded."""

    def __init__(self, reset_time: str | None = None) -> None:
        message = "GitHub API rate limit exceeded"
        hint = "Wait a few minutes and try again"
        if reset_time:
            hint = f"Rate limit resets at {reset_time}. Wait and try again."
        super().__init__(message, hint)


class TrackerTimeoutError(TrackerClientError):
    """A request to the GitHub API timed out."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            f"GitHub API request timed out after {timeout_seconds:g} seconds",
            "Increase --timeout or check your network",
        )


# Configuration Errors


class ConfigError(LabelTrackerError):
    """Configuration error."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message, hint)


class MissingInputError(ConfigError):
    """A required input was not supplied."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Input required and not supplied: {name}",
            f"Set '{name}' in the workflow 'with:' block "
            f"or pass --{name.replace('_', '-')}",
        )


class InvalidInputError(ConfigError):
    """An input was supplied but could not be interpreted."""

    def __init__(self, name: str, value: str, expected: str) -> None:
        self.name = name
        super().__init__(
            f"Invalid value for input '{name}': '{value}'",
            f"Expected {expected}",
        )
