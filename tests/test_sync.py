"""Tests for the tracker orchestrator."""

import asyncio
from datetime import datetime

import pytest
from conftest import FakeProvider, issue_record

from gh_label_tracker.exceptions import TrackerAPIError
from gh_label_tracker.models import PublishAction, SearchHit, TrackerConfig
from gh_label_tracker.renderer import SECTION_END, SECTION_START
from gh_label_tracker.sync import TrackerSync, run_tracker


class FailingProvider(FakeProvider):
    """Provider whose issue listing fails."""

    async def list_issues_for_repo(self, owner, repo, label, state="all"):
        raise TrackerAPIError("Server Error", 500)


class TestTrackerSync:
    """Tests for TrackerSync.run()."""

    def test_creates_tracking_issue(self, config: TrackerConfig, fixed_now: datetime) -> None:
        provider = FakeProvider(
            issues={"acme/widgets": [issue_record(7, "bob")]},
            next_number=31,
        )

        result = asyncio.run(TrackerSync(provider, config).run(now=fixed_now))

        assert result.action == PublishAction.CREATED
        assert result.number == 31
        assert result.item_count == 1
        assert provider.called("update_issue") == []
        ((owner, repo, title, body),) = provider.called("create_issue")
        assert (owner, repo, title) == ("acme", "widgets", "Tracker")
        assert "- #7 (Assigned to: bob)" in body.splitlines()
        assert body == result.body
        assert body.startswith(SECTION_START)
        assert body.endswith(SECTION_END)

    def test_updates_existing_issue(self, config: TrackerConfig, fixed_now: datetime) -> None:
        existing = f"Written by a human.\n\n{SECTION_START}\n- #1\n{SECTION_END}\n\nFooter."
        provider = FakeProvider(
            issues={"acme/widgets": [issue_record(7, "bob"), issue_record(3)]},
            tracking_issue=SearchHit(number=12, title="Tracker", body=existing),
        )

        result = asyncio.run(TrackerSync(provider, config).run(now=fixed_now))

        assert result.action == PublishAction.UPDATED
        assert result.number == 12
        assert provider.called("create_issue") == []
        ((owner, repo, number, body),) = provider.called("update_issue")
        assert (owner, repo, number) == ("acme", "widgets", 12)
        assert body.startswith("Written by a human.\n\n" + SECTION_START)
        assert body.endswith(SECTION_END + "\n\nFooter.")
        lines = body.splitlines()
        assert lines.index("- #3") < lines.index("- #7 (Assigned to: @bob)")
        assert "- #1" not in lines

    def test_second_run_is_stable(self, config: TrackerConfig, fixed_now: datetime) -> None:
        provider = FakeProvider(
            issues={"acme/widgets": [issue_record(7, "bob")]},
            tracking_issue=SearchHit(number=12, title="Tracker", body="Intro"),
        )
        first = asyncio.run(TrackerSync(provider, config).run(now=fixed_now))

        provider.tracking_issue = SearchHit(number=12, title="Tracker", body=first.body)
        second = asyncio.run(TrackerSync(provider, config).run(now=fixed_now))

        assert second.body == first.body

    def test_org_scope(self, org_config: TrackerConfig, fixed_now: datetime) -> None:
        provider = FakeProvider(
            repositories={"acme": ["widgets", "gadgets"]},
            issues={
                "acme/widgets": [issue_record(42)],
                "acme/gadgets": [issue_record(8, "carol")],
            },
        )

        result = asyncio.run(TrackerSync(provider, org_config).run(now=fixed_now))

        lines = result.body.splitlines()
        assert "# Issues with the `tracked` label in the organization" in lines
        assert lines.index("- acme/widgets#42") < lines.index(
            "- acme/gadgets#8 (Assigned to: carol)"
        )
        # The tracking issue still lives in the configured repository
        ((owner, repo, _title, _body),) = provider.called("create_issue")
        assert (owner, repo) == ("acme", "widgets")

    def test_dry_run_publishes_nothing(self, config: TrackerConfig, fixed_now: datetime) -> None:
        provider = FakeProvider(issues={"acme/widgets": [issue_record(7)]})
        dry = config.model_copy(update={"dry_run": True})

        result = asyncio.run(TrackerSync(provider, dry).run(now=fixed_now))

        assert result.action == PublishAction.SKIPPED
        assert "- #7" in result.body
        assert provider.called("create_issue") == []
        assert provider.called("update_issue") == []

    def test_api_error_aborts_run(self, config: TrackerConfig) -> None:
        provider = FailingProvider()

        with pytest.raises(TrackerAPIError):
            asyncio.run(TrackerSync(provider, config).run())

        assert provider.called("create_issue") == []
        assert provider.called("update_issue") == []


def test_run_tracker_leaves_given_provider_open(config: TrackerConfig) -> None:
    provider = FakeProvider()

    result = run_tracker(config, provider=provider)

    assert result.action == PublishAction.CREATED
    assert not provider.closed


def test_similar_title_is_not_reused(config: TrackerConfig, fixed_now: datetime) -> None:
    provider = FakeProvider(
        issues={"acme/widgets": [issue_record(7)]},
        search_hits=[SearchHit(number=5, title="Bug Tracker", body="Bug section")],
        next_number=40,
    )

    result = asyncio.run(TrackerSync(provider, config).run(now=fixed_now))

    assert result.action == PublishAction.CREATED
    assert result.number == 40
    assert provider.called("update_issue") == []
    assert "Bug section" not in result.body
