"""Tests for the Gradle release feed."""

import httpx
import pytest
import respx

from gradlefix.errors import FeedError, NoStableReleaseFound
from gradlefix.releases import RELEASE_FEED_URL, LatestVersionContext, ReleaseDescriptor, ReleaseFeed, select_latest
from gradlefix.version import GradleVersion

FEED = [
    {"version": "8.6-20240101000000+0000", "nightly": True, "snapshot": True},
    {"version": "8.6-rc-1", "rcFor": "8.6", "activeRc": True},
    {"version": "8.6-milestone-1", "milestoneFor": "8.6"},
    {"version": "8.5", "buildTime": "20231129140857+0000"},
    {"version": "8.4", "broken": False},
    {"version": "8.10.2"},
    {"version": "9.0", "broken": True},
    {"version": "0.9-preview-1"},
]


class TestReleaseDescriptor:
    """Test stability filtering."""

    def test_aliases(self):
        descriptor = ReleaseDescriptor.model_validate({"version": "8.6-rc-1", "rcFor": "8.6", "activeRc": True})
        assert descriptor.rc_for == "8.6"
        assert descriptor.active_rc
        assert not descriptor.is_stable

    @pytest.mark.parametrize(
        "entry",
        [
            {"version": "8.6-x", "nightly": True},
            {"version": "8.6-x", "snapshot": True},
            {"version": "8.6-x", "releaseNightly": True},
            {"version": "8.6-x", "milestoneFor": "8.6"},
            {"version": "8.6", "broken": True},
        ],
    )
    def test_unstable(self, entry):
        assert not ReleaseDescriptor.model_validate(entry).is_stable

    def test_stable(self):
        assert ReleaseDescriptor(version="8.5").is_stable


class TestSelectLatest:
    def test_highest_stable(self):
        descriptors = [ReleaseDescriptor.model_validate(entry) for entry in FEED]
        assert select_latest(descriptors) == GradleVersion(8, 10, 2)

    def test_unparseable_skipped(self):
        descriptors = [ReleaseDescriptor(version="0.9-preview-1"), ReleaseDescriptor(version="7.0")]
        assert select_latest(descriptors) == GradleVersion(7, 0)

    def test_none_stable(self):
        with pytest.raises(NoStableReleaseFound):
            select_latest([ReleaseDescriptor(version="8.6-rc-1", rcFor="8.6")])
        with pytest.raises(NoStableReleaseFound):
            select_latest([])


class TestReleaseFeed:
    """Test fetching the feed over HTTP."""

    @pytest.mark.asyncio
    async def test_fetch_latest(self):
        with respx.mock:
            respx.get(RELEASE_FEED_URL).mock(return_value=httpx.Response(200, json=FEED))
            assert await ReleaseFeed().latest() == GradleVersion(8, 10, 2)

    @pytest.mark.asyncio
    async def test_http_error(self):
        with respx.mock:
            respx.get(RELEASE_FEED_URL).mock(return_value=httpx.Response(500))
            with pytest.raises(FeedError):
                await ReleaseFeed().fetch()

    @pytest.mark.asyncio
    async def test_network_error(self):
        with respx.mock:
            respx.get(RELEASE_FEED_URL).mock(side_effect=httpx.ConnectError("Connection refused"))
            with pytest.raises(FeedError):
                await ReleaseFeed().fetch()

    @pytest.mark.asyncio
    async def test_malformed_payload(self):
        with respx.mock:
            respx.get(RELEASE_FEED_URL).mock(return_value=httpx.Response(200, json={"version": "8.5"}))
            with pytest.raises(FeedError):
                await ReleaseFeed().fetch()

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        with respx.mock:
            respx.get(RELEASE_FEED_URL).mock(return_value=httpx.Response(200, text="<html>"))
            with pytest.raises(FeedError):
                await ReleaseFeed().fetch()


class TestLatestVersionContext:
    """Test the latest version cell."""

    def test_not_yet_available(self):
        context = LatestVersionContext()
        assert context.latest is None
        assert not context.is_available
        assert context.refreshed_at is None

    @pytest.mark.asyncio
    async def test_refresh(self):
        context = LatestVersionContext()
        with respx.mock:
            respx.get(RELEASE_FEED_URL).mock(return_value=httpx.Response(200, json=FEED))
            assert await context.refresh(ReleaseFeed()) == GradleVersion(8, 10, 2)
        assert context.latest == GradleVersion(8, 10, 2)
        assert context.refreshed_at is not None

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_previous(self):
        context = LatestVersionContext(GradleVersion(8, 5))
        with respx.mock:
            respx.get(RELEASE_FEED_URL).mock(return_value=httpx.Response(503))
            with pytest.raises(FeedError):
                await context.refresh(ReleaseFeed())
        assert context.latest == GradleVersion(8, 5)

    @pytest.mark.asyncio
    async def test_refresh_without_stable_release(self):
        context = LatestVersionContext(GradleVersion(8, 5))
        with respx.mock:
            respx.get(RELEASE_FEED_URL).mock(return_value=httpx.Response(200, json=FEED[:3]))
            with pytest.raises(NoStableReleaseFound):
                await context.refresh(ReleaseFeed())
        assert context.latest == GradleVersion(8, 5)
