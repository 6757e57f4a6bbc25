"""Gradle release feed and the process-wide latest version."""

from collections.abc import Iterable
from datetime import datetime, timezone

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import FeedError, InvalidFormat, NoStableReleaseFound
from .logging import get_logger
from .version import GradleVersion, parse_version

logger = get_logger(__name__)

RELEASE_FEED_URL = "https://services.gradle.org/versions/all"


class ReleaseDescriptor(BaseModel):
    """One entry of the Gradle services version feed."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: str
    nightly: bool = False
    snapshot: bool = False
    release_nightly: bool = Field(default=False, alias="releaseNightly")
    active_rc: bool = Field(default=False, alias="activeRc")
    rc_for: str = Field(default="", alias="rcFor")
    milestone_for: str = Field(default="", alias="milestoneFor")
    broken: bool = False

    @property
    def is_stable(self) -> bool:
        """Final, non-broken release (no nightly, snapshot, RC or milestone)."""
        return not (
            self.nightly
            or self.snapshot
            or self.release_nightly
            or self.active_rc
            or self.rc_for
            or self.milestone_for
            or self.broken
        )


def select_latest(descriptors: Iterable[ReleaseDescriptor]) -> GradleVersion:
    """Pick the highest stable release.

    Raises:
        NoStableReleaseFound: If no stable entry carries a parseable version
    """
    versions = []
    for descriptor in descriptors:
        if not descriptor.is_stable:
            continue
        try:
            versions.append(parse_version(descriptor.version))
        except InvalidFormat:
            logger.debug("Skipping release with unsupported version %s", descriptor.version)

    if not versions:
        raise NoStableReleaseFound("The release feed contains no stable Gradle release")
    return max(versions)


class ReleaseFeed:
    """Client for the Gradle services version feed."""

    def __init__(self, url: str = RELEASE_FEED_URL, timeout: float = 30.0):
        """Initialize the feed client.

        Args:
            url: Feed endpoint returning a JSON array of releases
            timeout: Request timeout in seconds
        """
        self.url = url
        self.timeout = timeout

    async def fetch(self) -> list[ReleaseDescriptor]:
        """Download and decode every release entry.

        Raises:
            FeedError: On network, HTTP or decoding failures
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as e:
            raise FeedError(f"Timeout fetching {self.url}") from e
        except httpx.HTTPStatusError as e:
            raise FeedError(f"HTTP error fetching {self.url}: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FeedError(f"Network error fetching {self.url}: {e}") from e
        except ValueError as e:
            raise FeedError(f"Malformed release feed: {e}") from e

        if not isinstance(payload, list):
            raise FeedError("Malformed release feed: expected a JSON array")
        try:
            return [ReleaseDescriptor.model_validate(entry) for entry in payload]
        except ValidationError as e:
            raise FeedError(f"Malformed release entry: {e}") from e

    async def latest(self) -> GradleVersion:
        return select_latest(await self.fetch())


class LatestVersionContext:
    """Holds the most recently fetched latest Gradle version.

    ``latest`` is None until the first successful refresh. A failed refresh
    keeps the previous value.
    """

    def __init__(self, latest: GradleVersion | None = None):
        self.latest = latest
        self.refreshed_at: datetime | None = None

    @property
    def is_available(self) -> bool:
        return self.latest is not None

    async def refresh(self, feed: ReleaseFeed) -> GradleVersion:
        """Fetch the latest version and publish it.

        Raises:
            FeedError: If the feed cannot be fetched
            NoStableReleaseFound: If the feed has no stable release
        """
        try:
            latest = await feed.latest()
        except (FeedError, NoStableReleaseFound) as e:
            logger.warning("Could not refresh latest Gradle version: %s", e)
            raise

        self.latest = latest
        self.refreshed_at = datetime.now(timezone.utc)
        logger.debug("Latest Gradle version is %s", latest)
        return latest
