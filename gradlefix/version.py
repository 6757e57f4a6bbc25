"""Gradle version model and outdatedness comparison."""

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

from .errors import InvalidFormat

VERSION_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)(?:\.([0-9]+))?")


class VersionDiff(Enum):
    """How far an installed version lags behind the latest one."""

    EQUAL = "equal"
    REVISION_DIFF = "revision"
    MINOR_DIFF = "minor"
    MAJOR_DIFF = "major"
    CURRENT_NEWER = "current_newer"


@total_ordering
@dataclass(frozen=True, eq=False)
class GradleVersion:
    """A ``major.minor[.revision]`` Gradle version.

    Ordering and equality treat a missing revision as ``0``, so ``1.2`` and
    ``1.2.0`` compare equal. Rendering keeps the form the version was built
    with.
    """

    major: int
    minor: int
    revision: int | None = None

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return self.major, self.minor, self.revision or 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GradleVersion):
            return NotImplemented
        return self.sort_key == other.sort_key

    def __lt__(self, other: "GradleVersion") -> bool:
        if not isinstance(other, GradleVersion):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __hash__(self) -> int:
        return hash(self.sort_key)

    def __str__(self) -> str:
        if self.revision is None:
            return f"{self.major}.{self.minor}"
        return f"{self.major}.{self.minor}.{self.revision}"


def parse_version(text: str) -> GradleVersion:
    """Parse a dotted numeric Gradle version.

    Args:
        text: Version string such as ``"8.5"`` or ``"7.6.1"``

    Returns:
        Parsed GradleVersion

    Raises:
        InvalidFormat: If the text does not match ``major.minor[.revision]``
    """
    match = VERSION_PATTERN.fullmatch(text)
    if not match:
        raise InvalidFormat(text)

    major, minor, revision = match.groups()
    return GradleVersion(int(major), int(minor), int(revision) if revision is not None else None)


def compare_outdatedness(current: GradleVersion, latest: GradleVersion) -> VersionDiff:
    """Tell whether ``current`` is outdated relative to ``latest`` and by how much.

    The first differing component decides the result. This is directional:
    when ``current`` is ahead of ``latest`` the answer is always
    ``CURRENT_NEWER`` regardless of which component differs.
    """
    if current.major != latest.major:
        return VersionDiff.CURRENT_NEWER if latest.major < current.major else VersionDiff.MAJOR_DIFF
    if current.minor != latest.minor:
        return VersionDiff.CURRENT_NEWER if latest.minor < current.minor else VersionDiff.MINOR_DIFF

    current_revision = current.revision or 0
    latest_revision = latest.revision or 0
    if current_revision != latest_revision:
        return VersionDiff.CURRENT_NEWER if latest_revision < current_revision else VersionDiff.REVISION_DIFF

    return VersionDiff.EQUAL
