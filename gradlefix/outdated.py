"""Classify how outdated an installed Gradle version is."""

from dataclasses import dataclass
from enum import IntEnum

from .releases import LatestVersionContext
from .settings import GradleFixSettings
from .version import GradleVersion, VersionDiff, compare_outdatedness


class Severity(IntEnum):
    NONE = 0
    REVISION = 1
    MINOR = 2
    MAJOR = 3


_SEVERITIES = {
    VersionDiff.EQUAL: Severity.NONE,
    VersionDiff.CURRENT_NEWER: Severity.NONE,
    VersionDiff.REVISION_DIFF: Severity.REVISION,
    VersionDiff.MINOR_DIFF: Severity.MINOR,
    VersionDiff.MAJOR_DIFF: Severity.MAJOR,
}


@dataclass
class OutdatednessReport:
    """How far ``installed`` lags behind ``latest``."""

    severity: Severity
    difference: VersionDiff
    installed: str
    latest: str

    @property
    def is_outdated(self) -> bool:
        return self.severity > Severity.NONE


def classify_outdatedness(installed: GradleVersion, latest: GradleVersion) -> OutdatednessReport:
    difference = compare_outdatedness(installed, latest)
    return OutdatednessReport(
        severity=_SEVERITIES[difference],
        difference=difference,
        installed=str(installed),
        latest=str(latest),
    )


def check_project(
    installed: GradleVersion,
    context: LatestVersionContext,
    settings: GradleFixSettings,
) -> OutdatednessReport | None:
    """Report for a project, or None when notifications are off or no latest version is known yet."""
    if settings.ignore_outdated_version or context.latest is None:
        return None
    return classify_outdatedness(installed, context.latest)
