"""Gradle wrapper properties: reading and upgrading the distribution version."""

import re
from dataclasses import dataclass
from pathlib import Path

from .errors import GradleFixError
from .logging import get_logger
from .models import Edit
from .rewrite import apply_all
from .version import GradleVersion, parse_version

logger = get_logger(__name__)

WRAPPER_VERSION_PROPERTY = "distributionUrl"
WRAPPER_PROPERTIES_PATH = Path("gradle") / "wrapper" / "gradle-wrapper.properties"

PROPERTY_LINE = re.compile(r"^[ \t]*(?P<key>[^#!\s=:][^=:\s]*)[ \t]*[=:]?[ \t]*(?P<value>.*?)[ \t]*$", re.MULTILINE)


@dataclass
class WrapperVersion:
    """The Gradle version a project's wrapper is pinned to."""

    version: GradleVersion
    distribution_url: str
    properties_file: Path


def extract_wrapper_version(url: str) -> GradleVersion:
    """Extract the Gradle version from a ``distributionUrl`` value.

    ``https://services.gradle.org/distributions/gradle-6.3-bin.zip`` yields
    ``6.3``; the distribution type suffix is ignored.

    Raises:
        InvalidFormat: If the file name does not carry a Gradle version
    """
    file_name = url.rsplit("/", 1)[-1]
    version = file_name.partition("gradle-")[2] or file_name
    version = version.split(".zip", 1)[0]
    return parse_version(version.split("-")[0])


def read_properties(text: str) -> dict[str, str]:
    """Parse the subset of Java properties syntax Gradle writes.

    Comment lines are skipped and ``\\:`` / ``\\=`` escapes are undone.
    Continuation lines are not supported.
    """
    properties = {}
    for match in PROPERTY_LINE.finditer(text):
        value = match.group("value")
        properties[match.group("key")] = re.sub(r"\\(.)", r"\1", value)
    return properties


def find_wrapper_version(project_dir: Path) -> WrapperVersion | None:
    """Read the wrapper version of the project rooted at ``project_dir``.

    Returns:
        The wrapper version, or None if the project has no wrapper properties
        or they carry no distribution URL
    """
    properties_file = project_dir / WRAPPER_PROPERTIES_PATH
    if not properties_file.is_file():
        logger.debug("No wrapper properties at %s", properties_file)
        return None

    url = read_properties(properties_file.read_text()).get(WRAPPER_VERSION_PROPERTY)
    if url is None:
        logger.debug("%s has no %s property", properties_file, WRAPPER_VERSION_PROPERTY)
        return None

    return WrapperVersion(
        version=extract_wrapper_version(url),
        distribution_url=url,
        properties_file=properties_file,
    )


def upgrade_wrapper(text: str, latest: GradleVersion) -> str:
    """Rewrite the version inside the ``distributionUrl`` property.

    Raises:
        GradleFixError: If the text has no ``distributionUrl`` property
        InvalidFormat: If the current URL carries no Gradle version
    """
    for match in PROPERTY_LINE.finditer(text):
        if match.group("key") != WRAPPER_VERSION_PROPERTY:
            continue

        value_start = match.start("value")
        raw = match.group("value")
        # fails early on URLs without a version
        extract_wrapper_version(read_properties(match.group(0))[WRAPPER_VERSION_PROPERTY])

        name_start = raw.rfind("/") + 1
        version_start = raw.find("gradle-", name_start)
        version_start = name_start if version_start == -1 else version_start + len("gradle-")
        version_end = version_start
        while version_end < len(raw) and raw[version_end] != "-" and not raw.startswith(".zip", version_end):
            version_end += 1

        edit = Edit(value_start + version_start, value_start + version_end, str(latest))
        return apply_all(text, [edit])

    raise GradleFixError(f"No {WRAPPER_VERSION_PROPERTY} property found")
