"""Exception types raised by the GradleFix core."""


class GradleFixError(Exception):
    """Base class for all GradleFix errors."""


class InvalidFormat(GradleFixError, ValueError):
    """A version string does not follow the ``major.minor[.revision]`` grammar."""

    def __init__(self, text: str):
        super().__init__(f"Invalid Gradle version format: {text!r}")
        self.text = text


class NotConvertible(GradleFixError):
    """A dependency declaration cannot be decomposed without losing information.

    Callers are expected to check ``is_convertible`` before calling ``extract``.
    """


class UnsupportedOperation(GradleFixError, NotImplementedError):
    """The requested operation is not available for this declaration format."""


class NoStableReleaseFound(GradleFixError):
    """The release feed did not contain a single usable stable release."""


class FeedError(GradleFixError):
    """The release feed could not be fetched or decoded."""
