"""Publishing specific exceptions."""

from themepress.modules.common.exceptions import NotFoundError, ThemePressError


class PublishError(ThemePressError):
    """Base class for publish pipeline failures."""


class PublishConflictError(PublishError):
    """Raised when a concurrent publish claimed the same snapshot number."""


class EmptyDraftError(PublishError):
    """Raised when publishing a theme whose draft has no live files."""


class SnapshotNotFoundError(NotFoundError):
    """Raised when a theme has no snapshot with the requested number."""


class NoActiveSnapshotError(NotFoundError):
    """Raised when a theme has never been published."""
