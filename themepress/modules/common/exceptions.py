"""Error kinds shared by the storage, publishing and rendering modules."""


class ThemePressError(Exception):
    """Base class for theme domain errors."""


class InvalidPathError(ThemePressError):
    """Raised when a file path fails validation; no I/O has happened."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Invalid path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class NotFoundError(ThemePressError):
    """Base class for missing files, versions, snapshots and themes."""


class FileNotFoundInStoreError(NotFoundError):
    """Raised when no live file exists at the requested path."""


class VersionNotFoundError(NotFoundError):
    """Raised when a file has no version with the requested number."""


class ThemeNotFoundError(NotFoundError):
    """Raised when the theme is neither registered nor packaged."""


class ContentNotFoundError(NotFoundError):
    """Raised by content resolvers for unknown logical paths."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No content at {path!r}")
        self.path = path


class ChecksumMismatchError(ThemePressError):
    """Raised when stored content no longer hashes to its recorded checksum."""

    def __init__(self, path: str, expected: str, actual: str) -> None:
        super().__init__(f"Checksum mismatch for {path!r}: expected {expected}, got {actual}")
        self.path = path
        self.expected = expected
        self.actual = actual
