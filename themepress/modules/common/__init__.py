"""Shared building blocks for theme modules."""

from .exceptions import (
    ChecksumMismatchError,
    ContentNotFoundError,
    FileNotFoundInStoreError,
    InvalidPathError,
    NotFoundError,
    ThemeNotFoundError,
    ThemePressError,
    VersionNotFoundError,
)

__all__ = [
    "ChecksumMismatchError",
    "ContentNotFoundError",
    "FileNotFoundInStoreError",
    "InvalidPathError",
    "NotFoundError",
    "ThemeNotFoundError",
    "ThemePressError",
    "VersionNotFoundError",
]
