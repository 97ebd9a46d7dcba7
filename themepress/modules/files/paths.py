"""Validation and classification of theme-relative file paths."""

from __future__ import annotations

import re

from themepress.modules.common.exceptions import InvalidPathError

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")

FILE_TYPE_PREFIXES = (
    ("templates/", "template"),
    ("sections/", "section"),
    ("layout/", "layout"),
    ("assets/", "asset"),
    ("config/", "config"),
)

MAX_PATH_LENGTH = 500


def validate_path(path: str) -> str:
    """Return ``path`` unchanged when it is a clean relative POSIX path.

    Nothing is normalized: anything that would need normalizing is rejected.
    """
    if not isinstance(path, str) or not path:
        raise InvalidPathError(str(path), "path is empty")
    if len(path) > MAX_PATH_LENGTH:
        raise InvalidPathError(path, f"path longer than {MAX_PATH_LENGTH} characters")
    if "\0" in path:
        raise InvalidPathError(path, "path contains a NUL byte")
    if "\\" in path:
        raise InvalidPathError(path, "backslashes are not allowed")
    if path.startswith("/") or path.startswith("~") or _DRIVE_PREFIX.match(path):
        raise InvalidPathError(path, "absolute paths are not allowed")
    for segment in path.split("/"):
        if segment == "..":
            raise InvalidPathError(path, "parent directory traversal is not allowed")
        if segment in ("", "."):
            raise InvalidPathError(path, "empty or '.' segments are not allowed")
    return path


def determine_file_type(path: str) -> str:
    for prefix, file_type in FILE_TYPE_PREFIXES:
        if path.startswith(prefix):
            return file_type
    return "other"


def template_path(template_name: str) -> str:
    return validate_path(f"templates/{template_name}.json")


def section_path(section_type: str) -> str:
    return validate_path(f"sections/{section_type}.html")


def layout_path(layout_name: str) -> str:
    return validate_path(f"layout/{layout_name}.html")


SETTINGS_DATA_PATH = "config/settings_data.json"
THEME_CONFIG_PATH = "config/theme.json"

__all__ = [
    "SETTINGS_DATA_PATH",
    "THEME_CONFIG_PATH",
    "determine_file_type",
    "layout_path",
    "section_path",
    "template_path",
    "validate_path",
]
