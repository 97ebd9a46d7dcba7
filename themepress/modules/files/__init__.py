"""Public exports for the versioned theme file store."""

from .models import FileRecord, FileVersion, HistoryPage, LiveFile, SearchHit, SyncReport
from .paths import (
    SETTINGS_DATA_PATH,
    THEME_CONFIG_PATH,
    determine_file_type,
    layout_path,
    section_path,
    template_path,
    validate_path,
)
from .service import VersionedFileStore

__all__ = [
    "SETTINGS_DATA_PATH",
    "THEME_CONFIG_PATH",
    "FileRecord",
    "FileVersion",
    "HistoryPage",
    "LiveFile",
    "SearchHit",
    "SyncReport",
    "VersionedFileStore",
    "determine_file_type",
    "layout_path",
    "section_path",
    "template_path",
    "validate_path",
]
