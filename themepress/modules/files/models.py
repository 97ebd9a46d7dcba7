"""Domain models for the versioned theme file store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class FileRecord:
    id: int
    theme_id: str
    file_path: str
    file_type: str
    current_checksum: str
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True, slots=True)
class FileVersion:
    id: int
    file_record_id: int
    theme_id: str
    file_path: str
    version_number: int
    content: str
    content_size: int
    checksum: str
    author: str
    change_summary: Optional[str]
    created_at: datetime


@dataclass(slots=True)
class HistoryPage:
    total: int
    versions: list[FileVersion]
    limit: int
    offset: int


@dataclass(frozen=True, slots=True)
class LiveFile:
    """Latest content of a live file, as copied into snapshots."""

    file_path: str
    file_type: str
    content: str
    checksum: str


@dataclass(frozen=True, slots=True)
class SearchHit:
    file_path: str
    line: int
    column: int
    text: str


@dataclass(slots=True)
class SyncReport:
    theme_id: str
    scanned: int = 0
    written: int = 0
    unchanged: int = 0
    skipped: list[str] = field(default_factory=list)
    last_path: Optional[str] = None
    cancelled: bool = False

    @property
    def changed(self) -> bool:
        return self.written > 0
