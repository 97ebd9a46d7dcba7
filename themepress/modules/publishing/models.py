"""Domain models for published theme snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True, slots=True)
class PublishedFile:
    file_path: str
    file_type: str
    content: str
    checksum: str


@dataclass(frozen=True, slots=True)
class PublishedSnapshot:
    """Immutable copy of a theme's full file set at publish time."""

    id: int
    theme_id: str
    snapshot_number: int
    published_at: datetime
    published_by: str
    checksum: str
    files: tuple[PublishedFile, ...]

    def file(self, path: str) -> Optional[PublishedFile]:
        for item in self.files:
            if item.file_path == path:
                return item
        return None

    @property
    def tree(self) -> Mapping[str, str]:
        return MappingProxyType({item.file_path: item.content for item in self.files})

    @property
    def checksums(self) -> Mapping[str, str]:
        return MappingProxyType({item.file_path: item.checksum for item in self.files})


@dataclass(frozen=True, slots=True)
class SnapshotSummary:
    id: int
    theme_id: str
    snapshot_number: int
    published_at: datetime
    published_by: str
    checksum: str
    file_count: int
    is_active: bool


@dataclass(frozen=True, slots=True)
class SnapshotDiff:
    from_number: int
    to_number: int
    added: tuple[str, ...]
    removed: tuple[str, ...]
    changed: tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)
