"""Repository protocol for published snapshot persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from themepress.db.models import (
    PublishedFile as PublishedFileModel,
    PublishedSnapshot as PublishedSnapshotModel,
    ThemeActiveSnapshot as ThemeActiveSnapshotModel,
)


class SnapshotRepository(Protocol):
    async def max_snapshot_number(self, theme_id: str) -> int:
        ...

    async def create_snapshot(
        self,
        *,
        theme_id: str,
        snapshot_number: int,
        published_at: datetime,
        published_by: str,
        checksum: str,
        file_count: int,
    ) -> PublishedSnapshotModel:
        ...

    async def add_file(
        self,
        *,
        snapshot_id: int,
        file_path: str,
        file_type: str,
        content: str,
        checksum: str,
    ) -> PublishedFileModel:
        ...

    async def get_by_number(self, theme_id: str, snapshot_number: int) -> PublishedSnapshotModel | None:
        ...

    async def list_files(self, snapshot_id: int) -> Sequence[PublishedFileModel]:
        ...

    async def list_for_theme(self, theme_id: str) -> Sequence[PublishedSnapshotModel]:
        ...

    async def get_pointer(self, theme_id: str) -> ThemeActiveSnapshotModel | None:
        ...

    async def set_pointer(
        self, theme_id: str, snapshot_id: int, activated_by: str, activated_at: datetime
    ) -> ThemeActiveSnapshotModel:
        ...
