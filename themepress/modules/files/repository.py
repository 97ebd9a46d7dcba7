"""Repository protocol for theme file persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from themepress.db.models import ThemeFile as ThemeFileModel, ThemeFileVersion as ThemeFileVersionModel


class ThemeFileRepository(Protocol):
    async def get_record(self, theme_id: str, file_path: str) -> ThemeFileModel | None:
        ...

    async def create_record(
        self,
        *,
        theme_id: str,
        file_path: str,
        file_type: str,
        checksum: str,
    ) -> ThemeFileModel:
        ...

    async def set_current(self, record: ThemeFileModel, checksum: str) -> ThemeFileModel:
        ...

    async def mark_deleted(self, record: ThemeFileModel, deleted_at: datetime) -> ThemeFileModel:
        ...

    async def max_version_number(self, record_id: int) -> int:
        ...

    async def add_version(
        self,
        *,
        record_id: int,
        version_number: int,
        content: str,
        checksum: str,
        author: str,
        change_summary: str | None,
        created_at: datetime,
    ) -> ThemeFileVersionModel:
        ...

    async def latest_version(self, record_id: int) -> ThemeFileVersionModel | None:
        ...

    async def get_version(self, record_id: int, version_number: int) -> ThemeFileVersionModel | None:
        ...

    async def list_versions(self, record_id: int, limit: int, offset: int) -> Sequence[ThemeFileVersionModel]:
        ...

    async def count_versions(self, record_id: int) -> int:
        ...

    async def list_live_records(self, theme_id: str) -> Sequence[ThemeFileModel]:
        ...

    async def list_live_contents(
        self, theme_id: str
    ) -> Sequence[tuple[ThemeFileModel, ThemeFileVersionModel]]:
        ...

    async def current_checksums(self, theme_id: str) -> dict[str, str]:
        ...
