"""SQLAlchemy implementation for published snapshots and the active pointer."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import func, select

from themepress.db.models import PublishedFile, PublishedSnapshot, ThemeActiveSnapshot
from themepress.modules.common.repository import AsyncRepository


class SqlSnapshotRepository(AsyncRepository[PublishedSnapshot]):
    async def max_snapshot_number(self, theme_id: str) -> int:
        stmt = select(func.max(PublishedSnapshot.snapshot_number)).where(PublishedSnapshot.theme_id == theme_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def create_snapshot(
        self,
        *,
        theme_id: str,
        snapshot_number: int,
        published_at: datetime,
        published_by: str,
        checksum: str,
        file_count: int,
    ) -> PublishedSnapshot:
        snapshot = PublishedSnapshot(
            theme_id=theme_id,
            snapshot_number=snapshot_number,
            published_at=published_at,
            published_by=published_by,
            checksum=checksum,
            file_count=file_count,
        )
        return await self.add(snapshot)

    async def add_file(
        self,
        *,
        snapshot_id: int,
        file_path: str,
        file_type: str,
        content: str,
        checksum: str,
    ) -> PublishedFile:
        published = PublishedFile(
            snapshot_id=snapshot_id,
            file_path=file_path,
            file_type=file_type,
            content=content,
            checksum=checksum,
        )
        return self.stage(published)

    async def get_by_number(self, theme_id: str, snapshot_number: int) -> PublishedSnapshot | None:
        stmt = (
            select(PublishedSnapshot)
            .where(PublishedSnapshot.theme_id == theme_id)
            .where(PublishedSnapshot.snapshot_number == snapshot_number)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_id(self, snapshot_id: int) -> PublishedSnapshot | None:
        stmt = select(PublishedSnapshot).where(PublishedSnapshot.id == snapshot_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_files(self, snapshot_id: int) -> Sequence[PublishedFile]:
        stmt = (
            select(PublishedFile)
            .where(PublishedFile.snapshot_id == snapshot_id)
            .order_by(PublishedFile.file_path)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_for_theme(self, theme_id: str) -> Sequence[PublishedSnapshot]:
        stmt = (
            select(PublishedSnapshot)
            .where(PublishedSnapshot.theme_id == theme_id)
            .order_by(PublishedSnapshot.snapshot_number.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_pointer(self, theme_id: str) -> ThemeActiveSnapshot | None:
        stmt = select(ThemeActiveSnapshot).where(ThemeActiveSnapshot.theme_id == theme_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def set_pointer(
        self, theme_id: str, snapshot_id: int, activated_by: str, activated_at: datetime
    ) -> ThemeActiveSnapshot:
        pointer = await self.get_pointer(theme_id)
        if pointer is None:
            pointer = self.stage(ThemeActiveSnapshot(theme_id=theme_id))
        pointer.snapshot_id = snapshot_id
        pointer.activated_by = activated_by
        pointer.activated_at = activated_at
        await self.session.flush()
        return pointer
