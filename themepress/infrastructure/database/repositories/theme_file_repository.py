"""SQLAlchemy implementation for the theme file repository."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import and_, func, select

from themepress.db.models import ThemeFile, ThemeFileVersion
from themepress.modules.common.repository import AsyncRepository


class SqlThemeFileRepository(AsyncRepository[ThemeFile]):
    async def get_record(self, theme_id: str, file_path: str) -> ThemeFile | None:
        stmt = (
            select(ThemeFile)
            .where(ThemeFile.theme_id == theme_id)
            .where(ThemeFile.file_path == file_path)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create_record(
        self,
        *,
        theme_id: str,
        file_path: str,
        file_type: str,
        checksum: str,
    ) -> ThemeFile:
        record = ThemeFile(
            theme_id=theme_id,
            file_path=file_path,
            file_type=file_type,
            current_checksum=checksum,
        )
        return await self.add(record)

    async def set_current(self, record: ThemeFile, checksum: str) -> ThemeFile:
        record.current_checksum = checksum
        record.deleted_at = None
        await self.session.flush()
        return record

    async def mark_deleted(self, record: ThemeFile, deleted_at: datetime) -> ThemeFile:
        record.deleted_at = deleted_at
        await self.session.flush()
        return record

    async def max_version_number(self, record_id: int) -> int:
        stmt = select(func.max(ThemeFileVersion.version_number)).where(
            ThemeFileVersion.theme_file_id == record_id
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

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
    ) -> ThemeFileVersion:
        version = ThemeFileVersion(
            theme_file_id=record_id,
            version_number=version_number,
            content=content,
            content_size=len(content.encode("utf-8")),
            checksum=checksum,
            author=author,
            change_summary=change_summary,
            created_at=created_at,
        )
        return await self.add(version)

    async def latest_version(self, record_id: int) -> ThemeFileVersion | None:
        stmt = (
            select(ThemeFileVersion)
            .where(ThemeFileVersion.theme_file_id == record_id)
            .order_by(ThemeFileVersion.version_number.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_version(self, record_id: int, version_number: int) -> ThemeFileVersion | None:
        stmt = (
            select(ThemeFileVersion)
            .where(ThemeFileVersion.theme_file_id == record_id)
            .where(ThemeFileVersion.version_number == version_number)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_versions(self, record_id: int, limit: int, offset: int) -> Sequence[ThemeFileVersion]:
        stmt = (
            select(ThemeFileVersion)
            .where(ThemeFileVersion.theme_file_id == record_id)
            .order_by(ThemeFileVersion.version_number.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def count_versions(self, record_id: int) -> int:
        stmt = select(func.count(ThemeFileVersion.id)).where(ThemeFileVersion.theme_file_id == record_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def list_live_records(self, theme_id: str) -> Sequence[ThemeFile]:
        stmt = (
            select(ThemeFile)
            .where(ThemeFile.theme_id == theme_id)
            .where(ThemeFile.deleted_at.is_(None))
            .order_by(ThemeFile.file_path)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_live_contents(self, theme_id: str) -> Sequence[tuple[ThemeFile, ThemeFileVersion]]:
        latest = (
            select(
                ThemeFileVersion.theme_file_id.label("theme_file_id"),
                func.max(ThemeFileVersion.version_number).label("version_number"),
            )
            .group_by(ThemeFileVersion.theme_file_id)
            .subquery()
        )
        stmt = (
            select(ThemeFile, ThemeFileVersion)
            .join(latest, latest.c.theme_file_id == ThemeFile.id)
            .join(
                ThemeFileVersion,
                and_(
                    ThemeFileVersion.theme_file_id == ThemeFile.id,
                    ThemeFileVersion.version_number == latest.c.version_number,
                ),
            )
            .where(ThemeFile.theme_id == theme_id)
            .where(ThemeFile.deleted_at.is_(None))
            .order_by(ThemeFile.file_path)
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def current_checksums(self, theme_id: str) -> dict[str, str]:
        stmt = (
            select(ThemeFile.file_path, ThemeFile.current_checksum)
            .where(ThemeFile.theme_id == theme_id)
            .where(ThemeFile.deleted_at.is_(None))
        )
        result = await self.session.execute(stmt)
        return {path: checksum for path, checksum in result.all()}
