"""Versioned, checksum-deduplicated file store for theme files."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from themepress.core.checksum import content_checksum
from themepress.core.locks import KeyedLock
from themepress.db.models import ThemeFile as ThemeFileModel, ThemeFileVersion as ThemeFileVersionModel
from themepress.infrastructure.database.repositories.theme_file_repository import SqlThemeFileRepository
from themepress.infrastructure.database.repositories.theme_repository import SqlThemeRepository
from themepress.modules.common.exceptions import (
    ChecksumMismatchError,
    FileNotFoundInStoreError,
    InvalidPathError,
    VersionNotFoundError,
)

from .models import FileRecord, FileVersion, HistoryPage, LiveFile, SearchHit, SyncReport
from .paths import determine_file_type, validate_path
from .repository import ThemeFileRepository

logger = logging.getLogger(__name__)

SyncSource = Union[Path, Mapping[str, str]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class VersionedFileStore:
    """Append-only version chains keyed by ``(theme_id, file_path)``.

    Every operation runs in its own short transaction. Writers of the same key
    are serialized in-process by ``locks``; the unique constraint on
    ``(theme_file_id, version_number)`` plus a bounded retry covers writers in
    other processes.
    """

    session_factory: async_sessionmaker[AsyncSession]
    locks: KeyedLock = field(default_factory=KeyedLock)
    history_page_size: int = 20
    max_history_page_size: int = 200
    max_write_attempts: int = 3

    def _repository(self, session: AsyncSession) -> ThemeFileRepository:
        return SqlThemeFileRepository(session)

    async def write(
        self,
        theme_id: str,
        path: str,
        content: str,
        author: str,
        *,
        change_summary: Optional[str] = None,
    ) -> FileVersion:
        path = validate_path(path)
        checksum = content_checksum(content)
        async with self.locks.hold((theme_id, path)):
            return await self._write_with_retry(
                theme_id, path, content, checksum, author, change_summary or "Saved"
            )

    async def read(self, theme_id: str, path: str) -> str:
        version = await self.latest_version(theme_id, path)
        return version.content

    async def latest_version(self, theme_id: str, path: str) -> FileVersion:
        path = validate_path(path)
        async with self.session_factory() as session:
            repo = self._repository(session)
            record = await self._live_record(repo, theme_id, path)
            latest = await repo.latest_version(record.id)
            if latest is None:
                raise FileNotFoundInStoreError(f"{theme_id}:{path} has no versions")
            return self._to_version(record, latest)

    async def get_version(self, theme_id: str, path: str, version_number: int) -> FileVersion:
        path = validate_path(path)
        async with self.session_factory() as session:
            repo = self._repository(session)
            record = await self._any_record(repo, theme_id, path)
            version = await repo.get_version(record.id, version_number)
            if version is None:
                raise VersionNotFoundError(f"{theme_id}:{path} has no version {version_number}")
            return self._to_version(record, version)

    async def history(
        self,
        theme_id: str,
        path: str,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> HistoryPage:
        """Versions of one file, most recent first; deleted files keep their history."""
        path = validate_path(path)
        limit = min(max(limit or self.history_page_size, 1), self.max_history_page_size)
        offset = max(offset, 0)
        async with self.session_factory() as session:
            repo = self._repository(session)
            record = await self._any_record(repo, theme_id, path)
            rows = await repo.list_versions(record.id, limit, offset)
            total = await repo.count_versions(record.id)
            return HistoryPage(
                total=total,
                versions=[self._to_version(record, row) for row in rows],
                limit=limit,
                offset=offset,
            )

    async def restore(self, theme_id: str, path: str, version_number: int, author: str) -> FileVersion:
        """Append the content of an older version as the newest one."""
        path = validate_path(path)
        async with self.locks.hold((theme_id, path)):
            async with self.session_factory() as session:
                repo = self._repository(session)
                record = await self._any_record(repo, theme_id, path)
                version = await repo.get_version(record.id, version_number)
                if version is None:
                    raise VersionNotFoundError(f"{theme_id}:{path} has no version {version_number}")
                actual = content_checksum(version.content)
                if actual != version.checksum:
                    raise ChecksumMismatchError(path, version.checksum, actual)
                content = version.content
            logger.info("Restoring %s:%s to version %s", theme_id, path, version_number)
            return await self._write_with_retry(
                theme_id,
                path,
                content,
                actual,
                author,
                f"Restored from version {version_number}",
            )

    async def delete(self, theme_id: str, path: str, author: str) -> None:
        """Drop the live pointer; every version stays in history."""
        path = validate_path(path)
        async with self.locks.hold((theme_id, path)):
            async with self.session_factory.begin() as session:
                repo = self._repository(session)
                record = await self._live_record(repo, theme_id, path)
                latest = await repo.latest_version(record.id)
                if latest is None or latest.checksum != record.current_checksum:
                    raise ChecksumMismatchError(
                        path, record.current_checksum, latest.checksum if latest else "<none>"
                    )
                await repo.mark_deleted(record, _utcnow())
        logger.info("Deleted %s:%s by %s (history kept at v%s)", theme_id, path, author, latest.version_number)

    async def rename(self, theme_id: str, old_path: str, new_path: str, author: str) -> FileVersion:
        old_path = validate_path(old_path)
        new_path = validate_path(new_path)
        if old_path == new_path:
            raise InvalidPathError(new_path, "source and target paths are identical")
        first, second = sorted([old_path, new_path])
        async with self.locks.hold((theme_id, first)), self.locks.hold((theme_id, second)):
            async with self.session_factory.begin() as session:
                repo = self._repository(session)
                source = await self._live_record(repo, theme_id, old_path)
                target = await repo.get_record(theme_id, new_path)
                if target is not None and target.deleted_at is None:
                    raise InvalidPathError(new_path, "a file already exists at this path")
                latest = await repo.latest_version(source.id)
                if latest is None:
                    raise FileNotFoundInStoreError(f"{theme_id}:{old_path} has no versions")
                version = await self._append(
                    session,
                    theme_id,
                    new_path,
                    latest.content,
                    latest.checksum,
                    author,
                    f"Renamed from {old_path}",
                )
                await repo.mark_deleted(source, _utcnow())
        logger.info("Renamed %s:%s to %s", theme_id, old_path, new_path)
        return version

    async def live_files(self, theme_id: str) -> list[FileRecord]:
        async with self.session_factory() as session:
            rows = await self._repository(session).list_live_records(theme_id)
            return [self._to_record(row) for row in rows]

    async def live_contents(self, theme_id: str) -> list[LiveFile]:
        async with self.session_factory() as session:
            rows = await self._repository(session).list_live_contents(theme_id)
            return [
                LiveFile(
                    file_path=record.file_path,
                    file_type=record.file_type,
                    content=version.content,
                    checksum=version.checksum,
                )
                for record, version in rows
            ]

    async def current_tree(self, theme_id: str) -> dict[str, str]:
        return {item.file_path: item.content for item in await self.live_contents(theme_id)}

    async def current_checksums(self, theme_id: str) -> dict[str, str]:
        async with self.session_factory() as session:
            return await self._repository(session).current_checksums(theme_id)

    async def file_tree(self, theme_id: str) -> dict[str, Any]:
        tree: dict[str, Any] = {}
        for record in await self.live_files(theme_id):
            parts = record.file_path.split("/")
            current = tree
            for part in parts[:-1]:
                node = current.setdefault(part, {"type": "directory", "children": {}})
                current = node["children"]
            current[parts[-1]] = {
                "type": "file",
                "path": record.file_path,
                "file_type": record.file_type,
            }
        return tree

    async def search(self, theme_id: str, query: str) -> list[SearchHit]:
        if not query:
            return []
        hits: list[SearchHit] = []
        for item in await self.live_contents(theme_id):
            for line_number, line in enumerate(item.content.splitlines(), start=1):
                column = line.find(query)
                if column >= 0:
                    hits.append(SearchHit(item.file_path, line_number, column + 1, line.strip()))
        return hits

    async def sync_from_source(
        self,
        theme_id: str,
        source: SyncSource,
        *,
        author: str = "system",
        batch_size: int = 50,
        start_after: Optional[str] = None,
        should_continue: Optional[Callable[[SyncReport], bool]] = None,
    ) -> SyncReport:
        """Write every source file whose checksum differs from the stored one.

        Files are visited in sorted path order, ``batch_size`` at a time, so a
        cancelled run can be resumed with ``start_after=report.last_path``.
        """
        report = SyncReport(theme_id=theme_id)
        paths = [path for path in _list_source(source) if start_after is None or path > start_after]
        for batch in _chunks(paths, max(batch_size, 1)):
            if should_continue is not None and not should_continue(report):
                report.cancelled = True
                logger.info("Sync of %s cancelled after %s", theme_id, report.last_path)
                break
            stored = await self.current_checksums(theme_id)
            for path in batch:
                report.scanned += 1
                report.last_path = path
                try:
                    validate_path(path)
                    content = _read_source(source, path)
                except (InvalidPathError, UnicodeDecodeError) as exc:
                    logger.debug("Skipping %s during sync: %s", path, exc)
                    report.skipped.append(path)
                    continue
                if stored.get(path) == content_checksum(content):
                    report.unchanged += 1
                    continue
                await self.write(theme_id, path, content, author, change_summary="Synced from source")
                report.written += 1
            logger.info(
                "Sync %s: %s scanned, %s written, %s unchanged",
                theme_id,
                report.scanned,
                report.written,
                report.unchanged,
            )
        return report

    async def _write_with_retry(
        self,
        theme_id: str,
        path: str,
        content: str,
        checksum: str,
        author: str,
        change_summary: str,
    ) -> FileVersion:
        for attempt in range(1, self.max_write_attempts + 1):
            try:
                async with self.session_factory.begin() as session:
                    return await self._append(
                        session, theme_id, path, content, checksum, author, change_summary
                    )
            except IntegrityError:
                if attempt == self.max_write_attempts:
                    raise
                logger.warning(
                    "Version allocation race on %s:%s, retrying (attempt %s)", theme_id, path, attempt
                )
        raise AssertionError("unreachable")

    async def _append(
        self,
        session: AsyncSession,
        theme_id: str,
        path: str,
        content: str,
        checksum: str,
        author: str,
        change_summary: str,
    ) -> FileVersion:
        repo = self._repository(session)
        record = await repo.get_record(theme_id, path)
        if record is not None and record.current_checksum == checksum:
            latest = await repo.latest_version(record.id)
            if latest is not None and latest.checksum == checksum:
                if record.deleted_at is not None:
                    await repo.set_current(record, checksum)
                    logger.info("Revived %s:%s at v%s", theme_id, path, latest.version_number)
                else:
                    logger.debug("Unchanged content for %s:%s, keeping v%s", theme_id, path, latest.version_number)
                return self._to_version(record, latest)
        if record is None:
            await SqlThemeRepository(session).ensure(theme_id)
            record = await repo.create_record(
                theme_id=theme_id,
                file_path=path,
                file_type=determine_file_type(path),
                checksum=checksum,
            )
        version_number = await repo.max_version_number(record.id) + 1
        version = await repo.add_version(
            record_id=record.id,
            version_number=version_number,
            content=content,
            checksum=checksum,
            author=author,
            change_summary=change_summary,
            created_at=_utcnow(),
        )
        await repo.set_current(record, checksum)
        logger.info("Wrote %s:%s v%s (%s bytes)", theme_id, path, version_number, version.content_size)
        return self._to_version(record, version)

    @staticmethod
    async def _any_record(repo: ThemeFileRepository, theme_id: str, path: str) -> ThemeFileModel:
        record = await repo.get_record(theme_id, path)
        if record is None:
            raise FileNotFoundInStoreError(f"{theme_id}:{path} does not exist")
        return record

    @staticmethod
    async def _live_record(repo: ThemeFileRepository, theme_id: str, path: str) -> ThemeFileModel:
        record = await repo.get_record(theme_id, path)
        if record is None or record.deleted_at is not None:
            raise FileNotFoundInStoreError(f"{theme_id}:{path} does not exist")
        return record

    @staticmethod
    def _to_record(model: ThemeFileModel) -> FileRecord:
        return FileRecord(
            id=model.id,
            theme_id=model.theme_id,
            file_path=model.file_path,
            file_type=model.file_type,
            current_checksum=model.current_checksum,
            deleted_at=model.deleted_at,
        )

    @staticmethod
    def _to_version(record: ThemeFileModel, model: ThemeFileVersionModel) -> FileVersion:
        return FileVersion(
            id=model.id,
            file_record_id=record.id,
            theme_id=record.theme_id,
            file_path=record.file_path,
            version_number=model.version_number,
            content=model.content,
            content_size=model.content_size,
            checksum=model.checksum,
            author=model.author,
            change_summary=model.change_summary,
            created_at=model.created_at,
        )


def _list_source(source: SyncSource) -> list[str]:
    if isinstance(source, Path):
        if not source.is_dir():
            return []
        return sorted(
            entry.relative_to(source).as_posix()
            for entry in source.rglob("*")
            if entry.is_file() and not any(part.startswith(".") for part in entry.relative_to(source).parts)
        )
    return sorted(source)


def _read_source(source: SyncSource, path: str) -> str:
    if isinstance(source, Path):
        return (source / path).read_bytes().decode("utf-8")
    return source[path]


def _chunks(items: list[str], size: int) -> Iterator[list[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


__all__ = ["VersionedFileStore", "SyncSource"]
