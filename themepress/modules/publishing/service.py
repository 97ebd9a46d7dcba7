"""Publish pipeline turning a draft into immutable, swappable snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from themepress.core.checksum import aggregate_checksum, content_checksum
from themepress.core.locks import KeyedLock
from themepress.db.models import PublishedFile as PublishedFileModel, PublishedSnapshot as PublishedSnapshotModel
from themepress.infrastructure.database.repositories.snapshot_repository import SqlSnapshotRepository
from themepress.infrastructure.database.repositories.theme_file_repository import SqlThemeFileRepository
from themepress.infrastructure.database.repositories.theme_repository import SqlThemeRepository
from themepress.modules.common.exceptions import ChecksumMismatchError

from .exceptions import EmptyDraftError, NoActiveSnapshotError, PublishConflictError, SnapshotNotFoundError
from .models import PublishedFile, PublishedSnapshot, SnapshotDiff, SnapshotSummary
from .repository import SnapshotRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class SnapshotManager:
    """Owns the per-theme active snapshot pointer.

    A publish copies the draft's live files and swaps the pointer inside one
    transaction, so readers observe either the previous snapshot or the new one
    in full.
    """

    session_factory: async_sessionmaker[AsyncSession]
    locks: KeyedLock = field(default_factory=KeyedLock)
    max_publish_attempts: int = 2

    def _repository(self, session: AsyncSession) -> SnapshotRepository:
        return SqlSnapshotRepository(session)

    async def publish(self, theme_id: str, author: str) -> PublishedSnapshot:
        for attempt in range(1, self.max_publish_attempts + 1):
            try:
                return await self._publish_once(theme_id, author)
            except PublishConflictError:
                if attempt == self.max_publish_attempts:
                    raise
                logger.warning("Publish conflict for %s, retrying (attempt %s)", theme_id, attempt)
        raise AssertionError("unreachable")

    async def rollback(self, theme_id: str, snapshot_number: int, author: str) -> PublishedSnapshot:
        """Point the theme at an existing snapshot; nothing is copied."""
        async with self.locks.hold(theme_id):
            async with self.session_factory.begin() as session:
                repo = self._repository(session)
                model = await repo.get_by_number(theme_id, snapshot_number)
                if model is None:
                    raise SnapshotNotFoundError(f"Theme {theme_id!r} has no snapshot {snapshot_number}")
                files = await repo.list_files(model.id)
                self._verify(model, files)
                await repo.set_pointer(theme_id, model.id, author, _utcnow())
                snapshot = self._to_domain(model, files)
        logger.info("Rolled back %s to snapshot %s by %s", theme_id, snapshot_number, author)
        return snapshot

    async def active_snapshot(self, theme_id: str) -> Optional[PublishedSnapshot]:
        async with self.session_factory() as session:
            repo = self._repository(session)
            pointer = await repo.get_pointer(theme_id)
            if pointer is None:
                return None
            model = await SqlSnapshotRepository(session).get_by_id(pointer.snapshot_id)
            if model is None:
                return None
            files = await repo.list_files(model.id)
            return self._to_domain(model, files)

    async def require_active_snapshot(self, theme_id: str) -> PublishedSnapshot:
        snapshot = await self.active_snapshot(theme_id)
        if snapshot is None:
            raise NoActiveSnapshotError(f"Theme {theme_id!r} has not been published")
        return snapshot

    async def get_snapshot(self, theme_id: str, snapshot_number: int) -> PublishedSnapshot:
        async with self.session_factory() as session:
            repo = self._repository(session)
            model = await repo.get_by_number(theme_id, snapshot_number)
            if model is None:
                raise SnapshotNotFoundError(f"Theme {theme_id!r} has no snapshot {snapshot_number}")
            files = await repo.list_files(model.id)
            return self._to_domain(model, files)

    async def list_snapshots(self, theme_id: str) -> list[SnapshotSummary]:
        async with self.session_factory() as session:
            repo = self._repository(session)
            pointer = await repo.get_pointer(theme_id)
            active_id = pointer.snapshot_id if pointer else None
            return [
                SnapshotSummary(
                    id=model.id,
                    theme_id=model.theme_id,
                    snapshot_number=model.snapshot_number,
                    published_at=model.published_at,
                    published_by=model.published_by,
                    checksum=model.checksum,
                    file_count=model.file_count,
                    is_active=model.id == active_id,
                )
                for model in await repo.list_for_theme(theme_id)
            ]

    async def diff_snapshots(self, theme_id: str, from_number: int, to_number: int) -> SnapshotDiff:
        before = (await self.get_snapshot(theme_id, from_number)).checksums
        after = (await self.get_snapshot(theme_id, to_number)).checksums
        return SnapshotDiff(
            from_number=from_number,
            to_number=to_number,
            added=tuple(sorted(set(after) - set(before))),
            removed=tuple(sorted(set(before) - set(after))),
            changed=tuple(sorted(path for path in set(before) & set(after) if before[path] != after[path])),
        )

    async def _publish_once(self, theme_id: str, author: str) -> PublishedSnapshot:
        async with self.locks.hold(theme_id):
            published_at = _utcnow()
            try:
                async with self.session_factory.begin() as session:
                    repo = self._repository(session)
                    rows = await SqlThemeFileRepository(session).list_live_contents(theme_id)
                    if not rows:
                        raise EmptyDraftError(f"Theme {theme_id!r} has no files to publish")
                    files: list[PublishedFile] = []
                    for record, version in rows:
                        actual = content_checksum(version.content)
                        if actual != version.checksum:
                            raise ChecksumMismatchError(record.file_path, version.checksum, actual)
                        files.append(
                            PublishedFile(
                                file_path=record.file_path,
                                file_type=record.file_type,
                                content=version.content,
                                checksum=version.checksum,
                            )
                        )
                    snapshot_number = await repo.max_snapshot_number(theme_id) + 1
                    logger.info(
                        "Publishing %s as snapshot %s (%s files)", theme_id, snapshot_number, len(files)
                    )
                    model = await repo.create_snapshot(
                        theme_id=theme_id,
                        snapshot_number=snapshot_number,
                        published_at=published_at,
                        published_by=author,
                        checksum=aggregate_checksum((item.file_path, item.checksum) for item in files),
                        file_count=len(files),
                    )
                    for item in files:
                        await repo.add_file(
                            snapshot_id=model.id,
                            file_path=item.file_path,
                            file_type=item.file_type,
                            content=item.content,
                            checksum=item.checksum,
                        )
                    await session.flush()
                    await repo.set_pointer(theme_id, model.id, author, published_at)
                    await SqlThemeRepository(session).start_new_draft(theme_id, snapshot_number)
                    snapshot = PublishedSnapshot(
                        id=model.id,
                        theme_id=theme_id,
                        snapshot_number=snapshot_number,
                        published_at=published_at,
                        published_by=author,
                        checksum=model.checksum,
                        files=tuple(files),
                    )
            except EmptyDraftError:
                raise
            except IntegrityError as exc:
                logger.warning("Publish of %s discarded after a conflicting write: %s", theme_id, exc)
                raise PublishConflictError(f"Concurrent publish detected for theme {theme_id!r}") from exc
            except Exception as exc:
                logger.error("Publish of %s discarded, active snapshot unchanged: %s", theme_id, exc)
                raise
        logger.info("Activated snapshot %s for %s", snapshot.snapshot_number, theme_id)
        return snapshot

    @staticmethod
    def _verify(model: PublishedSnapshotModel, files: Sequence[PublishedFileModel]) -> None:
        for item in files:
            actual = content_checksum(item.content)
            if actual != item.checksum:
                raise ChecksumMismatchError(item.file_path, item.checksum, actual)
        actual = aggregate_checksum((item.file_path, item.checksum) for item in files)
        if actual != model.checksum:
            raise ChecksumMismatchError(f"snapshot {model.snapshot_number}", model.checksum, actual)

    @staticmethod
    def _to_domain(model: PublishedSnapshotModel, files: Sequence[PublishedFileModel]) -> PublishedSnapshot:
        return PublishedSnapshot(
            id=model.id,
            theme_id=model.theme_id,
            snapshot_number=model.snapshot_number,
            published_at=model.published_at,
            published_by=model.published_by,
            checksum=model.checksum,
            files=tuple(
                PublishedFile(
                    file_path=item.file_path,
                    file_type=item.file_type,
                    content=item.content,
                    checksum=item.checksum,
                )
                for item in files
            ),
        )
