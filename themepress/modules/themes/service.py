"""Theme facade used by the admin API, the storefront and the sync CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from themepress.db.models import Theme as ThemeModel
from themepress.infrastructure.database.repositories.theme_repository import SqlThemeRepository
from themepress.modules.common.exceptions import ContentNotFoundError
from themepress.modules.drafts import DocumentSaveResult, DraftWorkspace, DraftWorkspaceService, TemplateDocument
from themepress.modules.drafts.service import DocumentMutator
from themepress.modules.files import FileVersion, HistoryPage, SearchHit, SyncReport, VersionedFileStore, validate_path
from themepress.modules.publishing import PublishedSnapshot, SnapshotDiff, SnapshotManager, SnapshotSummary
from themepress.modules.rendering import (
    DraftResolver,
    RenderResult,
    ResolverTemplateSource,
    SnapshotResolver,
    TemplateRenderer,
)

from .catalog import ThemeCatalog
from .exceptions import ThemeNotFoundError
from .models import Theme, ThemePackage, ThemeSyncResult
from .repository import ThemeRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ThemeService:
    """Single entry point tying drafts, snapshots and rendering together."""

    drafts: DraftWorkspaceService
    snapshots: SnapshotManager
    renderer: TemplateRenderer
    catalog: ThemeCatalog
    default_layout: str = "theme"
    default_author: str = "system"
    sync_batch_size: int = 50
    auto_publish_on_sync: bool = False

    @property
    def files(self) -> VersionedFileStore:
        return self.drafts.files

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self.files.session_factory

    def _repository(self, session: AsyncSession) -> ThemeRepository:
        return SqlThemeRepository(session)

    # Registry

    async def list_themes(self) -> list[Theme]:
        async with self.session_factory() as session:
            return [self._to_domain(model) for model in await self._repository(session).list_all()]

    async def get_theme(self, theme_id: str) -> Theme:
        async with self.session_factory() as session:
            model = await self._repository(session).get_by_id(theme_id)
            if model is None:
                raise ThemeNotFoundError(f"Theme {theme_id!r} is not registered")
            return self._to_domain(model)

    async def active_theme(self) -> Theme:
        async with self.session_factory() as session:
            model = await self._repository(session).get_active()
            if model is None:
                raise ThemeNotFoundError("No theme is active")
            return self._to_domain(model)

    async def ensure_theme(self, theme_id: str, *, package: Optional[ThemePackage] = None) -> Theme:
        async with self.session_factory.begin() as session:
            repo = self._repository(session)
            model = await repo.ensure(theme_id, name=package.name if package else None)
            if package is not None:
                model = await repo.update_metadata(
                    model, name=package.name, version=package.version, description=package.description
                )
            return self._to_domain(model)

    async def activate_theme(self, theme_id: str) -> Theme:
        async with self.session_factory.begin() as session:
            repo = self._repository(session)
            if await repo.get_by_id(theme_id) is None:
                raise ThemeNotFoundError(f"Theme {theme_id!r} is not registered")
            await repo.set_active(theme_id)
            model = await repo.get_by_id(theme_id)
            theme = self._to_domain(model)
        logger.info("Activated theme %s", theme_id)
        return theme

    def available_themes(self) -> list[ThemePackage]:
        return self.catalog.scan()

    # Draft files

    async def workspace(self, theme_id: str) -> DraftWorkspace:
        return await self.drafts.workspace(theme_id)

    async def save_file(
        self, theme_id: str, path: str, content: str, author: str, *, change_summary: Optional[str] = None
    ) -> FileVersion:
        return await self.drafts.save_file(theme_id, path, content, author, change_summary=change_summary)

    async def read_file(self, theme_id: str, path: str) -> FileVersion:
        return await self.files.latest_version(theme_id, path)

    async def delete_file(self, theme_id: str, path: str, author: str) -> None:
        await self.drafts.delete_file(theme_id, path, author)

    async def rename_file(self, theme_id: str, old_path: str, new_path: str, author: str) -> FileVersion:
        return await self.drafts.rename_file(theme_id, old_path, new_path, author)

    async def restore_file(self, theme_id: str, path: str, version_number: int, author: str) -> FileVersion:
        return await self.drafts.restore_file(theme_id, path, version_number, author)

    async def history(
        self, theme_id: str, path: str, *, limit: Optional[int] = None, offset: int = 0
    ) -> HistoryPage:
        return await self.files.history(theme_id, path, limit=limit, offset=offset)

    async def get_version(self, theme_id: str, path: str, version_number: int) -> FileVersion:
        return await self.files.get_version(theme_id, path, version_number)

    async def file_tree(self, theme_id: str) -> dict[str, Any]:
        return await self.files.file_tree(theme_id)

    async def search(self, theme_id: str, query: str) -> list[SearchHit]:
        return await self.files.search(theme_id, query)

    # Template documents

    async def load_template(self, theme_id: str, template_name: str) -> TemplateDocument:
        return await self.drafts.load_document(theme_id, template_name)

    async def update_template_document(
        self,
        theme_id: str,
        template_name: str,
        mutator: DocumentMutator,
        author: str,
        *,
        create: bool = False,
    ) -> DocumentSaveResult:
        return await self.drafts.update_template_document(theme_id, template_name, mutator, author, create=create)

    async def update_section(
        self,
        theme_id: str,
        template_name: str,
        section_id: str,
        settings: dict[str, Any],
        author: str,
        *,
        replace: bool = False,
    ) -> DocumentSaveResult:
        return await self.drafts.update_section(
            theme_id, template_name, section_id, settings, author, replace=replace
        )

    async def update_blocks(
        self, theme_id: str, template_name: str, section_id: str, blocks: Optional[list[Any]], author: str
    ) -> DocumentSaveResult:
        return await self.drafts.update_blocks(theme_id, template_name, section_id, blocks, author)

    async def add_section(
        self,
        theme_id: str,
        template_name: str,
        section_type: str,
        author: str,
        *,
        settings: Optional[dict[str, Any]] = None,
        section_id: Optional[str] = None,
        position: Optional[int] = None,
    ) -> DocumentSaveResult:
        return await self.drafts.add_section(
            theme_id,
            template_name,
            section_type,
            author,
            settings=settings,
            section_id=section_id,
            position=position,
        )

    async def remove_section(
        self, theme_id: str, template_name: str, section_id: str, author: str
    ) -> DocumentSaveResult:
        return await self.drafts.remove_section(theme_id, template_name, section_id, author)

    async def reorder_sections(
        self, theme_id: str, template_name: str, section_ids: list[str], author: str
    ) -> DocumentSaveResult:
        return await self.drafts.reorder_sections(theme_id, template_name, section_ids, author)

    # Snapshots

    async def publish(self, theme_id: str, author: str) -> PublishedSnapshot:
        return await self.snapshots.publish(theme_id, author)

    async def rollback(self, theme_id: str, snapshot_number: int, author: str) -> PublishedSnapshot:
        return await self.snapshots.rollback(theme_id, snapshot_number, author)

    async def active_snapshot(self, theme_id: str) -> Optional[PublishedSnapshot]:
        return await self.snapshots.active_snapshot(theme_id)

    async def get_snapshot(self, theme_id: str, snapshot_number: int) -> PublishedSnapshot:
        return await self.snapshots.get_snapshot(theme_id, snapshot_number)

    async def list_snapshots(self, theme_id: str) -> list[SnapshotSummary]:
        return await self.snapshots.list_snapshots(theme_id)

    async def diff_snapshots(self, theme_id: str, from_number: int, to_number: int) -> SnapshotDiff:
        return await self.snapshots.diff_snapshots(theme_id, from_number, to_number)

    # Rendering

    async def render_template(
        self, theme_id: str, template_name: str, global_context: Optional[Mapping[str, Any]] = None
    ) -> RenderResult:
        """Render against the active snapshot; the whole page sees that one snapshot."""
        snapshot = await self.snapshots.require_active_snapshot(theme_id)
        source = ResolverTemplateSource(SnapshotResolver(snapshot), self.default_layout)
        return self.renderer.render_template(source, template_name, global_context)

    async def preview_template(
        self, theme_id: str, template_name: str, global_context: Optional[Mapping[str, Any]] = None
    ) -> RenderResult:
        resolver = await DraftResolver.load(self.files, theme_id)
        source = ResolverTemplateSource(resolver, self.default_layout)
        return self.renderer.render_template(source, template_name, global_context)

    async def published_asset(self, theme_id: str, path: str) -> str:
        path = validate_path(path)
        snapshot = await self.snapshots.require_active_snapshot(theme_id)
        published = snapshot.file(path)
        if published is None:
            raise ContentNotFoundError(path)
        return published.content

    # Sync

    async def sync_theme(
        self,
        slug: str,
        *,
        author: Optional[str] = None,
        start_after: Optional[str] = None,
        should_continue: Optional[Callable[[SyncReport], bool]] = None,
    ) -> ThemeSyncResult:
        """Bring the draft in line with the packaged copy on disk.

        The draft is always updated; a publish only follows for the active
        theme when ``auto_publish_on_sync`` is enabled and something changed.
        """
        author = author or self.default_author
        package = self.catalog.package(slug)
        theme = await self.ensure_theme(slug, package=package)
        report = await self.files.sync_from_source(
            slug,
            package.path,
            author=author,
            batch_size=self.sync_batch_size,
            start_after=start_after,
            should_continue=should_continue,
        )
        result = ThemeSyncResult(report=report)
        if report.changed and theme.is_active and self.auto_publish_on_sync and not report.cancelled:
            result.published = await self.snapshots.publish(slug, author)
            logger.info("Published %s after sync as snapshot %s", slug, result.published.snapshot_number)
        return result

    async def sync_all(self, *, author: Optional[str] = None) -> list[ThemeSyncResult]:
        return [await self.sync_theme(package.slug, author=author) for package in self.catalog.scan()]

    @staticmethod
    def _to_domain(model: ThemeModel) -> Theme:
        return Theme(
            id=model.id,
            name=model.name,
            version=model.version,
            description=model.description,
            is_active=bool(model.is_active),
            draft_owner=model.draft_owner,
            draft_updated_at=model.draft_updated_at,
            draft_base_snapshot=model.draft_base_snapshot,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
