"""Application service for editing a theme's draft workspace."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from themepress.core.locks import KeyedLock
from themepress.infrastructure.database.repositories.theme_repository import SqlThemeRepository
from themepress.modules.common.exceptions import FileNotFoundInStoreError
from themepress.modules.files import FileVersion, VersionedFileStore, template_path

from .exceptions import TemplateNotFoundError
from .models import DocumentSaveResult, DraftWorkspace, TemplateDocument

logger = logging.getLogger(__name__)

DocumentMutator = Callable[[TemplateDocument], Optional[TemplateDocument]]


@dataclass(slots=True)
class DraftWorkspaceService:
    files: VersionedFileStore
    document_locks: KeyedLock = field(default_factory=KeyedLock)

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self.files.session_factory

    async def workspace(self, theme_id: str) -> DraftWorkspace:
        async with self.session_factory() as session:
            theme = await SqlThemeRepository(session).get_by_id(theme_id)
            if theme is None:
                return DraftWorkspace(theme_id=theme_id, owner=None, base_snapshot_number=None, updated_at=None)
            return DraftWorkspace(
                theme_id=theme.id,
                owner=theme.draft_owner,
                base_snapshot_number=theme.draft_base_snapshot,
                updated_at=theme.draft_updated_at,
            )

    async def save_file(
        self,
        theme_id: str,
        path: str,
        content: str,
        author: str,
        *,
        change_summary: Optional[str] = None,
    ) -> FileVersion:
        version = await self.files.write(theme_id, path, content, author, change_summary=change_summary)
        await self._touch(theme_id, author)
        return version

    async def delete_file(self, theme_id: str, path: str, author: str) -> None:
        await self.files.delete(theme_id, path, author)
        await self._touch(theme_id, author)

    async def rename_file(self, theme_id: str, old_path: str, new_path: str, author: str) -> FileVersion:
        version = await self.files.rename(theme_id, old_path, new_path, author)
        await self._touch(theme_id, author)
        return version

    async def restore_file(self, theme_id: str, path: str, version_number: int, author: str) -> FileVersion:
        version = await self.files.restore(theme_id, path, version_number, author)
        await self._touch(theme_id, author)
        return version

    async def current_tree(self, theme_id: str) -> dict[str, str]:
        """Every live path with its latest content, as a publish would copy it."""
        return await self.files.current_tree(theme_id)

    async def load_document(self, theme_id: str, template_name: str) -> TemplateDocument:
        path = template_path(template_name)
        try:
            content = await self.files.read(theme_id, path)
        except FileNotFoundInStoreError as exc:
            raise TemplateNotFoundError(f"Theme {theme_id!r} has no template {template_name!r}") from exc
        return TemplateDocument.from_json(content)

    async def update_template_document(
        self,
        theme_id: str,
        template_name: str,
        mutator: DocumentMutator,
        author: str,
        *,
        create: bool = False,
        change_summary: Optional[str] = None,
    ) -> DocumentSaveResult:
        """Apply ``mutator`` to a private copy of the document and save it.

        Saves go through the file store, so an edit that leaves the document
        unchanged does not create a new version.
        """
        path = template_path(template_name)
        async with self.document_locks.hold((theme_id, path)):
            try:
                document = await self.load_document(theme_id, template_name)
            except TemplateNotFoundError:
                if not create:
                    raise
                document = TemplateDocument()
            edited = mutator(document)
            if edited is not None:
                document = edited
            version = await self.files.write(
                theme_id,
                path,
                document.to_json(),
                author,
                change_summary=change_summary or f"Edited template {template_name}",
            )
        await self._touch(theme_id, author)
        warnings = document.warnings()
        for message in warnings:
            logger.warning("Template %s/%s: %s", theme_id, template_name, message)
        return DocumentSaveResult(
            template_name=template_name,
            document=document.copy(),
            version_number=version.version_number,
            checksum=version.checksum,
            warnings=warnings,
        )

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
        def mutate(document: TemplateDocument) -> None:
            document.update_settings(section_id, settings, replace=replace)

        return await self.update_template_document(
            theme_id,
            template_name,
            mutate,
            author,
            change_summary=f"Updated section {section_id}",
        )

    async def update_blocks(
        self,
        theme_id: str,
        template_name: str,
        section_id: str,
        blocks: Optional[list[Any]],
        author: str,
    ) -> DocumentSaveResult:
        def mutate(document: TemplateDocument) -> None:
            document.set_blocks(section_id, blocks)

        return await self.update_template_document(
            theme_id,
            template_name,
            mutate,
            author,
            change_summary=f"Updated blocks of section {section_id}",
        )

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
        def mutate(document: TemplateDocument) -> None:
            document.add_section(section_type, settings, section_id=section_id, position=position)

        return await self.update_template_document(
            theme_id,
            template_name,
            mutate,
            author,
            create=True,
            change_summary=f"Added {section_type} section",
        )

    async def remove_section(
        self, theme_id: str, template_name: str, section_id: str, author: str
    ) -> DocumentSaveResult:
        def mutate(document: TemplateDocument) -> None:
            document.remove_section(section_id)

        return await self.update_template_document(
            theme_id,
            template_name,
            mutate,
            author,
            change_summary=f"Removed section {section_id}",
        )

    async def reorder_sections(
        self, theme_id: str, template_name: str, section_ids: list[str], author: str
    ) -> DocumentSaveResult:
        def mutate(document: TemplateDocument) -> None:
            document.reorder(section_ids)

        return await self.update_template_document(
            theme_id,
            template_name,
            mutate,
            author,
            change_summary="Reordered sections",
        )

    async def _touch(self, theme_id: str, author: str) -> None:
        async with self.session_factory.begin() as session:
            await SqlThemeRepository(session).touch_draft(theme_id, author, datetime.now(timezone.utc))
