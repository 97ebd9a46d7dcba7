"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from themepress.core.config import Settings, get_settings
from themepress.core.locks import KeyedLock
from themepress.infrastructure.database.session import (
    build_engine,
    build_session_factory,
    get_engine,
    get_session_factory,
)
from themepress.modules.drafts import DraftWorkspaceService
from themepress.modules.files import VersionedFileStore
from themepress.modules.publishing import SnapshotManager
from themepress.modules.rendering import TemplateRenderer
from themepress.modules.themes import ThemeCatalog, ThemeService


@dataclass(slots=True)
class ApplicationContainer:
    """Holds the process-wide pieces every request shares.

    Locks live here rather than in the services so that every service instance
    built from the container serializes on the same keys.
    """

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    renderer: TemplateRenderer
    file_locks: KeyedLock = field(default_factory=KeyedLock)
    document_locks: KeyedLock = field(default_factory=KeyedLock)
    publish_locks: KeyedLock = field(default_factory=KeyedLock)

    @classmethod
    def build(
        cls, settings: Optional[Settings] = None, *, engine: Optional[AsyncEngine] = None
    ) -> "ApplicationContainer":
        """Create a container with its own engine, e.g. for tests or scripts."""
        settings = settings or get_settings()
        engine = engine or build_engine(settings)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            renderer=build_renderer(settings),
        )

    def file_store(self) -> VersionedFileStore:
        return VersionedFileStore(
            session_factory=self.session_factory,
            locks=self.file_locks,
            history_page_size=self.settings.themes.history_page_size,
        )

    def draft_service(self) -> DraftWorkspaceService:
        return DraftWorkspaceService(files=self.file_store(), document_locks=self.document_locks)

    def snapshot_manager(self) -> SnapshotManager:
        return SnapshotManager(session_factory=self.session_factory, locks=self.publish_locks)

    def theme_service(self) -> ThemeService:
        themes = self.settings.themes
        return ThemeService(
            drafts=self.draft_service(),
            snapshots=self.snapshot_manager(),
            renderer=self.renderer,
            catalog=ThemeCatalog(themes.root),
            default_layout=self.settings.render.default_layout,
            default_author=themes.default_author,
            sync_batch_size=themes.sync_batch_size,
            auto_publish_on_sync=themes.auto_publish_on_sync,
        )

    async def dispose(self) -> None:
        await self.engine.dispose()


def build_renderer(settings: Settings) -> TemplateRenderer:
    return TemplateRenderer(
        placeholder_token=settings.render.placeholder_token,
        embed_assets=settings.render.embed_assets,
        asset_url_prefix=settings.render.asset_url_prefix,
    )


@lru_cache()
def get_container() -> ApplicationContainer:
    settings = get_settings()
    return ApplicationContainer(
        settings=settings,
        engine=get_engine(),
        session_factory=get_session_factory(),
        renderer=build_renderer(settings),
    )


__all__ = ["ApplicationContainer", "build_renderer", "get_container"]
