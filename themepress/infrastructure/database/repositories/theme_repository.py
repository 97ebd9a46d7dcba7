"""SQLAlchemy implementation for the theme registry."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import select

from themepress.db.models import Theme
from themepress.modules.common.repository import AsyncRepository


class SqlThemeRepository(AsyncRepository[Theme]):
    async def get_by_id(self, theme_id: str) -> Theme | None:
        stmt = select(Theme).where(Theme.id == theme_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def ensure(self, theme_id: str, *, name: Optional[str] = None) -> Theme:
        theme = await self.get_by_id(theme_id)
        if theme is None:
            theme = await self.add(Theme(id=theme_id, name=name or theme_id, is_active=False))
        return theme

    async def list_all(self) -> Sequence[Theme]:
        stmt = select(Theme).order_by(Theme.id)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_active(self) -> Theme | None:
        stmt = select(Theme).where(Theme.is_active.is_(True)).order_by(Theme.id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def update_metadata(
        self,
        theme: Theme,
        *,
        name: Optional[str] = None,
        version: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Theme:
        if name is not None:
            theme.name = name
        if version is not None:
            theme.version = version
        if description is not None:
            theme.description = description
        await self.session.flush()
        return theme

    async def set_active(self, theme_id: str) -> None:
        for theme in await self.list_all():
            theme.is_active = theme.id == theme_id
        await self.session.flush()

    async def touch_draft(self, theme_id: str, owner: str, touched_at: datetime) -> Theme:
        theme = await self.ensure(theme_id)
        if theme.draft_owner is None:
            theme.draft_owner = owner
        theme.draft_updated_at = touched_at
        await self.session.flush()
        return theme

    async def start_new_draft(self, theme_id: str, base_snapshot: int) -> None:
        theme = await self.ensure(theme_id)
        theme.draft_base_snapshot = base_snapshot
        theme.draft_owner = None
        await self.session.flush()
