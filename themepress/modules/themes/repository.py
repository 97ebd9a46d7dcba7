"""Repository abstraction for the theme registry."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from themepress.db.models import Theme


class ThemeRepository(Protocol):
    async def get_by_id(self, theme_id: str) -> Theme | None:
        ...

    async def ensure(self, theme_id: str, *, name: Optional[str] = None) -> Theme:
        ...

    async def list_all(self) -> Sequence[Theme]:
        ...

    async def get_active(self) -> Theme | None:
        ...

    async def update_metadata(
        self,
        theme: Theme,
        *,
        name: Optional[str] = None,
        version: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Theme:
        ...

    async def set_active(self, theme_id: str) -> None:
        ...

    async def touch_draft(self, theme_id: str, owner: str, touched_at: datetime) -> Theme:
        ...

    async def start_new_draft(self, theme_id: str, base_snapshot: int) -> None:
        ...
