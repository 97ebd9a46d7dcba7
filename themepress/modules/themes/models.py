"""Domain models for registered and packaged themes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from themepress.modules.files.models import SyncReport
from themepress.modules.publishing.models import PublishedSnapshot


@dataclass(slots=True)
class Theme:
    id: str
    name: str
    version: Optional[str]
    description: Optional[str]
    is_active: bool
    draft_owner: Optional[str]
    draft_updated_at: Optional[datetime]
    draft_base_snapshot: Optional[int]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


@dataclass(frozen=True, slots=True)
class ThemePackage:
    """A theme directory found under the configured themes root."""

    slug: str
    name: str
    version: Optional[str]
    description: Optional[str]
    path: Path


@dataclass(slots=True)
class ThemeSyncResult:
    report: SyncReport
    published: Optional[PublishedSnapshot] = None
