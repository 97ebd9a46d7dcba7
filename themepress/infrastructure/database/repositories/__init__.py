"""SQLAlchemy-backed repository implementations."""

from .snapshot_repository import SqlSnapshotRepository
from .theme_file_repository import SqlThemeFileRepository
from .theme_repository import SqlThemeRepository

__all__ = [
    "SqlSnapshotRepository",
    "SqlThemeFileRepository",
    "SqlThemeRepository",
]
