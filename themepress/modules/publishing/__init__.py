"""Public exports for the publish pipeline."""

from .exceptions import (
    EmptyDraftError,
    NoActiveSnapshotError,
    PublishConflictError,
    PublishError,
    SnapshotNotFoundError,
)
from .models import PublishedFile, PublishedSnapshot, SnapshotDiff, SnapshotSummary
from .service import SnapshotManager

__all__ = [
    "EmptyDraftError",
    "NoActiveSnapshotError",
    "PublishConflictError",
    "PublishError",
    "PublishedFile",
    "PublishedSnapshot",
    "SnapshotDiff",
    "SnapshotManager",
    "SnapshotNotFoundError",
    "SnapshotSummary",
]
