"""Content resolvers binding a render to draft or published theme files."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Protocol

from themepress.modules.common.exceptions import ContentNotFoundError
from themepress.modules.files import VersionedFileStore
from themepress.modules.publishing.models import PublishedSnapshot

ASSET_PATHS = ("assets/theme.css", "assets/theme.js")


class ContentResolver(Protocol):
    def resolve(self, path: str) -> str:
        """Return the content at ``path`` or raise ``ContentNotFoundError``."""

    def assets(self) -> dict[str, str]:
        """Return the named theme assets that exist, keyed by path."""


class MappingResolver:
    """Resolves paths against a fixed, read-only mapping of file contents."""

    __slots__ = ("_files",)

    def __init__(self, files: Mapping[str, str]) -> None:
        self._files = MappingProxyType(dict(files))

    def resolve(self, path: str) -> str:
        try:
            return self._files[path]
        except KeyError:
            raise ContentNotFoundError(path) from None

    def assets(self) -> dict[str, str]:
        return {path: self._files[path] for path in ASSET_PATHS if path in self._files}

    def __contains__(self, path: object) -> bool:
        return path in self._files


class DraftResolver(MappingResolver):
    """Latest draft contents, read once so the render sees a single state."""

    __slots__ = ("theme_id",)

    def __init__(self, theme_id: str, files: Mapping[str, str]) -> None:
        super().__init__(files)
        self.theme_id = theme_id

    @classmethod
    async def load(cls, store: VersionedFileStore, theme_id: str) -> "DraftResolver":
        return cls(theme_id, await store.current_tree(theme_id))


class SnapshotResolver(MappingResolver):
    """Bound to one published snapshot value, never to the active pointer."""

    __slots__ = ("snapshot",)

    def __init__(self, snapshot: PublishedSnapshot) -> None:
        super().__init__(snapshot.tree)
        self.snapshot = snapshot


__all__ = ["ASSET_PATHS", "ContentResolver", "DraftResolver", "MappingResolver", "SnapshotResolver"]
