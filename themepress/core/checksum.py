"""Content hashing shared by the file store, snapshots and sync."""

from __future__ import annotations

import hashlib
from typing import Iterable


def content_checksum(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def aggregate_checksum(entries: Iterable[tuple[str, str]]) -> str:
    """Hash a set of ``(path, checksum)`` pairs independently of their order."""
    hasher = hashlib.sha256()
    for path, checksum in sorted(entries):
        hasher.update(path.encode("utf-8"))
        hasher.update(b"\0")
        hasher.update(checksum.encode("ascii"))
        hasher.update(b"\n")
    return hasher.hexdigest()
