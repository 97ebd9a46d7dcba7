"""Theme modules and their public exports."""

from . import common, files, drafts, publishing, rendering, themes

__all__ = [
    "common",
    "files",
    "drafts",
    "publishing",
    "rendering",
    "themes",
]
