"""Discovery of packaged themes on disk."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from themepress.modules.files.paths import THEME_CONFIG_PATH

from .exceptions import ThemeNotFoundError, ThemePackageError
from .models import ThemePackage

logger = logging.getLogger(__name__)

_SLUG = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


@dataclass(slots=True)
class ThemeCatalog:
    root: Path

    def scan(self) -> list[ThemePackage]:
        if not self.root.is_dir():
            logger.warning("Themes root %s does not exist", self.root)
            return []
        packages: list[ThemePackage] = []
        for entry in sorted(self.root.iterdir()):
            if not entry.is_dir() or not _SLUG.match(entry.name):
                continue
            try:
                packages.append(self._load(entry))
            except ThemePackageError as exc:
                logger.warning("Skipping theme %s: %s", entry.name, exc)
        return packages

    def package(self, slug: str) -> ThemePackage:
        if not _SLUG.match(slug):
            raise ThemeNotFoundError(f"Invalid theme slug {slug!r}")
        path = self.root / slug
        if not path.is_dir():
            raise ThemeNotFoundError(f"No packaged theme {slug!r} under {self.root}")
        return self._load(path)

    def _load(self, path: Path) -> ThemePackage:
        info = self._read_info(path / THEME_CONFIG_PATH)
        return ThemePackage(
            slug=path.name,
            name=_text(info.get("name")) or path.name.replace("-", " ").replace("_", " ").title(),
            version=_text(info.get("version")),
            description=_text(info.get("description")),
            path=path,
        )

    @staticmethod
    def _read_info(config_file: Path) -> dict[str, Any]:
        if not config_file.is_file():
            return {}
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ThemePackageError(f"{config_file} is unreadable: {exc}") from exc
        if isinstance(data, dict):
            return data
        if isinstance(data, list):
            # settings_schema style: a list of groups, theme metadata in "theme_info".
            groups = [item for item in data if isinstance(item, dict)]
            for group in groups:
                if group.get("name") == "theme_info":
                    return {
                        "name": group.get("theme_name"),
                        "version": group.get("theme_version"),
                        "description": group.get("theme_description"),
                    }
            return groups[0] if groups else {}
        raise ThemePackageError(f"{config_file} must hold a JSON object or array")


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
