"""Template data sources: one explicit seam between storage and the renderer."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from themepress.modules.common.exceptions import ContentNotFoundError
from themepress.modules.drafts.exceptions import TemplateNotFoundError
from themepress.modules.drafts.models import TemplateDocument
from themepress.modules.files.paths import SETTINGS_DATA_PATH, layout_path, template_path

from .models import RenderedFile
from .resolvers import ContentResolver

logger = logging.getLogger(__name__)


class TemplateDataSource(Protocol):
    @property
    def resolver(self) -> ContentResolver:
        ...

    def get_rendered_file(self, template_name: str) -> RenderedFile:
        ...


class ResolverTemplateSource:
    """Reads template documents, layouts and theme settings through a resolver.

    Works the same for drafts and published snapshots; the resolver decides
    which files are visible.
    """

    def __init__(self, resolver: ContentResolver, default_layout: str = "theme") -> None:
        self._resolver = resolver
        self.default_layout = default_layout

    @property
    def resolver(self) -> ContentResolver:
        return self._resolver

    def get_rendered_file(self, template_name: str) -> RenderedFile:
        path = template_path(template_name)
        try:
            document = TemplateDocument.from_json(self._resolver.resolve(path))
        except ContentNotFoundError as exc:
            raise TemplateNotFoundError(f"No template {template_name!r}") from exc
        return RenderedFile(
            template_name=template_name,
            document=document,
            layout_path=layout_path(document.layout or self.default_layout),
            settings=self.theme_settings(),
        )

    def theme_settings(self) -> dict[str, Any]:
        try:
            raw = self._resolver.resolve(SETTINGS_DATA_PATH)
        except ContentNotFoundError:
            return {}
        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring unreadable %s: %s", SETTINGS_DATA_PATH, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", SETTINGS_DATA_PATH)
            return {}
        # Shopify-style files keep the live values under "current".
        current = data.get("current")
        return current if isinstance(current, dict) else data
