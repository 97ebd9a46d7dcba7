"""Composes a page from a layout and the sections of a template document."""

from __future__ import annotations

import copy
import logging
import re
import secrets
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from jinja2 import ChainableUndefined, Template, TemplateSyntaxError
from jinja2.exceptions import TemplateError
from jinja2.sandbox import ImmutableSandboxedEnvironment
from markupsafe import Markup

from themepress.modules.common.exceptions import ContentNotFoundError, InvalidPathError
from themepress.modules.drafts.models import SectionEntry, TemplateDocument
from themepress.modules.files.paths import section_path

from .exceptions import LayoutResolutionError
from .filters import build_filter_table
from .models import SECTION_MISSING, SECTION_RUNTIME, SECTION_SYNTAX, RenderResult, SectionError
from .resolvers import ContentResolver
from .sources import TemplateDataSource

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER = "{{ content_for_layout }}"
_SCHEMA_BLOCK = re.compile(r"{%-?\s*schema\s*-?%}.*?{%-?\s*endschema\s*-?%}", re.DOTALL)


def strip_schema(source: str) -> str:
    """Drop ``{% schema %}`` authoring metadata from a section source."""
    return _SCHEMA_BLOCK.sub("", source)


class TemplateRenderer:
    """Renders template documents against any content resolver.

    The Jinja environment and its filters are fixed when the renderer is built
    and no state is kept between calls, so one instance can serve many themes
    concurrently.
    """

    def __init__(
        self,
        *,
        placeholder_token: str = DEFAULT_PLACEHOLDER,
        embed_assets: bool = True,
        asset_url_prefix: str = "/assets",
        extra_filters: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> None:
        if not placeholder_token:
            raise ValueError("placeholder_token must not be empty")
        self.placeholder_token = placeholder_token
        self.embed_assets = embed_assets
        self.asset_url_prefix = asset_url_prefix.rstrip("/")
        filters = build_filter_table(self.asset_url_prefix)
        filters.update(extra_filters or {})
        self._environment = ImmutableSandboxedEnvironment(
            autoescape=True,
            undefined=ChainableUndefined,
            keep_trailing_newline=True,
            cache_size=0,
        )
        self._environment.filters.update(filters)
        self.filters: Mapping[str, Callable[..., Any]] = MappingProxyType(dict(self._environment.filters))

    def render(
        self,
        document: TemplateDocument,
        layout_path: str,
        resolver: ContentResolver,
        global_context: Optional[Mapping[str, Any]] = None,
    ) -> RenderResult:
        context = dict(global_context or {})
        slot = f"_slot_{secrets.token_hex(8)}"
        layout, has_slot = self._load_layout(layout_path, resolver, slot)

        fragments: list[str] = []
        errors: list[SectionError] = []
        for section_id in document.order:
            entry = document.sections.get(section_id)
            if entry is None:
                continue
            fragment, error = self._render_section(section_id, entry, resolver, context)
            fragments.append(fragment)
            if error is not None:
                errors.append(error)

        assets = resolver.assets()
        layout_context = dict(context)
        layout_context.update(
            content_for_header=self._header_assets(assets),
            content_for_footer=self._footer_assets(assets),
        )
        if has_slot:
            layout_context[slot] = Markup("\n".join(fragments))
        try:
            html = layout.render(layout_context)
        except Exception as exc:
            logger.error("Layout %s failed to render: %s", layout_path, exc)
            raise LayoutResolutionError(layout_path, str(exc)) from exc
        return RenderResult(html=html, assets=MappingProxyType(assets), section_errors=tuple(errors))

    def render_template(
        self,
        source: TemplateDataSource,
        template_name: str,
        global_context: Optional[Mapping[str, Any]] = None,
    ) -> RenderResult:
        rendered = source.get_rendered_file(template_name)
        context: dict[str, Any] = {
            "template": template_name,
            "theme_settings": copy.deepcopy(dict(rendered.settings)),
            "template_settings": copy.deepcopy(rendered.document.settings),
        }
        context.update(global_context or {})
        return self.render(rendered.document, rendered.layout_path, source.resolver, context)

    def _load_layout(self, layout_path: str, resolver: ContentResolver, slot: str) -> tuple[Template, bool]:
        try:
            source = resolver.resolve(layout_path)
        except ContentNotFoundError as exc:
            logger.error("Layout %s could not be resolved", layout_path)
            raise LayoutResolutionError(layout_path, "layout not found") from exc
        try:
            prepared, has_slot = self._prepare_layout(source, layout_path, slot)
            return self._environment.from_string(prepared), has_slot
        except TemplateSyntaxError as exc:
            logger.error("Layout %s has a syntax error on line %s: %s", layout_path, exc.lineno, exc.message)
            raise LayoutResolutionError(layout_path, f"syntax error on line {exc.lineno}: {exc.message}") from exc

    def _prepare_layout(self, source: str, layout_path: str, slot: str) -> tuple[str, bool]:
        """Swap the first placeholder for a private variable only this render binds."""
        head, found, tail = source.partition(self.placeholder_token)
        if not found:
            logger.warning("Layout %s has no content placeholder; sections are discarded", layout_path)
            return source, False
        if self.placeholder_token in tail:
            logger.warning("Layout %s repeats the content placeholder; only the first is used", layout_path)
            tail = tail.replace(self.placeholder_token, "")
        return head + "{{ " + slot + " }}" + tail, True

    def _render_section(
        self,
        section_id: str,
        entry: SectionEntry,
        resolver: ContentResolver,
        context: Mapping[str, Any],
    ) -> tuple[str, Optional[SectionError]]:
        try:
            path = section_path(entry.type)
            source = resolver.resolve(path)
        except (ContentNotFoundError, InvalidPathError) as exc:
            logger.warning("Section %s has no usable source: %s", section_id, exc)
            return "", SectionError(section_id, entry.type, SECTION_MISSING, str(exc))

        section_context = dict(context)
        section_context["section"] = {
            "id": section_id,
            "type": entry.type,
            "settings": copy.deepcopy(entry.settings),
            "blocks": copy.deepcopy(entry.blocks or []),
        }
        try:
            return self._environment.from_string(strip_schema(source)).render(section_context), None
        except TemplateSyntaxError as exc:
            error = SectionError(section_id, entry.type, SECTION_SYNTAX, exc.message or str(exc), exc.lineno)
        except TemplateError as exc:
            error = SectionError(section_id, entry.type, SECTION_RUNTIME, str(exc))
        except Exception as exc:
            error = SectionError(section_id, entry.type, SECTION_RUNTIME, f"{type(exc).__name__}: {exc}")
        logger.warning("Section %s (%s) failed to render: %s", section_id, entry.type, error.message)
        return self._error_fragment(error), error

    @staticmethod
    def _error_fragment(error: SectionError) -> str:
        return str(
            Markup('<div class="section-error" data-section-id="{}" data-section-type="{}">{}</div>').format(
                error.section_id,
                error.section_type,
                f"Error rendering section {error.section_type}: {error.message}",
            )
        )

    def _header_assets(self, assets: Mapping[str, str]) -> Markup:
        css = assets.get("assets/theme.css")
        if css is None:
            return Markup("")
        if self.embed_assets:
            return Markup("<style>{}</style>").format(Markup(css))
        return Markup('<link rel="stylesheet" href="{}">').format(f"{self.asset_url_prefix}/theme.css")

    def _footer_assets(self, assets: Mapping[str, str]) -> Markup:
        js = assets.get("assets/theme.js")
        if js is None:
            return Markup("")
        if self.embed_assets:
            return Markup("<script>{}</script>").format(Markup(js))
        return Markup('<script src="{}"></script>').format(f"{self.asset_url_prefix}/theme.js")


__all__ = ["DEFAULT_PLACEHOLDER", "TemplateRenderer", "strip_schema"]
