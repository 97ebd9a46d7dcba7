"""Value objects produced and consumed by the template renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from themepress.modules.drafts.models import TemplateDocument

SECTION_MISSING = "missing_source"
SECTION_SYNTAX = "syntax"
SECTION_RUNTIME = "runtime"


@dataclass(frozen=True, slots=True)
class SectionError:
    section_id: str
    section_type: str
    kind: str
    message: str
    lineno: Optional[int] = None


@dataclass(frozen=True, slots=True)
class RenderResult:
    html: str
    assets: Mapping[str, str]
    section_errors: tuple[SectionError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.section_errors


@dataclass(frozen=True, slots=True)
class RenderedFile:
    """Everything needed to render one template, independent of its origin."""

    template_name: str
    document: TemplateDocument
    layout_path: str
    settings: Mapping[str, Any] = field(default_factory=dict)
