"""Public exports for template composition and content resolution."""

from .exceptions import LayoutResolutionError
from .filters import build_filter_table
from .models import RenderedFile, RenderResult, SectionError
from .renderer import DEFAULT_PLACEHOLDER, TemplateRenderer, strip_schema
from .resolvers import ASSET_PATHS, ContentResolver, DraftResolver, MappingResolver, SnapshotResolver
from .sources import ResolverTemplateSource, TemplateDataSource

__all__ = [
    "ASSET_PATHS",
    "ContentResolver",
    "DEFAULT_PLACEHOLDER",
    "DraftResolver",
    "LayoutResolutionError",
    "MappingResolver",
    "RenderResult",
    "RenderedFile",
    "ResolverTemplateSource",
    "SectionError",
    "SnapshotResolver",
    "TemplateDataSource",
    "TemplateRenderer",
    "build_filter_table",
    "strip_schema",
]
