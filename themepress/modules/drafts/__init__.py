"""Public exports for draft workspace services."""

from .exceptions import InvalidTemplateDocumentError, SectionNotFoundError, TemplateNotFoundError
from .models import DocumentSaveResult, DraftWorkspace, SectionEntry, TemplateDocument
from .service import DraftWorkspaceService

__all__ = [
    "DocumentSaveResult",
    "DraftWorkspace",
    "DraftWorkspaceService",
    "InvalidTemplateDocumentError",
    "SectionEntry",
    "SectionNotFoundError",
    "TemplateDocument",
    "TemplateNotFoundError",
]
