"""Draft workspace specific exceptions."""

from themepress.modules.common.exceptions import NotFoundError, ThemePressError


class InvalidTemplateDocumentError(ThemePressError):
    """Raised when a template document cannot be parsed or an edit is malformed."""


class TemplateNotFoundError(NotFoundError):
    """Raised when a theme has no template document with the requested name."""


class SectionNotFoundError(NotFoundError):
    """Raised when an edit targets a section id missing from the document."""
