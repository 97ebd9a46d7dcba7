"""Rendering specific exceptions."""

from themepress.modules.common.exceptions import ThemePressError


class LayoutResolutionError(ThemePressError):
    """Raised when the page layout cannot be loaded or rendered.

    Layout failures are page-fatal; section failures never raise.
    """

    def __init__(self, layout_path: str, reason: str) -> None:
        super().__init__(f"Layout {layout_path!r} failed: {reason}")
        self.layout_path = layout_path
        self.reason = reason
