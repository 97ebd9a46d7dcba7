"""Theme registry exceptions."""

from themepress.modules.common.exceptions import ThemeNotFoundError, ThemePressError


class ThemePackageError(ThemePressError):
    """Raised when a packaged theme cannot be read."""


__all__ = ["ThemeNotFoundError", "ThemePackageError"]
