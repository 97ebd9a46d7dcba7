"""Public exports for the theme registry, catalog and facade."""

from .catalog import ThemeCatalog
from .exceptions import ThemeNotFoundError, ThemePackageError
from .models import Theme, ThemePackage, ThemeSyncResult
from .service import ThemeService

__all__ = [
    "Theme",
    "ThemeCatalog",
    "ThemeNotFoundError",
    "ThemePackage",
    "ThemePackageError",
    "ThemeService",
    "ThemeSyncResult",
]
