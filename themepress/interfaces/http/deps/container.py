"""Container and service dependency providers."""

from fastapi import Depends, Header, Request

from themepress.core.container import ApplicationContainer, get_container as get_default_container
from themepress.modules.themes import ThemeService


def get_container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    return container if container is not None else get_default_container()


def get_theme_service(container: ApplicationContainer = Depends(get_container)) -> ThemeService:
    return container.theme_service()


def get_author(
    x_theme_author: str | None = Header(default=None),
    container: ApplicationContainer = Depends(get_container),
) -> str:
    """Author recorded on versions and snapshots; identity is established upstream."""
    return (x_theme_author or "").strip() or container.settings.themes.default_author


__all__ = ["get_author", "get_container", "get_theme_service"]
