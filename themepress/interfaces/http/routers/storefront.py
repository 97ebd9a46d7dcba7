"""Visitor-facing pages rendered from the active theme's published snapshot."""
import logging
import mimetypes
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import HTMLResponse
from markupsafe import escape

from themepress.core.container import ApplicationContainer
from themepress.interfaces.http.deps import get_container, get_theme_service
from themepress.interfaces.http.errors import http_error
from themepress.modules.common.exceptions import ThemePressError
from themepress.modules.rendering import LayoutResolutionError
from themepress.modules.themes import ThemeService

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Page unavailable</title></head>
<body>
<h1>This page could not be displayed</h1>
<p>{message}</p>
</body>
</html>
"""


def _global_context(request: Request, container: ApplicationContainer, template_name: str) -> dict[str, Any]:
    return {
        "site": {"title": container.settings.project_name, "url": str(request.base_url).rstrip("/")},
        "page": {"url": request.url.path, "template": template_name},
        "request": {"path": request.url.path, "query": dict(request.query_params)},
    }


async def _render_page(
    request: Request,
    template_name: str,
    service: ThemeService,
    container: ApplicationContainer,
) -> HTMLResponse:
    try:
        theme = await service.active_theme()
        result = await service.render_template(
            theme.id, template_name, _global_context(request, container, template_name)
        )
    except LayoutResolutionError as exc:
        logger.error("Page %s failed: %s", template_name, exc)
        return HTMLResponse(
            ERROR_PAGE.format(message=escape(str(exc))),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except ThemePressError as exc:
        raise http_error(exc) from exc
    for error in result.section_errors:
        logger.warning("Page %s section %s: %s", template_name, error.section_id, error.message)
    return HTMLResponse(result.html)


@router.get("/", response_class=HTMLResponse)
async def homepage(
    request: Request,
    service: ThemeService = Depends(get_theme_service),
    container: ApplicationContainer = Depends(get_container),
):
    return await _render_page(request, "index", service, container)


@router.get("/pages/{template_name}", response_class=HTMLResponse)
async def page(
    template_name: str,
    request: Request,
    service: ThemeService = Depends(get_theme_service),
    container: ApplicationContainer = Depends(get_container),
):
    return await _render_page(request, template_name, service, container)


@router.get("/assets/{path:path}")
async def asset(path: str, service: ThemeService = Depends(get_theme_service)):
    try:
        theme = await service.active_theme()
        content = await service.published_asset(theme.id, f"assets/{path}")
    except ThemePressError as exc:
        raise http_error(exc) from exc
    media_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return Response(content=content, media_type=media_type)
