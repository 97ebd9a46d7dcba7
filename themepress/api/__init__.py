from fastapi import APIRouter

from themepress.interfaces.http.routers import admin_themes


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(admin_themes.router, prefix="/admin/themes", tags=["themes"])
    return router


__all__ = [
    "create_api_router",
]
