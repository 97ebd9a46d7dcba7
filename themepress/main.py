from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from themepress import __version__
from themepress.api import create_api_router
from themepress.core.container import ApplicationContainer, get_container
from themepress.core.logging import configure_logging
from themepress.infrastructure.database.session import init_db
from themepress.interfaces.http.routers import storefront


def create_app(container: Optional[ApplicationContainer] = None) -> FastAPI:
    container = container or get_container()
    settings = container.settings
    configure_logging(settings.logging)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_db(container.engine)
        yield
        await container.dispose()

    app = FastAPI(
        title=settings.project_name,
        description="Versioned theme drafts, immutable snapshots and page rendering",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(settings.api_prefix))
    app.include_router(storefront.router)

    return app


app = create_app()
