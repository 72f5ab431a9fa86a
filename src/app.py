from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.types import Scope
from typing import Any, AsyncGenerator, Optional
from contextlib import asynccontextmanager
import os
import logging

from .config.settings import DashboardSettings
from .core.storage.storage_factory import StorageFactory
from .routers import commands, exports, health, servers
from .services.bootstrap import ensure_data_files

# Configure logging at module level
logging.basicConfig(
    level=logging.WARNING,  # Set default to WARNING for all loggers
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

# Set your application loggers to DEBUG
logging.getLogger("src").setLevel(logging.DEBUG)  # All src.* modules
logging.getLogger("__main__").setLevel(logging.DEBUG)  # Main module if needed

# Keep third-party loggers at INFO or WARNING to reduce noise
logging.getLogger("uvicorn.access").setLevel(logging.INFO)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)
logging.getLogger("asyncio").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


class SPAStaticFiles(StaticFiles):
    """
    Serve the built UI bundle.

    Unknown paths outside /api get index.html so that client-side routes
    (/servers, /commands) load on reload or deep link.
    """

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as e:
            if e.status_code != 404 or path.split("/", 1)[0] == "api":
                raise
            return await super().get_response("index.html", scope)


def create_app(settings: Optional[DashboardSettings] = None) -> FastAPI:
    """
    Build the dashboard API.

    Args:
        settings: Explicit configuration; read from the environment when None

    Returns:
        FastAPI application whose startup prepares the data files
    """
    settings = settings or DashboardSettings.from_env()
    storage_factory = StorageFactory.from_settings(settings)

    # Data files are prepared before the first request; failure aborts startup
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[Any, Any]:
        await ensure_data_files(storage_factory, settings)
        logger.info(f"Data directory: {settings.data_dir}")
        logger.info(f"Export directory: {settings.export_dir}")
        yield

    app = FastAPI(
        lifespan=lifespan,
        title="Dashboard Midd",
        description="Server inventory and shell command catalog for the admin dashboard",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.storage_factory = storage_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],  # Allow all HTTP methods
        allow_headers=["*"],  # Allow all headers
    )

    # Include routers
    app.include_router(servers.router)
    app.include_router(commands.router)
    app.include_router(exports.router)
    app.include_router(health.router)

    if settings.static_dir and os.path.isdir(settings.static_dir):
        # Built UI bundle; API routes above take precedence
        app.mount(
            "/", SPAStaticFiles(directory=settings.static_dir, html=True), name="ui"
        )
    else:

        @app.get("/")
        async def root() -> dict[str, Any]:
            return {
                "message": "Welcome to the Dashboard Midd API",
                "docs_url": "/docs",
                "endpoints": {
                    "servers": "/api/servers",
                    "commands": "/api/commands",
                    "export": "/api/export",
                    "health": "/api/healthz",
                },
            }

    return app


app = create_app()
