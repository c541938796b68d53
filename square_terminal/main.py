import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, HTTPException, status
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from square_terminal import __version__
from square_terminal.api import create_api_router
from square_terminal.core.config import Settings, get_settings
from square_terminal.core.container import ApplicationContainer
from square_terminal.core.logging import configure_logging
from square_terminal.modules.profiles import StoreRepository

BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent

logger = logging.getLogger(__name__)


def _resolve_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: ApplicationContainer = app.state.container
    store = await container.profiles.load()
    logger.info(
        "Loaded %d profile(s) from %s store, active %s",
        len(store.profiles),
        container.settings.persistence.backend,
        store.active_id,
    )
    yield


def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    store_repository: Optional[StoreRepository] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        description="Manual card payments and payment links over Square",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.container = ApplicationContainer(
        settings=settings,
        transport=transport,
        store_repository=store_repository,
    )

    if not settings.security.auth_enabled:
        logger.warning("No operator password configured, the API is open to anyone who can reach it")

    static_dir = _resolve_path(settings.static_dir)
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    @app.get("/", include_in_schema=False)
    async def homepage() -> FileResponse:
        index = static_dir / "index.html"
        if not index.is_file():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return FileResponse(index)

    return app


app = create_app()
