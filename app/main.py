from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, load_settings
from app.core.errors import register_exception_handlers
from app.db import RecordStore, build_record_store
from app.routers import categories, memories, prompts, uploads
from app.storage import StorageBackend, build_storage

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage the record store connection lifecycle."""
    if app.state.store is None:
        app.state.store = build_record_store()
    await app.state.store.connect()
    logger.info("Memory map API ready (storage=%s)", app.state.settings.storage_backend)
    yield
    await app.state.store.disconnect()


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    storage: Optional[StorageBackend] = None,
) -> FastAPI:
    """Build the API. Settings are validated once here and shared through app.state."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Memory Map API",
        description="Geotagged memories on a shared world map",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.storage = storage or build_storage(settings)

    register_exception_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(prompts.router)
    app.include_router(categories.router)
    app.include_router(memories.router)
    # Serve local uploads when STORAGE_BACKEND=local (file_url is /uploads/...)
    if settings.storage_backend == "local":
        app.include_router(uploads.router)

    @app.get("/")
    async def root():
        return {"message": "Memory Map API", "version": VERSION}

    return app


app = create_app()
